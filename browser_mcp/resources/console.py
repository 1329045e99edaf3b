"""Console log resource: the messages the active page printed since its last navigation."""

from browser_mcp.resources.types import RegisteredResource, ResourceContents

CONSOLE_URI = "console://logs"


async def _read_console(session, uri: str) -> list[ResourceContents]:
    entries = await session.acquire_console_log()
    return [
        ResourceContents(
            uri=uri,
            mime_type="text/plain",
            text="\n".join(str(entry) for entry in entries),
        )
    ]


def console_resource() -> RegisteredResource:
    return RegisteredResource(
        uri=CONSOLE_URI,
        name="Page console",
        mime_type="text/plain",
        reader=_read_console,
    )
