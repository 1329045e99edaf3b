"""Resource descriptors exposed next to the tools."""

from typing import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field


class ResourceContents(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    mime_type: str = Field("text/plain", alias="mimeType")
    text: str


# reader(session: SessionContext, uri: str) -> list[ResourceContents]
ResourceReader = Callable[..., Awaitable[list[ResourceContents]]]


class RegisteredResource(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    uri: str = Field(..., description="Unique resource URI")
    name: str = Field(..., description="Display name")
    mime_type: str = Field("text/plain", description="MIME type of the contents")
    reader: ResourceReader = Field(..., description="Coroutine producing the contents")
