"""
Type definitions for tool descriptors and tool execution results.

This module provides:
- TextContent / ImageContent: the two content item shapes a tool can return
- ToolResult: the uniform response envelope ``{content, isError}``
- ToolDescriptor: what ``list_tools`` reports (name, description, inputSchema)
- RegisteredTool: a descriptor bound to its pydantic args model and handler
"""

import base64
from typing import Any, Awaitable, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str = Field(..., description="UTF-8 text payload")


class ImageContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["image"] = "image"
    data: str = Field(..., description="Base64 encoded image bytes")
    mime_type: str = Field(..., alias="mimeType", description="Image MIME type")


class ToolResult(BaseModel):
    """Response envelope shared by successful and failed tool calls."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[Union[TextContent, ImageContent]] = Field(default_factory=list)
    is_error: bool = Field(False, alias="isError")

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    @classmethod
    def image(cls, data: bytes, mime_type: str = "image/png") -> "ToolResult":
        encoded = base64.b64encode(data).decode("ascii")
        return cls(content=[ImageContent(data=encoded, mime_type=mime_type)])

    def as_text(self) -> str:
        """Join the text items; images are summarized by MIME type."""
        parts = []
        for item in self.content:
            if isinstance(item, TextContent):
                parts.append(item.text)
            else:
                parts.append(f"[{item.mime_type} image]")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(..., alias="inputSchema")


# handler(session: SessionContext, params: <args_schema instance>)
ToolHandler = Callable[..., Awaitable[ToolResult]]


class RegisteredTool(BaseModel):
    """A tool: unique name, description, args model and async handler."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str = Field(..., description="Unique tool name")
    description: str = Field(..., description="Human readable description")
    args_schema: type[BaseModel] = Field(
        ..., description="Pydantic model that validates and describes the arguments"
    )
    handler: ToolHandler = Field(
        ..., description="Coroutine called with the session and validated arguments"
    )

    @property
    def descriptor(self) -> ToolDescriptor:
        return ToolDescriptor(
            name=self.name,
            description=self.description,
            input_schema=self.args_schema.model_json_schema(),
        )
