"""Turn, ToolCall and ToolDeclaration dataclasses."""

from __future__ import annotations
from dataclasses import dataclass, field

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
ROLE_TOOL = "tool"


@dataclass(frozen=True)
class ToolCall:
    """A model request to run a named tool with a raw JSON argument payload."""
    id: str
    name: str
    raw_arguments: str = "{}"


@dataclass(frozen=True)
class Turn:
    """One entry in a conversation history."""
    role: str
    text: str = ""
    tool_calls: tuple[ToolCall, ...] = field(default_factory=tuple)
    tool_call_id: str | None = None

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(role=ROLE_USER, text=text)

    @classmethod
    def assistant(cls, text: str = "", tool_calls=()) -> "Turn":
        return cls(role=ROLE_ASSISTANT, text=text, tool_calls=tuple(tool_calls))

    @classmethod
    def tool(cls, call_id: str, text: str) -> "Turn":
        return cls(role=ROLE_TOOL, text=text, tool_call_id=call_id)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)


@dataclass(frozen=True)
class ToolDeclaration:
    """Schema advertised to the model for one tool."""
    name: str
    description: str
    parameters: dict
