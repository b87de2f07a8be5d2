"""Abstract base class for all tools."""

import json
from abc import ABC, abstractmethod

from agent.exceptions import ToolArgumentError
from agent.turns import ToolDeclaration

_JSON_TYPES = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
    list: "array",
    dict: "object",
}


class Tool(ABC):
    """Base class for all agent tools. Subclass this to create new tools."""

    name: str = ""
    description: str = ""
    arg_schema: dict[str, type] = {}
    arg_descriptions: dict[str, str] = {}
    required_args: list[str] = []

    def __init__(self, agent):
        self.agent = agent

    @abstractmethod
    async def execute(self, **kwargs) -> str:
        """Execute the tool and return the text of its result turn."""
        ...

    def declaration(self) -> ToolDeclaration:
        """Build the JSON-schema declaration advertised to the model."""
        properties = {}
        for arg, arg_type in self.arg_schema.items():
            prop = {"type": _JSON_TYPES.get(arg_type, "string")}
            if arg in self.arg_descriptions:
                prop["description"] = self.arg_descriptions[arg]
            properties[arg] = prop
        return ToolDeclaration(
            name=self.name,
            description=self.description,
            parameters={
                "type": "object",
                "properties": properties,
                "required": list(self.required_args),
            },
        )

    def parse_arguments(self, raw_arguments: str) -> dict:
        """Decode and check a raw JSON argument payload against arg_schema."""
        try:
            data = json.loads(raw_arguments or "{}")
        except (ValueError, TypeError, RecursionError) as e:
            raise ToolArgumentError(f"malformed JSON: {e}") from e
        if not isinstance(data, dict):
            raise ToolArgumentError("arguments must be a JSON object")

        kwargs = {}
        for arg, arg_type in self.arg_schema.items():
            value = data.get(arg)
            if value is None:
                if arg in self.required_args:
                    raise ToolArgumentError(f"missing required field '{arg}'")
                continue
            # bool is an int subclass; keep them apart
            if not isinstance(value, arg_type) or (arg_type is int and isinstance(value, bool)):
                raise ToolArgumentError(
                    f"field '{arg}' must be of type {_JSON_TYPES.get(arg_type, arg_type.__name__)}"
                )
            kwargs[arg] = value
        return kwargs
