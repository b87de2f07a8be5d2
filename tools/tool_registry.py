"""Tool discovery and dispatch registry."""

import os
import importlib
import inspect

from agent.exceptions import ToolArgumentError
from agent.turns import ToolCall, ToolDeclaration, Turn
from tools.base_tool import Tool


class ToolRegistry:
    """Discovers tools from the filesystem and dispatches tool calls.

    Built once per agent; the set of tools never changes afterwards.
    """

    def __init__(self, agent):
        self.agent = agent
        self._tool_classes: dict[str, type[Tool]] = {}
        self._declarations: list[ToolDeclaration] | None = None

    def discover_tools(self, tools_dir: str = None):
        """Scan the tools/ directory and register all Tool subclasses."""
        if tools_dir is None:
            tools_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)))

        for filename in sorted(os.listdir(tools_dir)):
            if not filename.endswith(".py") or filename.startswith("_") or filename in (
                "base_tool.py", "tool_registry.py", "__init__.py"
            ):
                continue

            module_name = f"tools.{filename[:-3]}"
            module = importlib.import_module(module_name)
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if issubclass(obj, Tool) and obj is not Tool and obj.name:
                    self._tool_classes[obj.name] = obj

    def get_tool(self, name: str) -> Tool | None:
        """Instantiate and return a tool by name."""
        cls = self._tool_classes.get(name)
        if cls:
            return cls(self.agent)
        return None

    @property
    def tool_names(self) -> list[str]:
        """List all registered tool names."""
        return sorted(self._tool_classes.keys())

    @property
    def declarations(self) -> list[ToolDeclaration]:
        """Declarations for every registered tool, ordered by name."""
        if self._declarations is None:
            self._declarations = [
                self._tool_classes[name](self.agent).declaration()
                for name in self.tool_names
            ]
        return list(self._declarations)

    async def dispatch(self, call: ToolCall) -> Turn:
        """Run one tool call. Always returns exactly one tool turn."""
        logger = self.agent.context.logger
        observer = self.agent.context.on_tool_call
        if observer:
            try:
                observer(self.agent, call)
            except Exception:
                logger.exception("agent %d: tool call observer failed", self.agent.agent_id)

        tool = self.get_tool(call.name)
        if tool is None:
            logger.warning("agent %d: unknown tool %r", self.agent.agent_id, call.name)
            return Turn.tool(call.id, f"Unknown tool: {call.name}")

        try:
            kwargs = tool.parse_arguments(call.raw_arguments)
        except ToolArgumentError as e:
            logger.warning("agent %d: invalid arguments for %s: %s", self.agent.agent_id, call.name, e)
            return Turn.tool(call.id, f"Invalid arguments: {e}")

        logger.info("agent %d: tool call %s (%s)", self.agent.agent_id, call.name, call.id)
        try:
            text = await tool.execute(**kwargs)
        except Exception as e:
            logger.exception("agent %d: tool %s failed", self.agent.agent_id, call.name)
            return Turn.tool(call.id, f"Tool '{call.name}' error: {e}")
        return Turn.tool(call.id, text)
