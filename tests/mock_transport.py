"""Scripted transport double recording every request."""

import asyncio
import json

from agent.exceptions import TransportError
from agent.turns import ToolCall, Turn


class MockTransport:
    """Returns queued assistant turns (or raises queued errors) in order."""

    def __init__(self):
        self.responses: list = []
        self.requests: list[list[Turn]] = []
        self.declarations: list = []
        self.call_count = 0

    def add_response(self, text: str = "", tool_calls=()) -> None:
        self.responses.append(Turn.assistant(text, tool_calls))

    def add_error(self, error: Exception | None = None) -> None:
        self.responses.append(error or TransportError("boom"))

    async def complete(self, turns, tools) -> Turn:
        self.call_count += 1
        self.requests.append(list(turns))
        self.declarations.append(list(tools))
        await asyncio.sleep(0)
        if not self.responses:
            raise TransportError("no more scripted responses")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class LoopingTransport(MockTransport):
    """Always answers with one more tool call."""

    async def complete(self, turns, tools) -> Turn:
        self.call_count += 1
        self.requests.append(list(turns))
        await asyncio.sleep(0)
        return Turn.assistant("", [
            make_call(f"call-{self.call_count}", "list_dir", {"path": "."})
        ])


def make_call(call_id: str, name: str, args) -> ToolCall:
    raw = args if isinstance(args, str) else json.dumps(args)
    return ToolCall(id=call_id, name=name, raw_arguments=raw)
