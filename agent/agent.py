"""Agent class: the core actor with the conversation loop."""

from __future__ import annotations
import asyncio
from typing import Callable, Iterable, TYPE_CHECKING

from agent.exceptions import DriveCancelledError, DriveError, TransportError
from agent.turns import Turn
from tools.tool_registry import ToolRegistry

if TYPE_CHECKING:
    from agent.agent_context import AgentContext

LogSink = Callable[["Agent", str], None]


class Agent:
    """
    Core agent with the conversation loop.
    Requests assistant turns, dispatches their tool calls, and repeats
    until the model stops asking for tools or the iteration ceiling hits.
    """

    def __init__(
        self,
        agent_id: int,
        context: "AgentContext",
        parent: "Agent | None" = None,
    ):
        self.agent_id = agent_id
        self.context = context
        self.config = context.config
        self.parent = parent
        self._logger = context.logger

        # Tool registry
        self.tool_registry = ToolRegistry(self)
        self.tool_registry.discover_tools()

    @property
    def max_iterations(self) -> int:
        return self.config.max_iterations

    # ── Conversation loop ────────────────────────────────────────────

    async def drive(
        self,
        turns: Iterable[Turn],
        log_sink: LogSink | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> list[Turn]:
        """
        Drive the conversation until a turn without tool calls.

        Returns the accumulated turn sequence. A transport failure raises
        DriveError carrying the sequence accumulated so far; reaching the
        iteration ceiling is not an error.
        """
        history = list(turns)
        if not history:
            raise ValueError("drive() needs at least one turn")

        sink = log_sink or self.context.on_text
        declarations = self.tool_registry.declarations

        for iteration in range(1, self.max_iterations + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise DriveCancelledError(
                    f"drive cancelled before iteration {iteration}", iteration, history
                )

            self._logger.info(
                "agent %d iteration %d: request with %d turn(s)",
                self.agent_id, iteration, len(history),
            )
            try:
                assistant = await self._request(history, declarations, cancel_event, iteration)
            except TransportError as e:
                self._logger.error(
                    "agent %d iteration %d: transport failed: %s", self.agent_id, iteration, e
                )
                raise DriveError(
                    f"error creating chat completion (iteration {iteration}): {e}",
                    iteration,
                    history,
                ) from e

            history.append(assistant)
            if assistant.text and sink:
                sink(self, assistant.text)

            if not assistant.has_tool_calls:
                return history

            # Sequential, in the order the model listed them
            for call in assistant.tool_calls:
                history.append(await self.tool_registry.dispatch(call))

        self._logger.warning(
            "agent %d stopped after reaching %d iterations", self.agent_id, self.max_iterations
        )
        return history

    async def _request(self, history, declarations, cancel_event, iteration) -> Turn:
        """Ask the transport for one assistant turn, racing the cancel event."""
        if cancel_event is None:
            return await self.context.client.complete(list(history), declarations)

        request = asyncio.ensure_future(
            self.context.client.complete(list(history), declarations)
        )
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait(
                {request, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        finally:
            cancelled.cancel()

        if request in done:
            return request.result()

        request.cancel()
        raise DriveCancelledError(
            f"drive cancelled during iteration {iteration}", iteration, history
        )

    # ── Delegation ───────────────────────────────────────────────────

    def spawn(self) -> "Agent":
        """Create a fresh sub-agent sharing this agent's context."""
        return self.context.create_agent(parent=self)
