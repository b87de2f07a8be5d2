"""AgentContext: session container shared across all agents in a hierarchy."""

from __future__ import annotations
import uuid
from typing import Callable, TYPE_CHECKING
from agent.config import AgentConfig
from agent.log_utils import build_file_logger
from agent.turns import ToolCall

if TYPE_CHECKING:
    from agent.agent import Agent


class AgentContext:
    """
    A conversational session. One per user interaction.
    Shared across all agents in the hierarchy (Agent 0 + sub-agents).
    Carries the transport and output callbacks, never conversation turns.
    """

    def __init__(self, config: AgentConfig, client, session_id: str | None = None):
        self.id: str = session_id or uuid.uuid4().hex[:12]
        self.config = config
        self.client = client
        self.agents: dict[int, "Agent"] = {}
        self.on_text: Callable[["Agent", str], None] | None = None
        self.on_tool_call: Callable[["Agent", ToolCall], None] | None = None
        self.logger = build_file_logger(f"agent.{self.id}", config.log_dir)
        self._next_id = 0

    def create_agent(self, parent: "Agent | None" = None) -> "Agent":
        """Create and register an agent in this context."""
        from agent.agent import Agent

        agent = Agent(agent_id=self._next_id, context=self, parent=parent)
        self.agents[agent.agent_id] = agent
        self._next_id += 1
        return agent

    def get_agent(self, agent_id: int) -> "Agent | None":
        return self.agents.get(agent_id)
