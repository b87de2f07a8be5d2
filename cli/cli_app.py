"""Interactive CLI for the file agent."""

import sys
from agent.agent_context import AgentContext
from agent.config import AgentConfig
from agent.exceptions import DriveError
from agent.log_utils import build_file_logger
from agent.models import ChatClient
from agent.turns import Turn
from cli.input_manager import DEFAULT_PROMPT, InputManager


# ANSI color codes
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
MAGENTA = "\033[35m"

AGENT_COLORS = [GREEN, CYAN, MAGENTA, YELLOW]


def agent_color(agent_id: int) -> str:
    return AGENT_COLORS[agent_id % len(AGENT_COLORS)]


class CLIApp:
    """Interactive REPL driving the root agent once per user line."""

    def __init__(self, config: AgentConfig, client=None, input_manager: InputManager | None = None):
        self.config = config
        self.client = client or ChatClient(
            base_url=config.chat_model.base_url,
            model=config.chat_model.model_name,
            api_key=config.chat_model.api_key,
            connect_timeout=config.transport.connect_timeout,
            read_timeout=config.transport.read_timeout,
            max_retries=config.transport.max_retries,
            logger=build_file_logger("agent.transport", config.log_dir),
        )
        self.input_manager = input_manager or InputManager(
            prompt=DEFAULT_PROMPT,
            window=config.interrupt_window,
        )
        self.context: AgentContext | None = None
        self.conversation: list[Turn] = []

    async def run(self):
        """Main REPL loop."""
        self._print_banner()
        self._new_session()

        self.input_manager.start()
        try:
            while True:
                sys.stdout.write(self.input_manager.prompt)
                sys.stdout.flush()
                user_input, ok = await self.input_manager.get_input()
                if not ok:
                    print(f"\n{DIM}Goodbye!{RESET}")
                    break

                if not user_input.strip():
                    continue

                command = user_input.strip().lower()
                if command in ("/exit", "/quit"):
                    print(f"{DIM}Goodbye!{RESET}")
                    break
                if command in ("/reset", "/new"):
                    self._new_session()
                    print(f"{DIM}[Session reset]{RESET}")
                    continue
                if command == "/help":
                    self._print_help()
                    continue

                await self.handle_line(user_input)
        finally:
            self.input_manager.close()

    async def handle_line(self, user_input: str) -> None:
        """Append the user turn and drive the root agent to a pause point."""
        agent = self.context.get_agent(0)
        try:
            self.conversation = await agent.drive(
                self.conversation + [Turn.user(user_input)]
            )
        except DriveError as e:
            self.conversation = e.turns
            print(f"{RED}Error: {e}{RESET}")

    def _text_handler(self, agent, text: str):
        """Print assistant text, tagging sub-agents with their ID."""
        if agent.agent_id == 0:
            print(f"{BOLD}{GREEN}Assistant:{RESET} {text}")
        else:
            color = agent_color(agent.agent_id)
            print(f"{color}{DIM}[Agent {agent.agent_id}]{RESET} {text}")

    def _tool_call_handler(self, agent, call):
        print(f"{DIM}Tool call: {call.name}{RESET}")

    def _new_session(self):
        """Create a fresh session."""
        self.context = AgentContext(self.config, self.client)
        self.context.on_text = self._text_handler
        self.context.on_tool_call = self._tool_call_handler
        self.context.create_agent()
        self.conversation = []

    def _print_banner(self):
        print(
            f"{BOLD}{CYAN}Chat with {self.config.chat_model.model_name}{RESET} "
            f"{DIM}(single ctrl-c to clear input, double ctrl-c to quit){RESET}"
        )

    def _print_help(self):
        print(f"""
{BOLD}Commands:{RESET}
  {CYAN}/reset{RESET} : Start a new conversation
  {CYAN}/help{RESET}  : Show this help
  {CYAN}/exit{RESET}  : Quit

{BOLD}How it works:{RESET}
  Each message is sent to the model with the read_file, list_dir,
  write_to_file and run_agent tools. Tool calls run in order and
  their results go back to the model until it answers without
  tools. run_agent hands a task to a fresh sub-agent.
""")
