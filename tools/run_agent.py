"""Run agent tool: delegates a task to a fresh sub-agent."""

from agent.exceptions import DriveError
from agent.turns import Turn
from tools.base_tool import Tool


class RunAgentTool(Tool):
    name = "run_agent"
    description = (
        "Run a sub-agent with its own fresh conversation to complete a task. "
        "The sub-agent has the same tools and returns everything it said, "
        "ending with its final answer."
    )
    arg_schema = {"task": str}
    arg_descriptions = {"task": "The complete description of the task for the sub-agent."}
    required_args = ["task"]

    async def execute(self, **kwargs) -> str:
        task = kwargs["task"]
        header = f"Agent task: {task}"
        collected: list[str] = []
        on_text = self.agent.context.on_text

        def sink(agent, text: str):
            collected.append(text)
            if on_text:
                on_text(agent, text)

        subordinate = self.agent.spawn()
        try:
            await subordinate.drive([Turn.user(task)], log_sink=sink)
        except DriveError as e:
            return f"{header}\nError: {e}"

        return header + "\n\n" + "\n".join(collected)
