"""Read file tool: returns the contents of a file."""

from tools.base_tool import Tool


class ReadFileTool(Tool):
    name = "read_file"
    description = (
        "Read the contents of a given relative file path. Use this when you want "
        "to see what's inside a file. Do not use this with directory names."
    )
    arg_schema = {"path": str}
    arg_descriptions = {"path": "The relative path of a file in the working directory."}
    required_args = ["path"]

    async def execute(self, **kwargs) -> str:
        path = kwargs["path"]
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as e:
            return f"Error reading file: {e}"
        return content.decode("utf-8", errors="replace")
