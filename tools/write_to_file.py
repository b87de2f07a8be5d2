"""Write file tool: writes content to a file, creating parent directories."""

import os

from tools.base_tool import Tool


class WriteToFileTool(Tool):
    name = "write_to_file"
    description = "Write content to a file, overwriting it if it exists."
    arg_schema = {"path": str, "content": str}
    arg_descriptions = {
        "path": "The relative path of a file in the working directory.",
        "content": "The content to write to the file. This will overwrite the file if it exists.",
    }
    required_args = ["path", "content"]

    async def execute(self, **kwargs) -> str:
        path = kwargs["path"]
        content = kwargs["content"]

        parent = os.path.dirname(path)
        if parent:
            try:
                os.makedirs(parent, exist_ok=True)
            except OSError as e:
                return f"Error creating directory: {e}"

        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            return f"Error writing file: {e}"
        return "File written successfully."
