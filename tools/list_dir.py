"""List directory tool: lists entries of a directory, optionally recursively."""

import os

from tools.base_tool import Tool


def _walk(root: str, current: str):
    """Yield paths relative to root, depth first, each directory before its contents."""
    with os.scandir(current) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        yield os.path.relpath(entry.path, root)
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(root, entry.path)


class ListDirTool(Tool):
    name = "list_dir"
    description = "List the contents of a given relative directory path."
    arg_schema = {"path": str, "recursive": bool}
    arg_descriptions = {
        "path": "The relative path of a directory in the working directory.",
        "recursive": "Whether to list the directory recursively",
    }
    required_args = ["path"]

    async def execute(self, **kwargs) -> str:
        path = kwargs["path"]
        if kwargs.get("recursive", False):
            return self._list_recursive(path)

        try:
            with os.scandir(path) as it:
                names = sorted(entry.name for entry in it)
        except OSError as e:
            return f"Error reading directory: {e}"
        return "".join(f"{name}\n" for name in names)

    def _list_recursive(self, path: str) -> str:
        try:
            paths = list(_walk(path, path))
        except OSError as e:
            return f"Error walking directory: {e}"
        return "".join(f"{p}\n" for p in paths)
