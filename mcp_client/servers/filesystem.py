# mcp_client/servers/filesystem.py
# MCP server exposing file operations confined to a set of allowed directories.
# Tools:
#   - read_file(path)            - write_file(path, content)
#   - list_directory(path)       - create_directory(path)
#   - search_files(path, pattern)
#   - get_file_info(path)        - list_allowed_directories()
#
# Run:
#   python -m mcp_client.servers.filesystem DIR [DIR ...]

import logging
import stat
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, List, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

logger = logging.getLogger("filesystem")

mcp = FastMCP("filesystem")
allowed_directories: List[Path] = []


def set_allowed_directories(directories: List[str]) -> List[Path]:
    """Resolve and install the allowed roots. Raises ValueError for anything that isn't a directory."""
    roots = []
    for d in directories:
        root = Path(d).expanduser().resolve()
        if not root.is_dir():
            raise ValueError(f"Not a directory: {d}")
        roots.append(root)
    allowed_directories[:] = roots
    return roots


def validate_path(requested: str) -> Path:
    """Resolve ``requested`` (symlinks included) and check it lies inside an allowed root."""
    path = Path(requested).expanduser()
    if not path.is_absolute() and allowed_directories:
        path = allowed_directories[0] / path
    resolved = path.resolve()
    for root in allowed_directories:
        if resolved == root or root in resolved.parents:
            return resolved
    raise ValueError(f"Access denied - path outside allowed directories: {requested}")


def _fmt_time(ts: float) -> str:
    return datetime.fromtimestamp(ts).isoformat(timespec="seconds")


@mcp.tool()
def read_file(path: Annotated[str, Field(description="Path of the file to read")]) -> str:
    """Read the complete contents of a text file."""
    return validate_path(path).read_text(encoding="utf-8")


@mcp.tool()
def write_file(
    path: Annotated[str, Field(description="Path of the file to write")],
    content: Annotated[str, Field(description="Text to write")],
) -> str:
    """Create a new file or overwrite an existing one."""
    target = validate_path(path)
    target.write_text(content, encoding="utf-8")
    return f"Successfully wrote to {target}"


@mcp.tool()
def list_directory(path: Annotated[str, Field(description="Directory to list")]) -> str:
    """List files and directories, each prefixed with [DIR] or [FILE]."""
    target = validate_path(path)
    entries = sorted(target.iterdir(), key=lambda p: p.name)
    if not entries:
        return "Directory is empty"
    return "\n".join(f"{'[DIR]' if e.is_dir() else '[FILE]'} {e.name}" for e in entries)


@mcp.tool()
def create_directory(path: Annotated[str, Field(description="Directory to create")]) -> str:
    """Create a directory, including missing parents. Existing directories are fine."""
    target = validate_path(path)
    target.mkdir(parents=True, exist_ok=True)
    return f"Successfully created directory {target}"


@mcp.tool()
def search_files(
    path: Annotated[str, Field(description="Directory to search from")],
    pattern: Annotated[str, Field(description="Case-insensitive substring to match in names")],
) -> str:
    """Recursively find files and directories whose name contains ``pattern``."""
    root = validate_path(path)
    needle = pattern.lower()
    matches = []
    for p in sorted(root.rglob("*")):
        try:
            validate_path(str(p))
        except ValueError:
            # symlink pointing outside the allowed roots
            continue
        if needle in p.name.lower():
            matches.append(str(p))
    return "\n".join(matches) if matches else "No matches found"


@mcp.tool()
def get_file_info(path: Annotated[str, Field(description="File or directory to inspect")]) -> str:
    """Size, timestamps, type and permissions of a file or directory."""
    target = validate_path(path)
    st = target.stat()
    info = {
        "size": st.st_size,
        "created": _fmt_time(st.st_ctime),
        "modified": _fmt_time(st.st_mtime),
        "accessed": _fmt_time(st.st_atime),
        "isDirectory": target.is_dir(),
        "isFile": target.is_file(),
        "permissions": stat.filemode(st.st_mode),
    }
    return "\n".join(f"{k}: {v}" for k, v in info.items())


@mcp.tool()
def list_allowed_directories() -> str:
    """List the directories this server is allowed to access."""
    return "Allowed directories:\n" + "\n".join(str(d) for d in allowed_directories)


def main(argv: Optional[List[str]] = None) -> None:
    # FastMCP installs its own root handler on construction; replace it
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="[%(asctime)s] %(name)s %(levelname)s %(message)s",
        force=True,
    )
    args = sys.argv[1:] if argv is None else argv
    if not args:
        logger.error("Usage: python -m mcp_client.servers.filesystem DIR [DIR ...]")
        sys.exit(1)
    try:
        roots = set_allowed_directories(args)
    except ValueError as e:
        logger.error("%s", e)
        sys.exit(1)
    logger.info("Secure MCP Filesystem Server running on stdio, allowed: %s", ", ".join(map(str, roots)))
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
