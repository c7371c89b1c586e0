"""Async subprocess helper shared by the external tool adapters."""

import asyncio
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass

from conman.exceptions import MissingToolError
from conman.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of an external command."""

    returncode: int
    output: str


def require_tool(tool: str) -> str:
    """Resolve an external tool on PATH.

    Raises:
        MissingToolError: If the tool is not installed

    """
    path = shutil.which(tool)
    if path is None:
        msg = f"'{tool}' is not installed or not on PATH"
        raise MissingToolError(msg)
    return path


async def run_tool(
    tool: str,
    *args: str,
    env: Mapping[str, str] | None = None,
    capture: bool = True,  # noqa: FBT001, FBT002
) -> ProcessResult:
    """Run an external tool and wait for it.

    Args:
        tool: Executable name, resolved on PATH
        *args: Command arguments
        env: Extra environment variables on top of the current environment
        capture: Collect combined output instead of inheriting the terminal

    Returns:
        Exit code and captured output

    Raises:
        MissingToolError: If the tool is not installed

    """
    executable = require_tool(tool)
    process_env = {**os.environ, **env} if env else None
    stream = asyncio.subprocess.PIPE if capture else None

    logger.debug("Running: %s %s", tool, " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            env=process_env,
            stdout=stream,
            stderr=asyncio.subprocess.STDOUT if capture else None,
        )
    except FileNotFoundError as e:
        msg = f"'{tool}' could not be started: {e}"
        raise MissingToolError(msg) from e

    stdout, _ = await process.communicate()
    output = stdout.decode("utf-8", errors="ignore") if stdout else ""
    return ProcessResult(returncode=process.returncode or 0, output=output)
