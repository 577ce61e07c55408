from __future__ import annotations

import asyncio
import logging
import sys
from typing import Awaitable, Callable

from .errors import ClipboardUnavailable

logger = logging.getLogger(__name__)

Spawner = Callable[[list[str], bytes], Awaitable[int]]


def clipboard_command(platform: str | None = None) -> list[str]:
    platform = platform or sys.platform
    if platform == "darwin":
        return ["pbcopy"]
    if platform == "win32":
        return ["clip"]
    return ["xclip", "-selection", "clipboard"]


class ClipboardExporter:
    def __init__(self, platform: str | None = None, spawner: Spawner | None = None) -> None:
        self.platform = platform
        self._spawner = spawner or _spawn_with_input

    async def copy(self, value: str) -> None:
        command = clipboard_command(self.platform)
        try:
            returncode = await self._spawner(command, value.encode("utf-8"))
        except OSError as exc:
            logger.warning("Clipboard command %s unavailable: %s", command[0], exc)
            raise ClipboardUnavailable(
                f"Could not use the clipboard ({command[0]}: {exc.strerror or exc})."
            ) from exc
        if returncode != 0:
            logger.warning("Clipboard command %s exited with %s", command[0], returncode)
            raise ClipboardUnavailable()


async def _spawn_with_input(command: list[str], data: bytes) -> int:
    process = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.PIPE,
        stdout=asyncio.subprocess.DEVNULL,
        stderr=asyncio.subprocess.DEVNULL,
    )
    await process.communicate(data)
    return process.returncode if process.returncode is not None else 1
