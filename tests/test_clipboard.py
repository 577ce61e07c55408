import asyncio

import pytest

from vidamrr.clipboard import ClipboardExporter, clipboard_command
from vidamrr.errors import ClipboardUnavailable


def test_clipboard_command_per_platform() -> None:
    assert clipboard_command("darwin") == ["pbcopy"]
    assert clipboard_command("win32") == ["clip"]
    assert clipboard_command("linux") == ["xclip", "-selection", "clipboard"]
    assert clipboard_command("freebsd13") == ["xclip", "-selection", "clipboard"]


def test_copy_sends_value_to_command() -> None:
    calls: list[tuple[list[str], bytes]] = []

    async def spawner(command: list[str], data: bytes) -> int:
        calls.append((command, data))
        return 0

    exporter = ClipboardExporter(platform="darwin", spawner=spawner)
    asyncio.run(exporter.copy("My Video"))
    assert calls == [(["pbcopy"], b"My Video")]


def test_copy_non_zero_exit() -> None:
    async def spawner(command: list[str], data: bytes) -> int:
        return 1

    exporter = ClipboardExporter(platform="linux", spawner=spawner)
    with pytest.raises(ClipboardUnavailable):
        asyncio.run(exporter.copy("value"))


def test_copy_missing_command() -> None:
    async def spawner(command: list[str], data: bytes) -> int:
        raise FileNotFoundError(2, "No such file or directory")

    exporter = ClipboardExporter(platform="linux", spawner=spawner)
    with pytest.raises(ClipboardUnavailable, match="xclip"):
        asyncio.run(exporter.copy("value"))
