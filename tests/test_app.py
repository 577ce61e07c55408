import asyncio
from pathlib import Path

from vidamrr.app import VidamrrApp
from vidamrr.metadata import VideoMetadata
from vidamrr.models import Catalog, VideoRecord
from vidamrr.render import APP_NAME
from vidamrr.session import Mode, Session
from vidamrr.storage import CatalogStore


class FakeFetcher:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.gate: asyncio.Event | None = None

    async def fetch(self, url: str) -> VideoMetadata:
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        return VideoMetadata(title="T", thumbnail="http://x/thumb.jpg")


class FakeClipboard:
    def __init__(self) -> None:
        self.values: list[str] = []

    async def copy(self, value: str) -> None:
        self.values.append(value)


def _app(
    tmp_path: Path,
    count: int = 0,
    fetcher: FakeFetcher | None = None,
    clipboard: FakeClipboard | None = None,
) -> VidamrrApp:
    records = [
        VideoRecord(
            id=f"id{index}",
            url=f"https://youtu.be/v{index}",
            title=f"Video {index}",
            thumbnail="http://x/thumb.jpg",
            created_at="2024-01-01T00:00:00.000Z",
        )
        for index in range(count)
    ]
    session = Session(
        Catalog(records),
        CatalogStore(tmp_path / "videos.json"),
        fetcher or FakeFetcher(),
        clipboard or FakeClipboard(),
    )
    return VidamrrApp(session)


def _run(app: VidamrrApp, *keys: str) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press(*keys)
            await app.workers.wait_for_complete()
            await pilot.pause()

    asyncio.run(scenario())


def _press_until_exit(app: VidamrrApp, *keys: str) -> None:
    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press(*keys)

    asyncio.run(scenario())


def test_key_after_enter_lands_in_fresh_buffer(tmp_path: Path) -> None:
    app = _app(tmp_path)
    _run(app, "/", "v", "i", "e", "w", "enter", "x")
    state = app.session.state
    assert state.in_list
    assert state.command_input == "x"
    assert state.status == "Showing 0 video(s)."


def test_arrows_after_enter_move_component_selection(tmp_path: Path) -> None:
    app = _app(tmp_path, count=2)
    _run(app, "/", "v", "i", "e", "w", "enter", "down", "enter", "down")
    state = app.session.state
    assert state.in_components
    assert state.selected_video_index == 1
    assert state.selected_component_index == 1


def test_tab_escape_and_q(tmp_path: Path) -> None:
    app = _app(tmp_path, count=1)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("/", "v", "i", "e", "w", "enter", "tab")
            assert app.session.state.in_components
            await pilot.press("tab")
            assert app.session.state.in_list
            await pilot.press("enter", "escape")
            assert app.session.state.in_list
            await pilot.press("q")
            assert app.session.state.mode is Mode.COMMAND
            await pilot.press("q")
            assert app.session.state.command_input == "q"

    asyncio.run(scenario())


def test_enter_copies_selected_row(tmp_path: Path) -> None:
    clipboard = FakeClipboard()
    app = _app(tmp_path, count=1, clipboard=clipboard)
    _run(app, "/", "v", "i", "e", "w", "enter", "enter", "enter")
    assert clipboard.values == ["Video 0"]
    assert app.session.state.status == "Title copied to clipboard."
    assert not app.session.state.busy


def test_busy_marker_painted_while_fetching(tmp_path: Path) -> None:
    fetcher = FakeFetcher()
    app = _app(tmp_path, fetcher=fetcher)
    keys = ["/", "n", "e", "w", "space", *"https://youtu.be/abc123", "enter"]

    async def scenario() -> None:
        fetcher.gate = asyncio.Event()
        async with app.run_test() as pilot:
            await pilot.press(*keys)
            await pilot.pause()
            assert app.session.state.busy
            assert app.last_frame[0] == f"{APP_NAME} [BUSY]"
            await pilot.press("/", "v", "enter")
            assert app.session.state.command_input == "/v"
            fetcher.gate.set()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert app.last_frame[0] == APP_NAME

    asyncio.run(scenario())
    assert fetcher.calls == ["https://youtu.be/abc123"]
    assert app.session.state.in_list
    assert not app.session.state.busy
    assert [video.url for video in app.session.catalog.all()] == ["https://youtu.be/abc123"]


def test_ctrl_c_exits_with_zero(tmp_path: Path) -> None:
    app = _app(tmp_path)
    _press_until_exit(app, "ctrl+c")
    assert app.session.state.exit_requested
    assert app.return_code == 0


def test_ctrl_c_abandons_pending_fetch(tmp_path: Path) -> None:
    fetcher = FakeFetcher()
    app = _app(tmp_path, fetcher=fetcher)
    keys = ["/", "n", "e", "w", "space", *"https://youtu.be/abc123", "enter"]

    async def scenario() -> None:
        fetcher.gate = asyncio.Event()
        async with app.run_test() as pilot:
            await pilot.press(*keys)
            await pilot.pause()
            await pilot.press("ctrl+c")

    asyncio.run(scenario())
    assert app.return_code == 0
    assert len(app.session.catalog) == 0
    assert not (tmp_path / "videos.json").exists()


def test_quit_command_exits_with_zero(tmp_path: Path) -> None:
    app = _app(tmp_path)
    _press_until_exit(app, "/", "q", "u", "i", "t", "enter")
    assert app.session.state.exit_requested
    assert app.return_code == 0
