from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Coroutine, Protocol

from .errors import CatalogError, DuplicateVideo, InvalidUrl, PersistenceFailure
from .metadata import VideoMetadata
from .models import Catalog, ComponentRow, VideoRecord, new_record
from .urls import normalize_video_url

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Type /new or /view. /help lists the commands."
HELP_STATUS = "Available commands: /new [url] /view /help /quit"
QUIT_COMMANDS = {"/quit", "/exit"}

Pending = Coroutine[Any, Any, None]


class Mode(Enum):
    COMMAND = "command"
    PROMPT_URL = "prompt_url"
    VIEW = "view"


class ViewScreen(Enum):
    LIST = "list"
    COMPONENTS = "components"


class KeyKind(Enum):
    UP = "up"
    DOWN = "down"
    SUBMIT = "submit"
    CANCEL = "cancel"
    BACKSPACE = "backspace"
    TAB = "tab"
    INTERRUPT = "interrupt"
    CHAR = "char"


@dataclass(frozen=True)
class KeyIntent:
    kind: KeyKind
    char: str = ""

    @classmethod
    def printable(cls, char: str) -> KeyIntent:
        return cls(KeyKind.CHAR, char)


@dataclass
class SessionState:
    mode: Mode = Mode.COMMAND
    view_screen: ViewScreen = ViewScreen.LIST
    command_input: str = ""
    url_input: str = ""
    selected_video_index: int = 0
    selected_component_index: int = 0
    busy: bool = False
    status: str = DEFAULT_STATUS
    exit_requested: bool = False

    @property
    def in_list(self) -> bool:
        return self.mode is Mode.VIEW and self.view_screen is ViewScreen.LIST

    @property
    def in_components(self) -> bool:
        return self.mode is Mode.VIEW and self.view_screen is ViewScreen.COMPONENTS


class Fetcher(Protocol):
    async def fetch(self, url: str) -> VideoMetadata: ...


class Clipboard(Protocol):
    async def copy(self, value: str) -> None: ...


class Store(Protocol):
    def save(self, records: tuple[VideoRecord, ...]) -> None: ...


class Session:
    """Modal controller driven by one key intent at a time.

    Submits that start a network or clipboard call hold ``state.busy`` until
    the call settles; any submit arriving meanwhile is dropped. Buffer edits
    and navigation are always applied.
    """

    def __init__(
        self,
        catalog: Catalog,
        store: Store,
        fetcher: Fetcher,
        clipboard: Clipboard,
        *,
        state: SessionState | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.fetcher = fetcher
        self.clipboard = clipboard
        self.state = state or SessionState()
        self.on_change = on_change
        self._clamp_selection()

    def selected_video(self) -> VideoRecord | None:
        if not self.catalog:
            return None
        return self.catalog.get(_clamp(self.state.selected_video_index, len(self.catalog)))

    def component_rows(self) -> list[ComponentRow]:
        video = self.selected_video()
        if video is None:
            return []
        return self.catalog.component_rows_for(video)

    async def handle(self, intent: KeyIntent) -> None:
        pending = self.apply(intent)
        if pending is not None:
            await pending

    def apply(self, intent: KeyIntent) -> Pending | None:
        """Apply the synchronous part of an intent.

        Returns the network or clipboard call a submit started, if any. The
        caller must await it; ``busy`` stays set until it settles.
        """
        kind = intent.kind
        if kind is KeyKind.INTERRUPT:
            self.state.exit_requested = True
        elif kind is KeyKind.UP:
            self._move(-1)
        elif kind is KeyKind.DOWN:
            self._move(1)
        elif kind is KeyKind.BACKSPACE:
            self._backspace()
        elif kind is KeyKind.CANCEL:
            self._cancel()
        elif kind is KeyKind.TAB:
            self._toggle_view_screen()
        elif kind is KeyKind.CHAR:
            if self.state.mode is Mode.VIEW and intent.char == "q":
                self._cancel()
            else:
                self._append(intent.char)
        elif kind is KeyKind.SUBMIT:
            return self.begin_submit()
        else:
            raise AssertionError(f"Unhandled key kind: {kind}")
        return None

    def begin_submit(self) -> Pending | None:
        state = self.state
        if state.busy:
            logger.debug("Submit ignored while busy")
            return None
        if state.mode is Mode.PROMPT_URL:
            url = state.url_input
            state.url_input = ""
            state.mode = Mode.COMMAND
            return self._begin_register(url)
        if state.mode is Mode.VIEW:
            if state.view_screen is ViewScreen.LIST:
                self._open_components()
                return None
            return self._begin_copy()
        command = state.command_input
        state.command_input = ""
        return self._begin_command(command)

    async def execute_command(self, raw: str) -> None:
        pending = self._begin_command(raw)
        if pending is not None:
            await pending

    async def register(self, raw_url: str) -> None:
        pending = self._begin_register(raw_url)
        if pending is not None:
            await pending

    async def copy_selected_component(self) -> None:
        pending = self._begin_copy()
        if pending is not None:
            await pending

    def _begin_command(self, raw: str) -> Pending | None:
        state = self.state
        text = raw.strip()
        if not text:
            state.status = "Type a command."
            return None
        parts = text.split(maxsplit=1)
        command = parts[0]
        argument = parts[1].strip() if len(parts) > 1 else ""

        if command == "/help":
            state.status = HELP_STATUS
        elif command in QUIT_COMMANDS:
            state.exit_requested = True
            state.status = "Bye."
        elif command == "/view":
            state.mode = Mode.VIEW
            state.view_screen = ViewScreen.LIST
            state.selected_component_index = 0
            self._clamp_selection()
            state.status = f"Showing {len(self.catalog)} video(s)."
        elif command == "/new":
            if argument:
                return self._begin_register(argument)
            state.mode = Mode.PROMPT_URL
            state.url_input = ""
            state.status = "Paste a YouTube URL and press Enter."
        else:
            state.status = f"Unknown command: {command}"
        return None

    def _begin_register(self, raw_url: str) -> Pending | None:
        state = self.state
        try:
            url = normalize_video_url(raw_url)
        except InvalidUrl as exc:
            state.status = exc.message
            return None
        if self.catalog.contains(url):
            state.status = DuplicateVideo().message
            return None

        state.busy = True
        state.status = "Fetching metadata..."
        self._notify()
        return self._finish_register(url)

    async def _finish_register(self, url: str) -> None:
        state = self.state
        try:
            metadata = await self.fetcher.fetch(url)
            if self.catalog.contains(url):
                raise DuplicateVideo()
            record = new_record(
                url,
                metadata.title,
                metadata.thumbnail,
                taken_ids=self.catalog.ids(),
            )
            index = self.catalog.append(record)
            try:
                self.store.save(self.catalog.all())
            except PersistenceFailure:
                self.catalog.pop_last()
                raise
            logger.info("Registered %s as %s", url, record.id)
            state.selected_video_index = index
            state.selected_component_index = 0
            state.mode = Mode.VIEW
            state.view_screen = ViewScreen.LIST
            state.status = "Video registered."
        except CatalogError as exc:
            logger.warning("Registration of %s failed: %s", url, exc)
            state.status = exc.message
        except Exception:
            logger.exception("Unexpected error registering %s", url)
            state.status = "Could not register the video."
        finally:
            state.busy = False

    def _begin_copy(self) -> Pending | None:
        state = self.state
        rows = self.component_rows()
        if not rows:
            state.status = "No video selected."
            return None
        row = rows[_clamp(state.selected_component_index, len(rows))]

        state.busy = True
        state.status = f"Copying {row.label}..."
        self._notify()
        return self._finish_copy(row)

    async def _finish_copy(self, row: ComponentRow) -> None:
        state = self.state
        try:
            await self.clipboard.copy(row.value)
            state.status = f"{row.label} copied to clipboard."
        except CatalogError as exc:
            state.status = exc.message
        except Exception:
            logger.exception("Unexpected clipboard error")
            state.status = "Clipboard copy failed."
        finally:
            state.busy = False

    def _open_components(self) -> None:
        if not self.catalog:
            self.state.status = "Nothing to open."
            return
        self._clamp_selection()
        self.state.view_screen = ViewScreen.COMPONENTS
        self.state.selected_component_index = 0

    def _toggle_view_screen(self) -> None:
        if self.state.mode is not Mode.VIEW:
            return
        if self.state.view_screen is ViewScreen.LIST:
            self._open_components()
        else:
            self.state.view_screen = ViewScreen.LIST

    def _cancel(self) -> None:
        state = self.state
        if state.mode is Mode.VIEW:
            if state.view_screen is ViewScreen.COMPONENTS:
                state.view_screen = ViewScreen.LIST
                return
            state.mode = Mode.COMMAND
            state.status = "Command mode."
        elif state.mode is Mode.PROMPT_URL:
            state.url_input = ""
            state.mode = Mode.COMMAND
            state.status = "Command mode."

    def _move(self, delta: int) -> None:
        state = self.state
        if state.mode is not Mode.VIEW or not self.catalog:
            return
        if state.view_screen is ViewScreen.LIST:
            state.selected_video_index = _clamp(
                state.selected_video_index + delta, len(self.catalog)
            )
            return
        rows = self.component_rows()
        state.selected_component_index = _clamp(
            state.selected_component_index + delta, len(rows)
        )

    def _append(self, char: str) -> None:
        if len(char) != 1:
            return
        if self.state.mode is Mode.PROMPT_URL:
            self.state.url_input += char
        else:
            self.state.command_input += char

    def _backspace(self) -> None:
        if self.state.mode is Mode.PROMPT_URL:
            self.state.url_input = self.state.url_input[:-1]
        else:
            self.state.command_input = self.state.command_input[:-1]

    def _clamp_selection(self) -> None:
        count = len(self.catalog)
        self.state.selected_video_index = _clamp(self.state.selected_video_index, count)
        rows = self.component_rows()
        self.state.selected_component_index = _clamp(
            self.state.selected_component_index, len(rows)
        )

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change()


def _clamp(value: int, count: int) -> int:
    if count <= 0:
        return 0
    return max(0, min(value, count - 1))
