from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.widgets import Static

from .clipboard import ClipboardExporter
from .config import AppConfig, ensure_config
from .keys import key_intent
from .logging_setup import configure_logging
from .metadata import MetadataFetcher
from .models import Catalog
from .paths import config_path, default_data_path, log_path
from .render import render_frame
from .session import KeyIntent, KeyKind, Pending, Session, SessionState
from .storage import CatalogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Options:
    data_file: Path
    timeout: float
    endpoint: str
    debug: bool
    status: str | None


class VidamrrApp(App):
    BINDINGS = [
        Binding("ctrl+c", "interrupt", "Quit", priority=True, show=False),
    ]
    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        background: $background;
        color: $text;
    }

    #root {
        height: 100%;
        padding: 0 1;
    }

    #frame {
        width: 100%;
    }
    """

    def __init__(self, session: Session) -> None:
        super().__init__()
        self.session = session
        self.session.on_change = self._render_frame
        self.last_frame: list[str] = []
        self._frame: Static | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static("", id="frame", markup=False)

    def on_mount(self) -> None:
        self._frame = self.query_one("#frame", Static)
        self._render_frame()
        logger.info("Session started with %d video(s)", len(self.session.catalog))

    def on_key(self, event: events.Key) -> None:
        intent = key_intent(event.key, event.character)
        if intent is None:
            return
        event.stop()
        event.prevent_default()
        self._dispatch(intent)

    def action_interrupt(self) -> None:
        self._dispatch(KeyIntent(KeyKind.INTERRUPT))

    def _dispatch(self, intent: KeyIntent) -> None:
        # Buffers, mode and busy change here, in key order; only the call a
        # submit started is left to a worker.
        pending = self.session.apply(intent)
        self._render_frame()
        if self.session.state.exit_requested:
            if pending is not None:
                pending.close()
            logger.info("Exit requested")
            self.exit(return_code=0)
            return
        if pending is not None:
            self.run_worker(self._settle(pending), group="session", exit_on_error=False)

    async def _settle(self, pending: Pending) -> None:
        await pending
        self._render_frame()

    def _render_frame(self) -> None:
        lines = render_frame(self.session.state, self.session.catalog)
        self.last_frame = lines
        if self._frame is None:
            return
        self._frame.update(_frame_text(lines))


def _frame_text(lines: list[str]) -> Text:
    text = Text()
    last = len(lines) - 1
    for index, line in enumerate(lines):
        if index == 0:
            text.append(line, style="bold")
        elif index == last:
            text.append(line, style="italic")
        elif line.startswith(">"):
            text.append(line, style="reverse")
        else:
            text.append(line)
        if index != last:
            text.append("\n")
    return text


def build_session(options: _Options) -> Session:
    store = CatalogStore(options.data_file)
    catalog = Catalog(store.load())
    state = SessionState()
    if options.status:
        state.status = options.status
    return Session(
        catalog,
        store,
        MetadataFetcher(endpoint=options.endpoint, timeout=options.timeout),
        ClipboardExporter(),
        state=state,
    )


def _cli_help_text() -> str:
    return (
        "vidamrr - terminal catalog of YouTube bookmarks\n\n"
        "Usage: vidamrr [--data-file PATH] [--timeout SECONDS] [--debug]\n\n"
        "Inside the session type /new <url>, /view, /help or /quit.\n"
        f"Config file: {config_path()}\n"
        f"Log file: {log_path()}\n"
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vidamrr", add_help=False)
    parser.add_argument("-h", "-help", "--help", action="store_true", dest="show_help")
    parser.add_argument("--data-file", help="Path to the videos JSON file")
    parser.add_argument("--timeout", type=float, help="Metadata request timeout in seconds")
    parser.add_argument("--debug", action="store_true", help="Write debug logs")
    return parser


def _resolve_options(args: argparse.Namespace, config: AppConfig, error: str | None) -> _Options:
    if args.data_file:
        data_file = Path(args.data_file).expanduser()
    elif config.data_file:
        data_file = Path(config.data_file).expanduser()
    else:
        data_file = default_data_path()
    timeout = config.fetch_timeout
    if args.timeout is not None and args.timeout > 0:
        timeout = args.timeout
    return _Options(
        data_file=data_file,
        timeout=timeout,
        endpoint=config.oembed_endpoint,
        debug=args.debug,
        status=error,
    )


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.show_help:
        print(_cli_help_text())
        return
    config, error = ensure_config()
    options = _resolve_options(args, config, error)
    configure_logging(debug=options.debug)
    if error:
        logger.warning(error)
    app = VidamrrApp(build_session(options))
    app.run()
    sys.exit(app.return_code or 0)
