from __future__ import annotations

from typing import Sequence

from .models import Catalog, ComponentRow, VideoRecord
from .session import Mode, SessionState

APP_NAME = "VidaMRR Manager"
RULE_WIDTH = 90
COMMAND_REFERENCE = [
    "Commands:",
    "  /new <url>   Register a YouTube video",
    "  /view        Browse saved videos",
    "  /help        Show help",
    "  /quit        Quit",
    "",
    "In /view:",
    "  Arrows: move",
    "  Enter: open video / copy field to clipboard",
    "  Tab: switch between list and fields",
    "  Esc or q: back",
]


def truncate(text: str, limit: int = 74) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    if len(text) <= limit:
        return text
    return f"{text[: limit - 3]}..."


def render_frame(state: SessionState, catalog: Catalog) -> list[str]:
    videos = catalog.all()
    selected = _selected(videos, state.selected_video_index)
    return [
        _header(state),
        "=" * RULE_WIDTH,
        *COMMAND_REFERENCE,
        "-" * RULE_WIDTH,
        *_video_lines(state, videos),
        "-" * RULE_WIDTH,
        *_detail_lines(state, catalog, selected),
        "-" * RULE_WIDTH,
        _input_line(state),
        f"Status: {state.status}",
    ]


def _header(state: SessionState) -> str:
    return f"{APP_NAME} [BUSY]" if state.busy else APP_NAME


def _selected(videos: Sequence[VideoRecord], index: int) -> VideoRecord | None:
    if not videos:
        return None
    return videos[max(0, min(index, len(videos) - 1))]


def _video_lines(state: SessionState, videos: Sequence[VideoRecord]) -> list[str]:
    lines = ["Saved videos:"]
    if not videos:
        lines.append("  (no videos)")
        return lines
    for index, video in enumerate(videos):
        pointer = " "
        if index == state.selected_video_index:
            pointer = ">" if state.in_list else "*"
        lines.append(f"{pointer} {index + 1}. {truncate(video.title, 68)}")
    return lines


def _detail_lines(
    state: SessionState, catalog: Catalog, video: VideoRecord | None
) -> list[str]:
    lines = ["Details:"]
    if video is None:
        lines.append("  Pick a video with /view")
        return lines
    rows: list[ComponentRow] = catalog.component_rows_for(video)
    for index, row in enumerate(rows):
        pointer = " "
        if index == state.selected_component_index:
            pointer = ">" if state.in_components else "*"
        lines.append(f"{pointer} {row.label}: {truncate(row.value, 64)}")
    return lines


def _input_line(state: SessionState) -> str:
    if state.mode is Mode.PROMPT_URL:
        return f"YouTube URL: {state.url_input}"
    return f"Input: {state.command_input}"
