from vidamrr.models import Catalog, VideoRecord
from vidamrr.render import APP_NAME, render_frame, truncate
from vidamrr.session import Mode, SessionState, ViewScreen


def _catalog() -> Catalog:
    return Catalog(
        [
            VideoRecord("a", "https://youtu.be/a", "First", "http://x/a.jpg", "2024-01-01T00:00:00.000Z"),
            VideoRecord("b", "https://youtu.be/b", "Second", "http://x/b.jpg", "2024-01-02T00:00:00.000Z"),
        ]
    )


def test_truncate() -> None:
    assert truncate("") == ""
    assert truncate("short", 10) == "short"
    assert truncate("abcdefghijkl", 8) == "abcde..."
    assert truncate("line\nbreak", 20) == "line break"


def test_render_empty_catalog() -> None:
    lines = render_frame(SessionState(), Catalog())
    assert lines[0] == APP_NAME
    assert "  (no videos)" in lines
    assert "  Pick a video with /view" in lines
    assert lines[-2] == "Input: "
    assert lines[-1].startswith("Status: ")


def test_render_busy_header_and_prompt() -> None:
    state = SessionState(mode=Mode.PROMPT_URL, url_input="https://you", busy=True)
    lines = render_frame(state, Catalog())
    assert lines[0] == f"{APP_NAME} [BUSY]"
    assert lines[-2] == "YouTube URL: https://you"


def test_render_list_pointer() -> None:
    state = SessionState(mode=Mode.VIEW, selected_video_index=1)
    lines = render_frame(state, _catalog())
    assert "  1. First" in lines
    assert "> 2. Second" in lines
    assert "* Title: Second" in lines


def test_render_components_pointer() -> None:
    state = SessionState(
        mode=Mode.VIEW,
        view_screen=ViewScreen.COMPONENTS,
        selected_video_index=0,
        selected_component_index=2,
    )
    lines = render_frame(state, _catalog())
    assert "* 1. First" in lines
    assert "> URL: https://youtu.be/a" in lines
    assert "  Title: First" in lines
