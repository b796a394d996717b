import time

from conchpad.ui import screen


def frame_lines(output: bytes):
    """Split a frame into its text rows, status bar and message bar."""
    assert output.startswith(screen.HIDE_CURSOR + screen.CURSOR_HOME)
    assert output.endswith(screen.SHOW_CURSOR)
    body = output[len(screen.HIDE_CURSOR + screen.CURSOR_HOME):]
    return body.split(b"\r\n")


def test_frame_is_a_single_write(make_context):
    context = make_context([b"hello"])
    screen.refresh_screen(context)
    assert len(context.terminal.writes) == 1


def test_welcome_banner_on_empty_buffer(make_context):
    context = make_context(rows=26, cols=80)
    assert (context.screenrows, context.screencols) == (24, 80)
    screen.refresh_screen(context)
    lines = frame_lines(bytes(context.terminal.output))

    welcome = screen.WELCOME.encode()
    padding = (80 - len(welcome)) // 2
    assert lines[8] == b"~" + b" " * (padding - 1) + welcome + screen.ERASE_LINE
    for y in range(24):
        if y != 8:
            assert lines[y] == b"~" + screen.ERASE_LINE


def test_no_banner_when_buffer_has_rows(make_context):
    context = make_context([b"text"])
    screen.refresh_screen(context)
    assert screen.WELCOME.encode() not in context.terminal.output


def test_banner_is_clipped_to_narrow_screen(make_context):
    context = make_context(rows=26, cols=10)
    screen.refresh_screen(context)
    lines = frame_lines(bytes(context.terminal.output))
    assert lines[8] == screen.WELCOME.encode()[:10] + screen.ERASE_LINE


def test_rows_are_rendered_and_clipped(make_context):
    context = make_context([b"\tx", b"y" * 100], cols=20)
    screen.refresh_screen(context)
    lines = frame_lines(bytes(context.terminal.output))
    assert lines[0] == b" " * 8 + b"x" + screen.ERASE_LINE
    assert lines[1] == b"y" * 20 + screen.ERASE_LINE
    assert lines[2] == b"~" + screen.ERASE_LINE


def test_status_bar(make_context):
    context = make_context([b"a", b"b"], filename="notes.txt")
    context.buffer.insert_char(0, 0, ord("x"))
    context.cy = 1
    screen.refresh_screen(context)
    status = frame_lines(bytes(context.terminal.output))[24]
    assert status.startswith(screen.REVERSE_VIDEO)
    assert status.endswith(screen.RESET_ATTRS)
    text = status[len(screen.REVERSE_VIDEO):-len(screen.RESET_ATTRS)]
    assert len(text) == 80
    assert text.startswith(b"notes.txt - 2 lines (modified)")
    assert text.endswith(b" 2/2")


def test_status_bar_without_file_name(make_context):
    context = make_context()
    screen.refresh_screen(context)
    status = frame_lines(bytes(context.terminal.output))[24]
    assert b"[No Name] - 0 lines" in status
    assert b"(modified)" not in status


def test_status_bar_truncates_file_name(make_context):
    context = make_context([b"a"], filename="a_really_long_file_name_indeed.txt")
    screen.refresh_screen(context)
    status = frame_lines(bytes(context.terminal.output))[24]
    assert b"a_really_long_file_n - 1 lines" in status


def test_fit_width_counts_wide_characters():
    assert screen.fit_width("abc", 2) == "ab"
    assert screen.fit_width("日本語", 4) == "日本"
    assert screen.text_width("日本") == 4


def test_message_bar_shows_fresh_message(make_context):
    context = make_context([b"a"])
    screen.set_status_message(context, "hello there")
    screen.refresh_screen(context)
    message = frame_lines(bytes(context.terminal.output))[25]
    assert message.startswith(screen.ERASE_LINE + b"hello there")


def test_message_bar_hides_expired_message(make_context):
    context = make_context([b"a"])
    screen.set_status_message(context, "old news")
    context.status_time = time.time() - 10
    screen.refresh_screen(context)
    assert b"old news" not in context.terminal.output


def test_scroll_follows_cursor_down_and_back(make_context):
    context = make_context([b"line"] * 100)
    context.cy = 30
    screen.scroll(context)
    assert context.rowoff == 30 - 24 + 1
    context.cy = 3
    screen.scroll(context)
    assert context.rowoff == 3


def test_scroll_horizontally_uses_render_column(make_context):
    context = make_context([b"\t" * 20], cols=40)
    context.cx = 10
    screen.scroll(context)
    assert context.rx == 80
    assert context.coloff == 80 - 40 + 1
    context.cx = 0
    screen.scroll(context)
    assert context.coloff == 0


def test_cursor_is_placed_relative_to_viewport(make_context):
    context = make_context([b"line"] * 100)
    context.cy = 30
    context.cx = 2
    screen.refresh_screen(context)
    output = bytes(context.terminal.output)
    assert output.endswith(b"\x1b[24;3H" + screen.SHOW_CURSOR)


def test_prompt_returns_typed_text(make_context):
    context = make_context(data=b"out.txt\r")
    assert screen.prompt_input(context, "Save as: {}") == "out.txt"
    assert context.status_message == ""


def test_prompt_supports_backspace(make_context):
    context = make_context(data=b"abx\x7fc\r")
    assert screen.prompt_input(context, "{}") == "abc"


def test_prompt_ignores_empty_enter(make_context):
    context = make_context(data=b"\r\rz\r")
    assert screen.prompt_input(context, "{}") == "z"


def test_prompt_cancelled_with_escape(make_context):
    context = make_context(data=b"abc\x1b")
    assert screen.prompt_input(context, "{}") is None


def test_prompt_updates_message_bar_each_key(make_context):
    context = make_context(data=b"ab\r")
    screen.prompt_input(context, "Name: {}")
    frames = context.terminal.writes
    assert len(frames) == 3
    assert b"Name: a" in frames[1]
    assert b"Name: ab" in frames[2]


def test_welcome_banner_row_follows_terminal_height(make_context):
    context = make_context(rows=24, cols=80)
    screen.refresh_screen(context)
    lines = frame_lines(bytes(context.terminal.output))
    banner_rows = [y for y, line in enumerate(lines) if screen.WELCOME.encode() in line]
    assert banner_rows == [8]
    assert lines[8].startswith(b"~ ")
