"""
conchpad/ui/screen.py

Implements all drawing for the ConchPad text editor: viewport scrolling, the text rows,
the reverse-video status bar, the message bar and the line prompt. Every refresh builds
one byte buffer of VT100 escape sequences and hands it to the terminal in a single write.
"""

import time
from wcwidth import wcwidth

from conchpad import logger
from conchpad.ui import keys

VERSION = "0.0.1"
WELCOME = f"ConchPad editor -- version {VERSION}"

# Widest file name shown in the status bar
STATUS_FILENAME_WIDTH = 20

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
ERASE_LINE = b"\x1b[K"
REVERSE_VIDEO = b"\x1b[7m"
RESET_ATTRS = b"\x1b[m"


def char_width(ch: str) -> int:
    """Columns taken by `ch`; control characters count as zero."""
    return max(wcwidth(ch), 0)


def text_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def fit_width(text: str, width: int) -> str:
    """Trim `text` so that its visual width is at most `width` columns."""
    used = 0
    for i, ch in enumerate(text):
        used += char_width(ch)
        if used > width:
            return text[:i]
    return text


def set_status_message(context, message: str):
    """Show `message` in the message bar for the configured timeout."""
    context.status_message = message
    context.status_time = time.time()


def scroll(context):
    """
    Recompute the render column and move the viewport so that the cursor is visible.
    """
    buf = context.buffer
    context.rx = 0
    if context.cy < buf.numrows:
        context.rx = buf.rows[context.cy].cx_to_rx(context.cx)

    if context.cy < context.rowoff:
        context.rowoff = context.cy
    if context.cy >= context.rowoff + context.screenrows:
        context.rowoff = context.cy - context.screenrows + 1
    if context.rx < context.coloff:
        context.coloff = context.rx
    if context.rx >= context.coloff + context.screencols:
        context.coloff = context.rx - context.screencols + 1


def draw_rows(context, out: bytearray):
    buf = context.buffer
    for y in range(context.screenrows):
        filerow = y + context.rowoff
        if filerow >= buf.numrows:
            if buf.numrows == 0 and y == context.termrows // 3:
                welcome = WELCOME.encode()[:context.screencols]
                padding = (context.screencols - len(welcome)) // 2
                if padding:
                    out += b"~"
                    padding -= 1
                out += b" " * padding
                out += welcome
            else:
                out += b"~"
        else:
            render = buf.rows[filerow].render
            out += render[context.coloff:context.coloff + context.screencols]
        out += ERASE_LINE
        out += b"\r\n"


def draw_status_bar(context, out: bytearray):
    """
    Reverse-video bar: file name, line count and modified flag on the left,
    current line / total lines flush right.
    """
    buf = context.buffer
    name = fit_width(buf.filename or "[No Name]", STATUS_FILENAME_WIDTH)
    modified = " (modified)" if buf.modified else ""
    left = fit_width(f"{name} - {buf.numrows} lines{modified}", context.screencols)
    right = f"{context.cy + 1}/{buf.numrows}"

    out += REVERSE_VIDEO
    out += left.encode("utf-8", "replace")
    width = text_width(left)
    right_width = text_width(right)
    while width < context.screencols:
        if context.screencols - width == right_width:
            out += right.encode()
            break
        out += b" "
        width += 1
    out += RESET_ATTRS
    out += b"\r\n"


def draw_message_bar(context, out: bytearray):
    out += ERASE_LINE
    message = context.status_message
    if message and time.time() - context.status_time < context.config.message_timeout:
        out += fit_width(message, context.screencols).encode("utf-8", "replace")


def refresh_screen(context):
    """
    Re-draw the entire screen: text rows, status bar and message bar, then place the
    cursor. The whole frame goes out in one write.
    """
    scroll(context)

    out = bytearray()
    out += HIDE_CURSOR
    out += CURSOR_HOME
    draw_rows(context, out)
    draw_status_bar(context, out)
    draw_message_bar(context, out)
    cursor_y = context.cy - context.rowoff + 1
    cursor_x = context.rx - context.coloff + 1
    out += f"\x1b[{cursor_y};{cursor_x}H".encode()
    out += SHOW_CURSOR

    written = context.terminal.write(bytes(out))
    if written != len(out):
        logger.log(f"short frame write: {written} of {len(out)} bytes")


def prompt_input(context, prompt: str):
    """
    Ask for a line of text in the message bar. `prompt` holds a {} placeholder for the
    text typed so far. Returns the entered string, or None if cancelled with ESC.
    """
    text = ""
    while True:
        set_status_message(context, prompt.format(text))
        refresh_screen(context)
        key = keys.read_key(context.terminal)
        if key in (keys.Key.DEL, keys.ctrl_key("h"), keys.BACKSPACE):
            text = text[:-1]
        elif key == keys.ESC:
            set_status_message(context, "")
            return None
        elif key == keys.ENTER:
            if text:
                set_status_message(context, "")
                return text
        elif 32 <= key < 127:
            text += chr(key)
