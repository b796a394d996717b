"""
Input handling for ConchPad text editor.

Maps each decoded key to an edit of the buffer or a cursor movement and updates the
context accordingly.
"""
from conchpad import commands
from conchpad.ui.keys import BACKSPACE, ENTER, ESC, Key, ctrl_key

ARROWS = (Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN)


def move_cursor(context, key: int):
    """Move the cursor one cell, wrapping across row ends horizontally."""
    buf = context.buffer
    on_row = context.cy < buf.numrows

    if key == Key.ARROW_LEFT:
        if context.cx > 0:
            context.cx -= 1
        elif context.cy > 0:
            context.cy -= 1
            context.cx = buf.row_length(context.cy)
    elif key == Key.ARROW_RIGHT:
        if on_row and context.cx < buf.row_length(context.cy):
            context.cx += 1
        elif on_row and context.cy < buf.numrows - 1:
            context.cy += 1
            context.cx = 0
    elif key == Key.ARROW_UP:
        if context.cy > 0:
            context.cy -= 1
    elif key == Key.ARROW_DOWN:
        # Bounded by the row count; cy == numrows is the empty row past the end
        if context.cy < buf.numrows:
            context.cy += 1

    context.cx = min(context.cx, buf.row_length(context.cy))


def page_move(context, key: int):
    """Jump to the top/bottom of the viewport, then scroll a screenful."""
    if key == Key.PAGE_UP:
        context.cy = context.rowoff
        step = Key.ARROW_UP
    else:
        context.cy = min(context.rowoff + context.screenrows - 1, context.buffer.numrows)
        step = Key.ARROW_DOWN
    for _ in range(context.screenrows):
        move_cursor(context, step)


def insert_char(context, byte: int):
    context.buffer.insert_char(context.cy, context.cx, byte)
    context.cx += 1


def insert_newline(context):
    if context.cx == 0:
        context.buffer.insert_row(context.cy, b"")
    else:
        context.buffer.split_row(context.cy, context.cx)
    context.cy += 1
    context.cx = 0


def delete_char(context):
    context.cy, context.cx = context.buffer.delete_char(context.cy, context.cx)


def process_keypress(context, key: int):
    """Handle one key press."""
    if key == ctrl_key("q"):
        commands.quit_editor(context)
        return
    # Any other key cancels a pending quit confirmation
    context.quit_times = context.config.quit_times

    if key == ENTER:
        insert_newline(context)
    elif key == ctrl_key("s"):
        commands.save_file(context)
    elif key == Key.HOME:
        context.cx = 0
    elif key == Key.END:
        context.cx = context.buffer.row_length(context.cy)
    elif key in (BACKSPACE, ctrl_key("h")):
        delete_char(context)
    elif key == Key.DEL:
        context.buffer.delete_forward(context.cy, context.cx)
    elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
        page_move(context, key)
    elif key in ARROWS:
        move_cursor(context, key)
    elif key in (ctrl_key("l"), ESC):
        pass
    else:
        insert_char(context, key)
