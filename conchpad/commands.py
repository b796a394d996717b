"""
File and session commands for ConchPad text editor.

This module handles the Ctrl-S (save) and Ctrl-Q (quit) commands, reporting their
outcome through the message bar.
"""
from conchpad import logger
from conchpad.terminal import CLEAR_SCREEN, CURSOR_HOME
from conchpad.ui import screen


def save_file(context):
    """Save the buffer, asking for a file name first if it has none."""
    buf = context.buffer
    if buf.filename is None:
        filename = screen.prompt_input(context, "Save as: {} (ESC to cancel)")
        if filename is None:
            screen.set_status_message(context, "Save aborted")
            return
        buf.filename = filename

    try:
        length = buf.save()
    except OSError as e:
        screen.set_status_message(context, f"Can't save! I/O error: {e.strerror or e}")
        logger.log(f"save failed: {buf.filename}: {e}")
        return
    screen.set_status_message(context, f"{length} bytes written to disk")
    logger.log(f"saved {length} bytes to {buf.filename}")


def quit_editor(context) -> bool:
    """
    Quit, unless the buffer has unsaved changes and the user has not yet repeated
    Ctrl-Q enough times. Returns True when the editor is going to exit.
    """
    if context.buffer.modified:
        context.quit_times -= 1
        if context.quit_times > 0:
            screen.set_status_message(
                context,
                "WARNING!!! File has unsaved changes. "
                f"Press Ctrl-Q {context.quit_times} more times to quit."
            )
            return False
    context.terminal.write(CLEAR_SCREEN + CURSOR_HOME)
    logger.log("Editor exited.")
    context.exit_flag = True
    return True
