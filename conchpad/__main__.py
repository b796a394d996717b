"""
Main entry point and editor context for the ConchPad text editor.
"""
import sys

from conchpad import logger
from conchpad.buffer import Buffer
from conchpad.config import Config, load_config
from conchpad.terminal import Terminal
from conchpad.ui import keys, screen
from conchpad.ui import input as editor_input

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"


class EditorContext:
    """
    Holds the state of the editor: the buffer, cursor and viewport position, the
    message bar and the quit confirmation counter.
    """
    def __init__(self, terminal, buffer: Buffer = None, config: Config = None):
        self.terminal = terminal
        self.config = config or Config()
        self.buffer = buffer if buffer is not None else Buffer(tab_stop=self.config.tab_stop)

        # Cursor: cx/cy index the raw content, rx is cx in render coordinates
        self.cx = 0
        self.cy = 0
        self.rx = 0

        # Viewport
        self.rowoff = 0
        self.coloff = 0
        try:
            rows, cols = terminal.get_window_size()
        except OSError as e:
            terminal.die("get_window_size", e)
        self.termrows = rows
        # Two rows are taken by the status bar and the message bar
        self.screenrows = max(rows - 2, 1)
        self.screencols = max(cols, 1)

        # Message bar
        self.status_message = ""
        self.status_time = 0.0

        self.quit_times = self.config.quit_times

        # Running flag
        self.exit_flag = False

    def open_file(self, filename: str):
        """
        Load `filename` into the buffer. A file that does not exist yet gives an empty
        buffer that will be created on save; any other failure is fatal.
        """
        try:
            self.buffer = Buffer.from_file(filename, self.config.tab_stop)
        except FileNotFoundError:
            self.buffer = Buffer(filename, tab_stop=self.config.tab_stop)
            logger.log(f"new file: {filename}")
        except OSError as e:
            self.terminal.die(filename, e)
        else:
            logger.log(f"file opened: {filename} ({self.buffer.numrows} lines)")
        self.cx = self.cy = self.rx = 0
        self.rowoff = self.coloff = 0


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) > 1:
        raise SystemExit("usage: conchpad [filename]")

    config = load_config()
    logger.configure(config.log_file)
    logger.log("Editor started.")

    with Terminal() as terminal:
        context = EditorContext(terminal, config=config)
        if argv:
            context.open_file(argv[0])
        screen.set_status_message(context, HELP_MESSAGE)

        while not context.exit_flag:
            screen.refresh_screen(context)
            editor_input.process_keypress(context, keys.read_key(terminal))
    return 0


def run():
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
