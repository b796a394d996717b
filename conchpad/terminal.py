"""
Terminal control for ConchPad.

Owns the raw-mode switch of the controlling terminal, the single fatal-error path and
the window-size query. Use Terminal as a context manager so the original terminal mode
comes back however the editor exits; an atexit hook is kept as a safety net.
"""
import atexit
import os
import re
import sys
import termios

from conchpad import logger

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"

# Cursor Position Report reply: ESC [ rows ; cols R
_CPR_REPLY = re.compile(rb"^\x1b\[(\d+);(\d+)$")


class TerminalError(OSError):
    """Raised when the terminal cannot be queried."""


def describe_error(error) -> str:
    """Return the OS message for `error`, like perror() would print it."""
    if isinstance(error, OSError) and error.strerror:
        return error.strerror
    if isinstance(error, termios.error) and len(error.args) == 2:
        return str(error.args[1])
    return str(error)


class Terminal:
    """Raw-mode terminal bound to an input and an output file descriptor."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._orig_attrs = None
        self._atexit_registered = False

    def __enter__(self):
        self.enable_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.disable_raw_mode()
        return False

    @property
    def raw(self) -> bool:
        return self._orig_attrs is not None

    def enable_raw_mode(self):
        """
        Save the current attributes and switch the terminal to raw mode:
        no echo, byte-at-a-time input, no signal keys, no flow control, no CR->NL
        translation, no output post-processing, 8-bit characters. Reads time out
        after 100ms with zero bytes so the input loop never spins.
        """
        if self.raw:
            return
        try:
            orig = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            self.die("tcgetattr", e)
        self._orig_attrs = orig
        if not self._atexit_registered:
            atexit.register(self.disable_raw_mode)
            self._atexit_registered = True

        raw = list(orig)
        raw[6] = list(orig[6])
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
        raw[1] &= ~termios.OPOST
        raw[2] |= termios.CS8
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            self.die("tcsetattr", e)

    def disable_raw_mode(self):
        """Restore the attributes saved by enable_raw_mode(). Safe to call repeatedly."""
        if not self.raw:
            return
        orig, self._orig_attrs = self._orig_attrs, None
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, orig)
        except termios.error as e:
            self.die("tcsetattr", e)

    def die(self, what: str, error):
        """Clear the screen, leave raw mode and exit with status 1 reporting `error`."""
        message = f"{what}: {describe_error(error)}"
        logger.log(f"fatal: {message}")
        os.write(self.fd_out, CLEAR_SCREEN + CURSOR_HOME)
        self.disable_raw_mode()
        raise SystemExit(message)

    def read_byte(self) -> bytes:
        """Read at most one byte; returns b"" when the read times out."""
        try:
            return os.read(self.fd_in, 1)
        except BlockingIOError:
            return b""
        except OSError as e:
            self.die("read", e)

    def write(self, data: bytes) -> int:
        return os.write(self.fd_out, data)

    def get_window_size(self) -> tuple:
        """
        Return (rows, cols) of the terminal. When the OS cannot tell, move the
        cursor to the bottom-right corner and ask the terminal where it ended up.
        """
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is not None and size.columns > 0:
            return size.lines, size.columns
        if self.write(b"\x1b[999C\x1b[999B") != 12:
            raise TerminalError("cannot move cursor to query window size")
        return self.get_cursor_position()

    def get_cursor_position(self) -> tuple:
        """Query the cursor position with a Device Status Report (ESC [6n)."""
        if self.write(b"\x1b[6n") != 4:
            raise TerminalError("cannot send cursor position request")
        reply = bytearray()
        while len(reply) < 31:
            byte = self.read_byte()
            if not byte or byte == b"R":
                break
            reply += byte
        match = _CPR_REPLY.match(bytes(reply))
        if match is None:
            raise TerminalError(f"bad cursor position reply: {bytes(reply)!r}")
        return int(match.group(1)), int(match.group(2))
