"""
Key decoding for ConchPad.

Turns the raw bytes coming from the terminal into key codes. Plain bytes come back as
their integer value; the escape sequences sent by arrow and navigation keys are folded
into the Key constants below.
"""
import enum

ESC = 0x1b
ENTER = 0x0d
BACKSPACE = 0x7f


class Key(enum.IntEnum):
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    PAGE_UP = 1004
    PAGE_DOWN = 1005
    HOME = 1006
    END = 1007
    DEL = 1008


def ctrl_key(ch: str) -> int:
    """Code the terminal sends for Ctrl+`ch` (bits 5 and 6 stripped)."""
    return ord(ch) & 0x1f


# ESC [ <digit> ~
_TILDE_KEYS = {
    b"1": Key.HOME,
    b"3": Key.DEL,
    b"4": Key.END,
    b"5": Key.PAGE_UP,
    b"6": Key.PAGE_DOWN,
    b"7": Key.HOME,
    b"8": Key.END,
}

# ESC [ <letter>
_CSI_KEYS = {
    b"A": Key.ARROW_UP,
    b"B": Key.ARROW_DOWN,
    b"C": Key.ARROW_RIGHT,
    b"D": Key.ARROW_LEFT,
    b"H": Key.HOME,
    b"F": Key.END,
}

# ESC O <letter>
_SS3_KEYS = {
    b"H": Key.HOME,
    b"F": Key.END,
}


def read_key(terminal) -> int:
    """
    Wait for one key press and return its code.

    The first byte is awaited for as long as it takes. Inside an escape sequence each
    further byte gets a single timed read; if it does not arrive the sequence resolves
    to a bare ESC, so a lone Escape key press never hangs the editor.
    """
    while True:
        byte = terminal.read_byte()
        if byte:
            break
    if byte[0] != ESC:
        return byte[0]

    first = terminal.read_byte()
    if not first:
        return ESC
    second = terminal.read_byte()
    if not second:
        return ESC

    if first == b"[":
        if second.isdigit():
            third = terminal.read_byte()
            if third == b"~":
                return _TILDE_KEYS.get(second, ESC)
            return ESC
        return _CSI_KEYS.get(second, ESC)
    if first == b"O":
        return _SS3_KEYS.get(second, ESC)
    return ESC
