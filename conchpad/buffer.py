"""
Buffer module for ConchPad text editor.

Defines the Row and Buffer classes that hold the text being edited. Each Row keeps its
raw bytes plus a render form with tabs expanded; the Buffer keeps the ordered rows,
the dirty counter and the filename used for saving.
"""
import os

TAB_STOP = 8


def tab_advance(col: int, tab_stop: int = TAB_STOP) -> int:
    """Return the render column reached after a tab that starts at `col`."""
    return col + (tab_stop - col % tab_stop)


class Row:
    """A single line of text: raw bytes and the derived render bytes."""
    def __init__(self, chars=b"", tab_stop: int = TAB_STOP):
        self.tab_stop = tab_stop
        self.chars = bytearray(chars)
        self.render = b""
        self.update()

    def __len__(self):
        return len(self.chars)

    def update(self):
        """Rebuild the render form from the raw content."""
        out = bytearray()
        for byte in self.chars:
            if byte == 0x09:
                out.extend(b" " * (tab_advance(len(out), self.tab_stop) - len(out)))
            else:
                out.append(byte)
        self.render = bytes(out)

    def cx_to_rx(self, cx: int) -> int:
        """Map a raw column to the matching column of the render form."""
        rx = 0
        for byte in self.chars[:cx]:
            if byte == 0x09:
                rx = tab_advance(rx, self.tab_stop)
            else:
                rx += 1
        return rx

    def insert(self, at: int, byte: int):
        if at < 0 or at > len(self.chars):
            at = len(self.chars)
        self.chars.insert(at, byte)
        self.update()

    def delete(self, at: int) -> bool:
        if at < 0 or at >= len(self.chars):
            return False
        del self.chars[at]
        self.update()
        return True

    def append(self, data: bytes):
        self.chars.extend(data)
        self.update()

    def truncate(self, at: int):
        del self.chars[at:]
        self.update()


class Buffer:
    """Represents a text buffer (file content) with editing operations."""
    def __init__(self, filename: str = None, lines=None, tab_stop: int = TAB_STOP):
        self.filename = filename  # Path to file or None until the first save-as
        self.tab_stop = tab_stop
        self.rows = [Row(line, tab_stop) for line in (lines or [])]
        # Number of edits since the last load/save
        self.dirty = 0

    @classmethod
    def from_file(cls, filename: str, tab_stop: int = TAB_STOP) -> "Buffer":
        """
        Load `filename` into a new buffer, one row per line with line terminators stripped.
        Raises OSError if the file cannot be read.
        """
        with open(filename, "rb") as f:
            data = f.read()
        return cls(filename, split_lines(data), tab_stop)

    @property
    def numrows(self) -> int:
        return len(self.rows)

    @property
    def modified(self) -> bool:
        return self.dirty > 0

    def row_length(self, at: int) -> int:
        """Length of row `at`, or 0 for the virtual row past the end."""
        if 0 <= at < len(self.rows):
            return len(self.rows[at])
        return 0

    def insert_row(self, at: int, content=b""):
        """Insert a new row before index `at` (0..numrows); out of range is a no-op."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(content, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int):
        """Remove row `at`; out of range is a no-op."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def insert_char(self, row: int, col: int, byte: int):
        """Insert one byte at (row, col), creating the row first on the virtual end row."""
        if row == len(self.rows):
            self.insert_row(len(self.rows), b"")
        if row < 0 or row >= len(self.rows):
            return
        self.rows[row].insert(col, byte)
        self.dirty += 1

    def delete_char(self, row: int, col: int) -> tuple:
        """
        Delete the byte before (row, col), backspace style.
        At the start of a row the row is joined onto the previous one.
        Returns the cursor position after the deletion as (row, col).
        """
        if row < 0 or row >= len(self.rows):
            return row, col
        if col == 0 and row == 0:
            return row, col
        current = self.rows[row]
        if col > 0:
            col = min(col, len(current))
            current.delete(col - 1)
            self.dirty += 1
            return row, col - 1
        prev = self.rows[row - 1]
        new_col = len(prev)
        prev.append(current.chars)
        self.delete_row(row)
        return row - 1, new_col

    def delete_forward(self, row: int, col: int):
        """
        Delete the byte under the cursor. At the end of a row the next row is joined
        onto it; at the end of the last row nothing happens.
        """
        if row < 0 or row >= len(self.rows):
            return
        current = self.rows[row]
        if col < len(current):
            current.delete(col)
            self.dirty += 1
        elif row + 1 < len(self.rows):
            current.append(self.rows[row + 1].chars)
            self.delete_row(row + 1)

    def split_row(self, row: int, col: int):
        """Split row `row` at `col`, moving the remainder to a new row below."""
        if row < 0 or row >= len(self.rows):
            return
        current = self.rows[row]
        col = min(col, len(current))
        remainder = bytes(current.chars[col:])
        self.insert_row(row + 1, remainder)
        current.truncate(col)

    def to_bytes(self) -> bytes:
        """Serialize all rows, each followed by a newline."""
        return b"".join(bytes(r.chars) + b"\n" for r in self.rows)

    def save(self) -> int:
        """
        Write the buffer to self.filename, truncating the file first.
        Returns the number of bytes written; OSError propagates to the caller.
        """
        if not self.filename:
            raise ValueError("no filename set")
        data = self.to_bytes()
        fd = os.open(self.filename, os.O_RDWR | os.O_CREAT, 0o644)
        with os.fdopen(fd, "wb") as f:
            f.truncate(len(data))
            f.write(data)
        self.dirty = 0
        return len(data)


def split_lines(data: bytes) -> list:
    """Split file content into rows, stripping trailing \\r and \\n from each."""
    if not data:
        return []
    lines = data.split(b"\n")
    if data.endswith(b"\n"):
        lines.pop()
    return [line.rstrip(b"\r") for line in lines]
