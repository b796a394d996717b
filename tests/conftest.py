import pytest

from conchpad import logger
from conchpad.__main__ import EditorContext
from conchpad.buffer import Buffer
from conchpad.config import Config


class FakeTerminal:
    """Scripted stand-in for conchpad.terminal.Terminal."""

    def __init__(self, data=b"", rows=26, cols=80):
        self.pending = []
        self.output = bytearray()
        self.writes = []
        self.size = (rows, cols)
        self.raw = False
        self.feed(data)

    def __enter__(self):
        self.raw = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.raw = False
        return False

    def feed(self, data: bytes):
        self.pending.extend(data[i:i + 1] for i in range(len(data)))

    def timeout(self):
        """Queue a read that returns no byte."""
        self.pending.append(b"")

    def read_byte(self) -> bytes:
        if not self.pending:
            return b""
        return self.pending.pop(0)

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        self.output += data
        return len(data)

    def get_window_size(self):
        return self.size

    def die(self, what, error):
        raise SystemExit(f"{what}: {error}")


@pytest.fixture(autouse=True)
def no_log_file(monkeypatch):
    monkeypatch.setattr(logger, "LOG_FILE_PATH", None)


@pytest.fixture
def make_terminal():
    return FakeTerminal


@pytest.fixture
def make_context():
    def factory(lines=None, filename=None, rows=26, cols=80, data=b"", config=None):
        terminal = FakeTerminal(data, rows=rows, cols=cols)
        config = config or Config()
        buf = Buffer(filename, lines, tab_stop=config.tab_stop)
        return EditorContext(terminal, buf, config)
    return factory
