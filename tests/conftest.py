import collections
import contextlib

import pytest

from kelp import config, logger
from kelp.__main__ import EditorContext


class FakeTerminal:
    """Scripted stand-in for kelp.terminal.Terminal."""

    def __init__(self, data=b"", rows=24, cols=80):
        self.input = collections.deque(data)
        self.rows = rows
        self.cols = cols
        self.writes = []
        self.raw = False
        self.raw_entered = 0
        self.idle_reads = 0

    def feed(self, data):
        self.input.extend(data)

    def pause(self):
        """Make the next read time out, as a slow terminal would."""
        self.input.append(None)

    def read_byte(self):
        if not self.input:
            self.idle_reads += 1
            if self.idle_reads > 50:
                raise RuntimeError("scripted input exhausted")
            return None
        self.idle_reads = 0
        return self.input.popleft()

    def write(self, data):
        self.writes.append(bytes(data))

    def clear_screen(self):
        self.write(b"\x1b[2J\x1b[H")

    def window_size(self, fallback=True):
        return self.rows, self.cols

    def enable_raw_mode(self):
        self.raw = True
        self.raw_entered += 1

    def disable_raw_mode(self):
        self.raw = False

    @contextlib.contextmanager
    def raw_mode(self):
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    @property
    def last_frame(self):
        return self.writes[-1] if self.writes else b""


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path, monkeypatch):
    monkeypatch.setattr(logger, "LOG_FILE_PATH", str(tmp_path / "kelp.log"))
    monkeypatch.setenv("KELP_CONFIG", str(tmp_path / "missing.conf"))


@pytest.fixture
def term():
    return FakeTerminal()


@pytest.fixture
def context(term):
    return EditorContext(term, config.Config())


def fill(context, *lines):
    """Put lines into the context's buffer as if freshly loaded."""
    for line in lines:
        context.buffer.insert_row(context.buffer.numrows, line)
    context.buffer.dirty = 0
    return context
