"""
Commands for Kelp text editor.

Save (with a "save as" prompt for unnamed buffers) and incremental find. Both run on
top of the modal prompt in kelp.ui.screen.
"""
import curses.ascii
import os

from kelp import logger
from kelp.keys import Key
from kelp.ui import screen

class PromptObserver:
    """Receives every key typed into a prompt, together with the text so far."""
    def on_key(self, text: str, key: int):
        pass

class SearchObserver(PromptObserver):
    """
    Moves the cursor to the next match as the query is typed.
    Arrow right/down search forward from the last match, left/up backward;
    any other key starts over from the top of the file.
    """
    def __init__(self, context):
        self.context = context
        self.last_match = -1
        self.direction = 1

    def on_key(self, text: str, key: int):
        if key in (curses.ascii.CR, Key.ESC):
            self.last_match = -1
            self.direction = 1
            return
        elif key in (Key.ARROW_RIGHT, Key.ARROW_DOWN):
            self.direction = 1
        elif key in (Key.ARROW_LEFT, Key.ARROW_UP):
            self.direction = -1
        else:
            self.last_match = -1
            self.direction = 1

        if self.last_match == -1:
            self.direction = 1
        self.search(text.encode("utf-8"))

    def search(self, query: bytes):
        """Visit every row once, wrapping around, and stop at the first one containing query."""
        context = self.context
        rows = context.buffer.rows
        current = self.last_match
        for _ in range(len(rows)):
            current += self.direction
            if current == -1:
                current = len(rows) - 1
            elif current == len(rows):
                current = 0

            row = rows[current]
            match = row.render.find(query)
            if match != -1:
                self.last_match = current
                context.cy = current
                context.cx = row.rx_to_cx(match)
                # Past the last row, so the next scroll() pulls the match up to the top line
                context.rowoff = len(rows)
                break

def find(context):
    """Incremental search; ESC puts the cursor back where it was."""
    saved = (context.cx, context.cy, context.coloff, context.rowoff)

    query = screen.prompt(context, "Search: %s (Use ESC/Arrows/Enter)", SearchObserver(context))
    if query is None:
        context.cx, context.cy, context.coloff, context.rowoff = saved
    else:
        context.log_command(f"find: {query}")

def write_file(path: str, data: bytes):
    """Write data to path, truncating the file to exactly len(data) first."""
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        while view:
            written = os.write(fd, view)
            view = view[written:]
    finally:
        os.close(fd)

def save(context):
    """Write the buffer to its file, asking for a name first if it has none."""
    buf = context.buffer
    if buf.filename is None:
        filename = screen.prompt(context, "Save as: %s (ESC to cancel)")
        if filename is None:
            context.set_status_message("Save aborted")
            logger.log("save aborted")
            return
        buf.filename = filename

    data = buf.serialize()
    try:
        write_file(buf.filename, data)
    except OSError as e:
        context.set_status_message("Can't save! I/O error: %s", e.strerror)
        logger.log(f"save {buf.filename} failed: {e}")
        return
    buf.dirty = 0
    context.set_status_message("%d bytes written to disk", len(data))
    logger.log(f"saved {buf.filename} ({len(data)} bytes)")
