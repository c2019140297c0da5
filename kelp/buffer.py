"""
Buffer module for Kelp text editor.

Defines the Row class (one line of text plus its tab-expanded render form) and the
Buffer class, which owns the ordered rows of the open file, its modification counter
and its filename. Text is kept as bytes so a file loads and saves byte for byte.
"""
TAB = 0x09

class Row:
    """One line of text, without its newline, and its on-screen rendering."""
    def __init__(self, chars=b"", tab_stop: int = 8):
        self.chars = bytearray(chars)
        self.tab_stop = tab_stop
        self.render = b""
        self.update()

    def __len__(self):
        return len(self.chars)

    def __repr__(self):
        return f"Row({bytes(self.chars)!r})"

    def update(self):
        """Rebuild the render cache: tabs become spaces up to the next tab stop."""
        render = bytearray()
        for c in self.chars:
            if c == TAB:
                render.append(0x20)
                while len(render) % self.tab_stop != 0:
                    render.append(0x20)
            else:
                render.append(c)
        self.render = bytes(render)

    def cx_to_rx(self, cx: int) -> int:
        """Convert a character index into a column of the render cache."""
        rx = 0
        for c in self.chars[:cx]:
            if c == TAB:
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx

    def rx_to_cx(self, rx: int) -> int:
        """Convert a render column back to a character index, clamped to the row length."""
        cur_rx = 0
        for cx, c in enumerate(self.chars):
            if c == TAB:
                cur_rx += (self.tab_stop - 1) - (cur_rx % self.tab_stop)
            cur_rx += 1
            if cur_rx > rx:
                return cx
        return len(self.chars)

class Buffer:
    """Represents the open document: its rows, modification state and filename."""
    def __init__(self, filename: str = None, tab_stop: int = 8):
        self.filename = filename  # Path to file or None for new/unsaved
        self.rows = []
        self.tab_stop = tab_stop
        # Number of edits since the last load or save; nonzero means unsaved changes
        self.dirty = 0

    @property
    def numrows(self) -> int:
        return len(self.rows)

    def insert_row(self, at: int, chars=b""):
        """Insert a new row holding chars before index `at` (at == numrows appends)."""
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(chars, self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int):
        """Remove the row at index `at`."""
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def row_insert_char(self, row: Row, at: int, c: int):
        """Insert byte c into row before index `at`; an out of range index appends."""
        if at < 0 or at > len(row.chars):
            at = len(row.chars)
        row.chars.insert(at, c)
        row.update()
        self.dirty += 1

    def row_delete_char(self, row: Row, at: int):
        """Delete the byte at index `at` of row."""
        if at < 0 or at >= len(row.chars):
            return
        del row.chars[at]
        row.update()
        self.dirty += 1

    def row_append(self, row: Row, chars):
        """Append chars to the end of row (joining two lines)."""
        row.chars.extend(chars)
        row.update()
        self.dirty += 1

    def truncate_row(self, row: Row, at: int):
        """Cut row short so it ends just before index `at`."""
        del row.chars[at:]
        row.update()
        self.dirty += 1

    def load(self, path: str):
        """
        Replace the rows with the lines of the file at `path`.
        Trailing CR/LF bytes are stripped from every line.
        Raises OSError if the file cannot be read.
        """
        with open(path, 'rb') as f:
            rows = [Row(line.rstrip(b"\r\n"), self.tab_stop) for line in f]
        self.rows = rows
        self.filename = path
        self.dirty = 0

    def serialize(self) -> bytes:
        """Return the whole document as file contents, one newline after every row."""
        return b"".join(bytes(row.chars) + b"\n" for row in self.rows)
