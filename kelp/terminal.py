"""
Terminal handling for the Kelp text editor.

Switches the controlling terminal between cooked and raw mode, reads single bytes with
the 100ms raw-mode timeout, writes whole frames, and works out the window size.
"""
import contextlib
import errno
import os
import re
import sys
import termios

CLEAR_SCREEN = b"\x1b[2J"
CURSOR_HOME = b"\x1b[H"

class TerminalError(Exception):
    """A terminal failure the editor cannot recover from."""

class Terminal:
    """Raw-mode byte I/O on a pair of file descriptors (stdin/stdout by default)."""
    def __init__(self, fd_in: int = None, fd_out: int = None):
        self.fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self.fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self.orig_attrs = None

    def enable_raw_mode(self):
        """Save the current attributes and switch the input terminal to raw mode."""
        try:
            self.orig_attrs = termios.tcgetattr(self.fd_in)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e

        raw = termios.tcgetattr(self.fd_in)
        iflag, oflag, cflag, lflag = 0, 1, 2, 3
        raw[iflag] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK |
                        termios.ISTRIP | termios.IXON)
        raw[oflag] &= ~termios.OPOST
        raw[cflag] |= termios.CS8
        raw[lflag] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        # read() returns as soon as a byte is there, or after 1/10 of a second
        raw[6][termios.VMIN] = 0
        raw[6][termios.VTIME] = 1
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e

    def disable_raw_mode(self):
        """Restore the attributes saved by enable_raw_mode()."""
        if self.orig_attrs is None:
            return
        try:
            termios.tcsetattr(self.fd_in, termios.TCSAFLUSH, self.orig_attrs)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        self.orig_attrs = None

    @contextlib.contextmanager
    def raw_mode(self):
        """Run the enclosed block in raw mode; cooked mode comes back on any exit."""
        self.enable_raw_mode()
        try:
            yield self
        finally:
            self.disable_raw_mode()

    def read_byte(self):
        """
        Read one byte. Returns None when the read timed out with nothing to deliver.
        """
        try:
            data = os.read(self.fd_in, 1)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return None
            raise TerminalError(f"read: {e.strerror}") from e
        if not data:
            return None
        return data[0]

    def write(self, data: bytes):
        """Write all of data to the output terminal."""
        view = memoryview(data)
        while view:
            try:
                written = os.write(self.fd_out, view)
            except OSError as e:
                if e.errno == errno.EINTR:
                    continue
                raise TerminalError(f"write: {e.strerror}") from e
            view = view[written:]

    def clear_screen(self):
        self.write(CLEAR_SCREEN + CURSOR_HOME)

    def cursor_position(self):
        """Ask the terminal where the cursor is. Returns (rows, cols)."""
        self.write(b"\x1b[6n")
        reply = bytearray()
        while len(reply) < 31:
            c = self.read_byte()
            if c is None or c == ord("R"):
                break
            reply.append(c)
        match = re.fullmatch(rb"\x1b\[(\d+);(\d+)", bytes(reply))
        if not match:
            raise TerminalError("getWindowSize: bad cursor position reply")
        return int(match.group(1)), int(match.group(2))

    def window_size(self, fallback: bool = True):
        """
        Return (rows, cols) of the terminal window. When the size ioctl fails and
        fallback is set, the size is read back from the cursor position instead.
        """
        try:
            size = os.get_terminal_size(self.fd_out)
        except OSError:
            size = None
        if size is None or size.columns == 0:
            if not fallback:
                raise TerminalError("getWindowSize: size unavailable")
            # Push the cursor to the bottom-right corner and ask where it ended up
            self.write(b"\x1b[999C\x1b[999B")
            return self.cursor_position()
        return size.lines, size.columns
