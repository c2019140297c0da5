"""
kelp/ui/screen.py

Implements all screen drawing for the Kelp text editor. Every frame is assembled in an
AppendBuffer and handed to the terminal in a single write, so the user never sees a
half-drawn screen.
"""
import curses.ascii
import time

from wcwidth import wcwidth

from kelp import logger, terminal
from kelp.keys import Key, read_key

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CLEAR_LINE = b"\x1b[K"
REVERSE_VIDEO = b"\x1b[7m"
ATTRIBUTES_OFF = b"\x1b[m"

class AppendBuffer:
    """Growable byte buffer that collects one frame of output."""
    def __init__(self):
        self.data = bytearray()

    def __len__(self):
        return len(self.data)

    def append(self, chunk) -> bool:
        """
        Add chunk (bytes or str) to the end of the buffer.
        Returns False, with the buffer unchanged, if it could not grow.
        """
        if isinstance(chunk, str):
            # Lone surrogates from undecodable filenames go out as their original bytes
            chunk = chunk.encode("utf-8", errors="surrogateescape")
        try:
            self.data += chunk
        except MemoryError:
            logger.log(f"frame buffer could not grow past {len(self.data)} bytes")
            return False
        return True

    def getvalue(self) -> bytes:
        return bytes(self.data)

def text_width(text: str) -> int:
    """Number of terminal columns text occupies."""
    return sum(max(wcwidth(ch), 0) for ch in text)

def clip(text: str, width: int) -> str:
    """Trim a string so it occupies at most `width` terminal columns."""
    used = 0
    for i, ch in enumerate(text):
        used += max(wcwidth(ch), 0)
        if used > width:
            return text[:i]
    return text

def scroll(context):
    """
    Recompute rx and move the scroll offsets just enough to keep the cursor on screen.
    """
    context.rx = 0
    row = context.current_row
    if row is not None:
        context.rx = row.cx_to_rx(context.cx)

    if context.cy < context.rowoff:
        context.rowoff = context.cy
    if context.cy >= context.rowoff + context.screenrows:
        context.rowoff = context.cy - context.screenrows + 1
    if context.rx < context.coloff:
        context.coloff = context.rx
    if context.rx >= context.coloff + context.screencols:
        context.coloff = context.rx - context.screencols + 1

def draw_welcome(context, ab: AppendBuffer):
    welcome = clip(f"Kelp editor -- version {context.version}", context.screencols)
    padding = (context.screencols - text_width(welcome)) // 2
    if padding:
        ab.append(b"~")
        padding -= 1
    ab.append(b" " * padding)
    ab.append(welcome)

def draw_rows(context, ab: AppendBuffer):
    """Draw the visible slice of every row, or '~' past the end of the file."""
    buf = context.buffer
    for y in range(context.screenrows):
        filerow = y + context.rowoff
        if filerow >= buf.numrows:
            if buf.numrows == 0 and y == context.screenrows // 3:
                draw_welcome(context, ab)
            else:
                ab.append(b"~")
        else:
            render = buf.rows[filerow].render
            ab.append(render[context.coloff:context.coloff + context.screencols])
        ab.append(CLEAR_LINE)
        ab.append(b"\r\n")

def draw_status_bar(context, ab: AppendBuffer):
    """
    Reverse-video bar: filename, line count and modified flag on the left,
    current line / total lines on the right.
    """
    buf = context.buffer
    name = clip(buf.filename or "[No Name]", 20)
    status = f"{name} - {buf.numrows} lines"
    if buf.dirty:
        status += " (modified)"
    rstatus = f"{context.cy + 1}/{buf.numrows}"

    status = clip(status, context.screencols)
    width = text_width(status)
    rwidth = text_width(rstatus)
    ab.append(REVERSE_VIDEO)
    ab.append(status)
    while width < context.screencols:
        if context.screencols - width == rwidth:
            ab.append(rstatus)
            break
        ab.append(b" ")
        width += 1
    ab.append(ATTRIBUTES_OFF)
    ab.append(b"\r\n")

def draw_message_bar(context, ab: AppendBuffer):
    """Show the status message until it is message_timeout seconds old."""
    ab.append(CLEAR_LINE)
    message = clip(context.status_message, context.screencols)
    if message and time.time() - context.status_time < context.config.message_timeout:
        ab.append(message)

def display(context):
    """
    Re-draw the entire screen: text rows, status bar, message bar, then park the cursor.
    """
    try:
        rows, cols = context.terminal.window_size(fallback=False)
    except terminal.TerminalError:
        # Keep the last known size; it was good enough for the previous frame
        pass
    else:
        context.set_screen_size(rows, cols)
    scroll(context)

    ab = AppendBuffer()
    ab.append(HIDE_CURSOR)
    ab.append(terminal.CURSOR_HOME)

    draw_rows(context, ab)
    draw_status_bar(context, ab)
    draw_message_bar(context, ab)

    cursor_y = context.cy - context.rowoff + 1
    cursor_x = context.rx - context.coloff + 1
    ab.append(f"\x1b[{cursor_y};{cursor_x}H")
    ab.append(SHOW_CURSOR)

    context.terminal.write(ab.getvalue())

def prompt(context, template: str, observer=None):
    """
    Ask for a line of input in the message bar. `template` holds one %s where the
    text typed so far is shown. The observer, if given, sees every key.
    Returns the entered string, or None if cancelled with ESC.
    """
    text = ""
    while True:
        context.set_status_message(template, text)
        display(context)

        key = read_key(context.terminal)
        if key in (Key.DELETE, Key.BACKSPACE) or key == curses.ascii.ctrl(ord("h")):
            text = text[:-1]
        elif key == Key.ESC:
            context.set_status_message("")
            if observer is not None:
                observer.on_key(text, key)
            return None
        elif key == curses.ascii.CR:
            if text:
                context.set_status_message("")
                if observer is not None:
                    observer.on_key(text, key)
                return text
        elif key < 128 and not curses.ascii.iscntrl(key):
            text += chr(key)

        if observer is not None:
            observer.on_key(text, key)
