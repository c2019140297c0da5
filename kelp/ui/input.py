"""
Input handling for Kelp text editor.

Processes key events from the main loop: cursor movement, text editing, and the
save / find / quit commands, updating the context accordingly.
"""
import curses.ascii

from kelp import commands
from kelp.keys import ARROW_KEYS, Key

CTRL_F = curses.ascii.ctrl(ord("f"))
CTRL_H = curses.ascii.ctrl(ord("h"))
CTRL_L = curses.ascii.ctrl(ord("l"))
CTRL_Q = curses.ascii.ctrl(ord("q"))
CTRL_S = curses.ascii.ctrl(ord("s"))

def move_cursor(context, key: int):
    """Move the cursor one step; left/right wrap across line ends."""
    row = context.current_row
    if key == Key.ARROW_LEFT:
        if context.cx != 0:
            context.cx -= 1
        elif context.cy > 0:
            context.cy -= 1
            context.cx = len(context.buffer.rows[context.cy])
    elif key == Key.ARROW_RIGHT:
        if row is not None and context.cx < len(row):
            context.cx += 1
        elif row is not None and context.cx == len(row):
            context.cy += 1
            context.cx = 0
    elif key == Key.ARROW_UP:
        if context.cy != 0:
            context.cy -= 1
    elif key == Key.ARROW_DOWN:
        if context.cy < context.buffer.numrows:
            context.cy += 1

    # Snap to the end of the new line if it is shorter
    row = context.current_row
    rowlen = len(row) if row is not None else 0
    if context.cx > rowlen:
        context.cx = rowlen

def page(context, key: int):
    """Scroll a whole screen up or down."""
    if key == Key.PAGE_UP:
        context.cy = context.rowoff
    else:
        context.cy = min(context.rowoff + context.screenrows - 1, context.buffer.numrows)
    direction = Key.ARROW_UP if key == Key.PAGE_UP else Key.ARROW_DOWN
    for _ in range(context.screenrows):
        move_cursor(context, direction)

def insert_char(context, c: int):
    """Insert byte c at the cursor, starting a new line if past the end of the file."""
    buf = context.buffer
    if context.cy == buf.numrows:
        buf.insert_row(buf.numrows, b"")
    buf.row_insert_char(buf.rows[context.cy], context.cx, c)
    context.cx += 1

def insert_newline(context):
    """Split the current line at the cursor."""
    buf = context.buffer
    if context.cx == 0:
        buf.insert_row(context.cy, b"")
    else:
        row = buf.rows[context.cy]
        buf.insert_row(context.cy + 1, row.chars[context.cx:])
        buf.truncate_row(row, context.cx)
    context.cy += 1
    context.cx = 0

def delete_char(context):
    """Delete the character left of the cursor, joining lines at column 0."""
    buf = context.buffer
    if context.cy == buf.numrows:
        return
    if context.cx == 0 and context.cy == 0:
        return

    row = buf.rows[context.cy]
    if context.cx > 0:
        buf.row_delete_char(row, context.cx - 1)
        context.cx -= 1
    else:
        prev = buf.rows[context.cy - 1]
        context.cx = len(prev)
        buf.row_append(prev, row.chars)
        buf.delete_row(context.cy)
        context.cy -= 1

def handle_quit(context):
    """Quit, but ask for repeated presses first if there are unsaved changes."""
    if context.buffer.dirty and context.quit_times > 1:
        context.quit_times -= 1
        times = "time" if context.quit_times == 1 else "times"
        context.set_status_message(
            "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more %s to quit.",
            context.quit_times, times)
        return
    context.graceful_exit()

def is_insertable(key: int) -> bool:
    """Plain bytes that go into the text: tab and anything not a control character."""
    return key == curses.ascii.TAB or (key < 256 and not curses.ascii.iscntrl(key))

def process_keypress(context, key: int):
    """Handle one key from the main loop."""
    if key == CTRL_Q:
        handle_quit(context)
        return

    if key == curses.ascii.CR:
        insert_newline(context)
    elif key == CTRL_S:
        commands.save(context)
    elif key == CTRL_F:
        commands.find(context)
    elif key == Key.HOME:
        context.cx = 0
    elif key == Key.END:
        row = context.current_row
        if row is not None:
            context.cx = len(row)
    elif key in (Key.BACKSPACE, CTRL_H, Key.DELETE):
        if key == Key.DELETE:
            move_cursor(context, Key.ARROW_RIGHT)
        delete_char(context)
    elif key in (Key.PAGE_UP, Key.PAGE_DOWN):
        page(context, key)
    elif key in ARROW_KEYS:
        move_cursor(context, key)
    elif key in (CTRL_L, Key.ESC):
        pass
    elif is_insertable(key):
        insert_char(context, key)

    context.quit_times = context.config.quit_times
