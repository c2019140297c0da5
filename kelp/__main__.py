"""
Main entry point and editor context for the Kelp text editor.
"""
import argparse
import sys
import time

from kelp import buffer, config, keys, logger, terminal
from kelp.ui import input as ui_input, screen

KELP_VERSION = "0.1.0"

HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find"

class EditorContext:
    """
    Holds the state of the editor: the open buffer, the cursor and scroll
    position, the screen size and the status message.
    """
    def __init__(self, term, settings=None):
        self.terminal = term
        self.config = settings or config.Config()
        self.version = KELP_VERSION

        self.buffer = buffer.Buffer(tab_stop=self.config.tab_stop)

        # Cursor: cx indexes chars of the current row, rx the render cache
        self.cx = 0
        self.cy = 0
        self.rx = 0
        self.rowoff = 0
        self.coloff = 0

        rows, cols = term.window_size()
        self.set_screen_size(rows, cols)

        self.status_message = ""
        self.status_time = 0.0

        self.quit_times = self.config.quit_times
        self.exit_flag = False

    def set_screen_size(self, rows: int, cols: int):
        """Record the terminal size, keeping two lines for the status and message bars."""
        self.screenrows = max(rows - 2, 1)
        self.screencols = max(cols, 1)

    @property
    def current_row(self):
        """The row under the cursor, or None on the line past the end."""
        if self.cy < self.buffer.numrows:
            return self.buffer.rows[self.cy]
        return None

    def set_status_message(self, fmt: str, *args):
        """Show a message in the message bar for the next few seconds."""
        self.status_message = fmt % args if args else fmt
        self.status_time = time.time()

    def open_file(self, path: str):
        """Load `path` into the buffer. Raises OSError if it cannot be read."""
        self.buffer.load(path)
        self.cx = self.cy = 0
        self.rowoff = self.coloff = 0
        logger.log(f"opened {path} ({self.buffer.numrows} lines)")

    def log_command(self, msg: str):
        """Record an editor action in the debug log."""
        logger.log(msg)

    def graceful_exit(self):
        """Clear the screen and stop the main loop."""
        self.terminal.clear_screen()
        logger.log("Editor exited.")
        self.exit_flag = True

def main(context):
    """Paint, read a key, dispatch it; until the user quits."""
    while not context.exit_flag:
        screen.display(context)
        key = keys.read_key(context.terminal)
        ui_input.process_keypress(context, key)

def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="kelp", description="A small terminal text editor.")
    parser.add_argument("filename", nargs="?", help="file to open")
    parser.add_argument("--version", action="version", version=f"%(prog)s {KELP_VERSION}")
    return parser.parse_args(argv)

def run(argv=None, term=None) -> int:
    """
    Start the editor. Returns the process exit code: 0 after a normal quit,
    1 after a fatal terminal or startup error.
    """
    args = parse_args(argv)
    settings = config.load_config()
    logger.configure(settings.log_file)
    logger.log(f"Kelp {KELP_VERSION} starting.")

    term = term or terminal.Terminal()
    try:
        with term.raw_mode():
            context = EditorContext(term, settings)
            if args.filename:
                context.open_file(args.filename)
            context.set_status_message(HELP_MESSAGE)
            main(context)
    except (terminal.TerminalError, OSError) as e:
        if isinstance(e, OSError) and e.filename:
            message = f"{e.filename}: {e.strerror}"
        else:
            message = str(e)
        try:
            term.clear_screen()
        except terminal.TerminalError:
            pass
        logger.log(f"fatal: {message}")
        print(f"kelp: {message}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(run())
