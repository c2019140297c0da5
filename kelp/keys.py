"""
Key decoding for the Kelp text editor.

Turns the raw byte stream coming from the terminal into key events. Plain bytes are
returned as ints; escape sequences for the arrow and navigation keys are decoded into
Key members. A sequence that is cut short or not recognised comes back as a bare ESC.
"""
import curses.ascii
import enum

class Key(enum.IntEnum):
    BACKSPACE = curses.ascii.DEL
    ESC = curses.ascii.ESC
    ARROW_LEFT = 1000
    ARROW_RIGHT = 1001
    ARROW_UP = 1002
    ARROW_DOWN = 1003
    DELETE = 1004
    HOME = 1005
    END = 1006
    PAGE_UP = 1007
    PAGE_DOWN = 1008

ARROW_KEYS = (Key.ARROW_LEFT, Key.ARROW_RIGHT, Key.ARROW_UP, Key.ARROW_DOWN)

# ESC [ <letter>
BRACKET_LETTERS = {
    ord("A"): Key.ARROW_UP,
    ord("B"): Key.ARROW_DOWN,
    ord("C"): Key.ARROW_RIGHT,
    ord("D"): Key.ARROW_LEFT,
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

# ESC [ <digit> ~
BRACKET_DIGITS = {
    ord("1"): Key.HOME,
    ord("3"): Key.DELETE,
    ord("4"): Key.END,
    ord("5"): Key.PAGE_UP,
    ord("6"): Key.PAGE_DOWN,
    ord("7"): Key.HOME,
    ord("8"): Key.END,
}

# ESC O <letter>
O_LETTERS = {
    ord("H"): Key.HOME,
    ord("F"): Key.END,
}

class State(enum.Enum):
    IDLE = "idle"
    SAW_ESC = "saw_esc"
    SAW_BRACKET = "saw_bracket"
    SAW_DIGIT = "saw_digit"
    SAW_O = "saw_o"

class KeyDecoder:
    """Byte-at-a-time escape sequence decoder."""
    def __init__(self):
        self.state = State.IDLE
        self.digit = None

    def reset(self):
        self.state = State.IDLE
        self.digit = None

    def feed(self, byte: int):
        """
        Feed one byte. Returns the decoded key once a key is complete,
        or None while an escape sequence is still in progress.
        """
        state = self.state
        if state is State.IDLE:
            if byte == Key.ESC:
                self.state = State.SAW_ESC
                return None
            if byte == Key.BACKSPACE:
                return Key.BACKSPACE
            return byte

        if state is State.SAW_ESC:
            if byte == ord("["):
                self.state = State.SAW_BRACKET
                return None
            if byte == ord("O"):
                self.state = State.SAW_O
                return None
            return self._finish(Key.ESC)

        if state is State.SAW_BRACKET:
            if curses.ascii.isdigit(byte):
                self.digit = byte
                self.state = State.SAW_DIGIT
                return None
            return self._finish(BRACKET_LETTERS.get(byte, Key.ESC))

        if state is State.SAW_DIGIT:
            if byte == ord("~"):
                return self._finish(BRACKET_DIGITS.get(self.digit, Key.ESC))
            return self._finish(Key.ESC)

        # State.SAW_O
        return self._finish(O_LETTERS.get(byte, Key.ESC))

    def timeout(self):
        """
        The terminal had nothing more to read. An unfinished escape sequence
        becomes a bare ESC; returns None when no sequence was in progress.
        """
        if self.state is State.IDLE:
            return None
        return self._finish(Key.ESC)

    def _finish(self, key):
        self.reset()
        return key

def read_key(terminal) -> int:
    """Block until a full key is available on the terminal and return it."""
    decoder = KeyDecoder()
    byte = None
    while byte is None:
        byte = terminal.read_byte()
    key = decoder.feed(byte)
    while key is None:
        byte = terminal.read_byte()
        key = decoder.timeout() if byte is None else decoder.feed(byte)
    return key
