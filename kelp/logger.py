"""
Logger module for the Kelp text editor.

Provides a simple file-based logger for debugging and error tracking. The editor owns
the terminal while it runs, so nothing is ever printed; messages go to LOG_FILE_PATH.
"""
import datetime
import os

# Define the log file path (overridden by the log_file config key)
LOG_FILE_PATH = os.path.expanduser("~/kelp/kelp.log")

def configure(path: str) -> None:
    """Point the logger at a different log file."""
    global LOG_FILE_PATH
    LOG_FILE_PATH = os.path.expanduser(path)

def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    try:
        directory = os.path.dirname(LOG_FILE_PATH)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(LOG_FILE_PATH, 'a', encoding='utf-8', errors='backslashreplace') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # If logging fails (e.g., file not writable), ignore to avoid crashing the editor.
        pass
