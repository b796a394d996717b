"""
Logger module for the ConchPad text editor.

Provides a simple file-based logger for debugging and error tracking. The editor owns
the terminal while it runs, so nothing may be printed to stdout/stderr; messages go to
the log file instead.
"""
import datetime
import os

# Log file path; None or "" disables logging
LOG_FILE_PATH = "conchpad.log"


def configure(path) -> None:
    """Point the logger at `path` (None or an empty string turns logging off)."""
    global LOG_FILE_PATH
    LOG_FILE_PATH = os.path.expanduser(path) if path else None


def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    if not LOG_FILE_PATH:
        return
    try:
        with open(LOG_FILE_PATH, 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # If logging fails (e.g., file not writable), ignore to avoid crashing the editor.
        pass
