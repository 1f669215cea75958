import logging
import threading
from typing import Optional

import pyperclip


def copy_to_clipboard(text: str, timeout: int = 30) -> Optional[threading.Timer]:
    """Copy text to the system clipboard and clear it after timeout seconds.

    The clear only happens if the clipboard still holds text. The timer is
    not a daemon, so the process stays alive until the clipboard is cleared.
    A timeout of 0 or less copies without clearing. Returns the pending
    timer, if any.
    """
    pyperclip.copy(text)
    if timeout <= 0:
        return None

    def clear():
        try:
            if pyperclip.paste() == text:
                pyperclip.copy("")
        except pyperclip.PyperclipException as e:
            logging.warning(f"Could not clear clipboard: {e}")

    timer = threading.Timer(timeout, clear)
    timer.start()
    return timer
