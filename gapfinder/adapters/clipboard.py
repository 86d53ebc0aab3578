"""
System clipboard output.
"""

import pyperclip

from ..domain.exceptions import ClipboardError


def copy_to_clipboard(text: str) -> None:
    """
    Place text on the system clipboard.

    Raises:
        ClipboardError: If no clipboard mechanism is available
    """
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"Could not copy to clipboard: {exc}") from exc
