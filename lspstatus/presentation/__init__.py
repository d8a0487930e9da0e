"""
Presentation — Display layer

- Symbols: Visual vocabulary (unicode/ascii)
- Messages: Status text and icon keys
- Template: Popup text rendering
"""

from .symbols import SymbolSet, get_symbols, safe_print, symbol_for_icon, truncate
from .messages import StatusText, format_status, long_message, ICON_BY_STATUS, SHORT_MESSAGE_BY_STATUS
from .template import OutputTemplate, render_status_view

__all__ = [
    "SymbolSet", "get_symbols", "safe_print", "symbol_for_icon", "truncate",
    "StatusText", "format_status", "long_message", "ICON_BY_STATUS", "SHORT_MESSAGE_BY_STATUS",
    "OutputTemplate", "render_status_view",
]
