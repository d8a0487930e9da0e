"""
Symbols — Visual vocabulary for connection states

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Icons are looked up by key ("refresh", "running", "stop") so the status
wording and the icon set can change independently.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# Common Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '–': '-',
    '—': '--',
    '•': '*',
    '·': '.',
    '●': '*',
    '○': 'o',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Document ids come from file names and may hold characters the
    terminal cannot encode; those are replaced rather than raising.
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


@dataclass(frozen=True)
class SymbolSet:
    """Complete set of symbols for statuses and list markers."""
    # Status icons (by icon key)
    icon_refresh: str
    icon_running: str
    icon_stop: str

    # Per-document markers
    document_ready: str
    document_pending: str

    # Lists
    caret_open: str
    caret_closed: str
    bullet: str
    tree_branch: str
    tree_end: str

    # Checks
    check_pass: str
    check_fail: str

    # Text truncation
    ellipsis: str


UNICODE = SymbolSet(
    icon_refresh='↻',
    icon_running='●',
    icon_stop='■',
    document_ready='●',
    document_pending='○',
    caret_open='▾',
    caret_closed='▸',
    bullet='•',
    tree_branch='├─',
    tree_end='└─',
    check_pass='✓',
    check_fail='❌',
    ellipsis='…',
)

ASCII = SymbolSet(
    icon_refresh='[~]',
    icon_running='[*]',
    icon_stop='[x]',
    document_ready='(*)',
    document_pending='( )',
    caret_open='v',
    caret_closed='>',
    bullet='*',
    tree_branch='+-',
    tree_end='+-',
    check_pass='[OK]',
    check_fail='[ERR]',
    ellipsis='...',
)


# Mapping from icon key to symbol attribute
ICON_TO_SYMBOL = {
    'refresh': 'icon_refresh',
    'running': 'icon_running',
    'stop': 'icon_stop',
}


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    if os.environ.get('LSPSTATUS_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('LSPSTATUS_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if 'utf' in encoding_lower:
            return True

    for var in ('LC_ALL', 'LANG'):
        value = os.environ.get(var, '').lower()
        if 'utf-8' in value or 'utf8' in value:
            return True

    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)

    Returns:
        Appropriate SymbolSet for the environment
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII


def symbol_for_icon(symbols: SymbolSet, icon_key: str) -> str:
    """Get symbol for a status icon key. Unknown keys render as the stop icon."""
    attr = ICON_TO_SYMBOL.get(icon_key, 'icon_stop')
    return getattr(symbols, attr)


def truncate(text: str, length: int = 120, full: bool = False, symbols: Optional[SymbolSet] = None) -> str:
    """
    Truncate text with ellipsis, respecting full mode.

    Examples:
        truncate("abcdefgh", 6)            -> "abc..."
        truncate("abcdefgh", 6, full=True) -> "abcdefgh"
    """
    if not text:
        return ""
    if full or len(text) <= length:
        return text
    ellipsis = symbols.ellipsis if symbols else "..."
    if length <= len(ellipsis):
        return text[:length]
    return text[:length - len(ellipsis)] + ellipsis
