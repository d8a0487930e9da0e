"""
Tests for Symbols — Icon lookup, detection, and truncation
"""

from unittest.mock import patch

from lspstatus.presentation.symbols import (
    ASCII, UNICODE, get_symbols, supports_unicode, symbol_for_icon, truncate,
)


class TestSymbolSets:

    def test_ascii_is_printable(self):
        for value in vars(ASCII).values():
            assert value.isascii()

    def test_icons_distinct(self):
        for symbols in (UNICODE, ASCII):
            icons = {symbols.icon_refresh, symbols.icon_running, symbols.icon_stop}
            assert len(icons) == 3


class TestIconLookup:

    def test_known_keys(self):
        assert symbol_for_icon(ASCII, "refresh") == ASCII.icon_refresh
        assert symbol_for_icon(ASCII, "running") == ASCII.icon_running
        assert symbol_for_icon(ASCII, "stop") == ASCII.icon_stop

    def test_unknown_key_falls_back_to_stop(self):
        assert symbol_for_icon(UNICODE, "sparkles") == UNICODE.icon_stop


class TestDetection:

    def test_explicit_preference(self):
        assert get_symbols("ascii") is ASCII
        assert get_symbols("unicode") is UNICODE

    def test_ascii_only_env(self, monkeypatch):
        monkeypatch.setenv("LSPSTATUS_ASCII_ONLY", "1")
        assert supports_unicode() is False
        assert get_symbols("auto") is ASCII

    def test_unicode_env(self, monkeypatch):
        monkeypatch.delenv("LSPSTATUS_ASCII_ONLY", raising=False)
        monkeypatch.setenv("LSPSTATUS_UNICODE", "true")
        assert supports_unicode() is True

    def test_cp_encoding_is_ascii(self, monkeypatch):
        monkeypatch.delenv("LSPSTATUS_ASCII_ONLY", raising=False)
        monkeypatch.delenv("LSPSTATUS_UNICODE", raising=False)
        with patch("sys.stdout") as stdout:
            stdout.encoding = "cp1252"
            assert supports_unicode() is False


class TestTruncate:

    def test_short_text_untouched(self):
        assert truncate("abc", 6) == "abc"

    def test_truncates_with_ellipsis(self):
        assert truncate("abcdefgh", 6) == "abc..."
        assert truncate("abcdefgh", 6, symbols=UNICODE) == "abcde…"

    def test_full_mode(self):
        assert truncate("abcdefgh", 6, full=True) == "abcdefgh"

    def test_empty(self):
        assert truncate("", 6) == ""
