"""
OutputTemplate — Plain-text rendering of the status popup

Builds the same structure the status bar popup shows:

    ================================================
    LSP servers
    ================================================
    ↻ Partially initialized
    Fully connected, but 1/2 virtual documents stuck uninitialized: a.ipynb/r-1

    ▸ Available (1)

    ▾ Running (2)
    python (pylsp)
      └─ a.ipynb  initialized ●
    r (r-languageserver)
      └─ a.ipynb/r-1  connected ○

    Documentation: Language Servers <https://...>

Collapsed sections show only their title unless rendered in full mode.
"""

import shutil
from dataclasses import dataclass
from typing import List, Optional, TYPE_CHECKING

from .symbols import SymbolSet, get_symbols, symbol_for_icon, truncate

if TYPE_CHECKING:
    from ..model import StatusView


HEADER_CHAR = "="
DEFAULT_WIDTH = 80
LONG_TEXT_LENGTH = 200
DOCUMENTATION_URL = "https://github.com/krassowski/jupyterlab-lsp/blob/master/LANGUAGESERVERS.md"


@dataclass
class TemplateSection:
    """A titled, optionally collapsed, list of lines."""
    title: str
    lines: List[str]
    collapsed: bool = False


class OutputTemplate:
    """
    Builder for structured popup output.

    Creates consistent output with:
    - HEADER: Title between borders, then status lines
    - SECTIONS: Titled lists with item counts
    - FOOTER: Closing line (documentation link)
    """

    def __init__(
        self,
        symbols: Optional[SymbolSet] = None,
        width: Optional[int] = None,
        full: bool = False
    ):
        """
        Args:
            symbols: SymbolSet for visual elements (auto-detect if None)
            width: Border width (terminal width if None, capped at DEFAULT_WIDTH)
            full: If True, expand collapsed sections
        """
        self.symbols = symbols or get_symbols()
        self.width = width or min(shutil.get_terminal_size().columns or DEFAULT_WIDTH, DEFAULT_WIDTH)
        self.full = full

        self._title: Optional[str] = None
        self._status_lines: List[str] = []
        self._sections: List[TemplateSection] = []
        self._footer: Optional[str] = None

    def header(self, title: str, *status_lines: str) -> "OutputTemplate":
        self._title = title
        self._status_lines = [line for line in status_lines if line]
        return self

    def section(self, title: str, lines: List[str], collapsed: bool = False) -> "OutputTemplate":
        """Add a section. The title is suffixed with the item count."""
        self._sections.append(TemplateSection(title=title, lines=lines, collapsed=collapsed))
        return self

    def footer(self, text: str) -> "OutputTemplate":
        self._footer = text
        return self

    def render(self) -> str:
        lines: List[str] = []

        if self._title:
            border = HEADER_CHAR * self.width
            lines.extend([border, self._title, border])
            lines.extend(self._status_lines)
            lines.append("")

        for section in self._sections:
            lines.extend(self._render_section(section))

        if self._footer:
            lines.append(self._footer)

        return "\n".join(lines)

    def _render_section(self, section: TemplateSection) -> List[str]:
        expanded = self.full or not section.collapsed
        caret = self.symbols.caret_open if expanded else self.symbols.caret_closed
        lines = [f"{caret} {section.title}"]
        if expanded:
            lines.extend(section.lines)
        lines.append("")
        return lines


def _tree_lines(symbols: SymbolSet, items: List[str], indent: str = "  ") -> List[str]:
    lines = []
    for i, item in enumerate(items):
        marker = symbols.tree_end if i == len(items) - 1 else symbols.tree_branch
        lines.append(f"{indent}{marker} {item}")
    return lines


def render_status_view(view: "StatusView", symbols: Optional[SymbolSet] = None,
                       width: Optional[int] = None, full: bool = False) -> str:
    """
    Render a StatusView as popup text.

    Sections appear only when they have content: Available (collapsed by
    default), Running (one block per session and language, titled with the number
    of servers), Missing.
    """
    symbols = symbols or get_symbols()
    template = OutputTemplate(symbols=symbols, width=width, full=full)

    icon = symbol_for_icon(symbols, view.text.icon_key)
    template.header(
        "LSP servers",
        f"{icon} {view.text.short_text}",
        truncate(view.text.long_text, LONG_TEXT_LENGTH, full=full, symbols=symbols),
        view.feature_message,
    )

    if view.servers_available_not_in_use:
        lines = []
        for session in view.servers_available_not_in_use:
            lines.append(session.display_name)
            lines.extend(_tree_lines(symbols, list(session.languages)))
        template.section(f"Available ({len(view.servers_available_not_in_use)})", lines, collapsed=True)

    if view.running:
        lines = []
        for group in view.running:
            lines.append(f"{group.language} ({group.session.display_name})")
            lines.extend(_tree_lines(symbols, [
                f"{entry.id_path}  {entry.status.value} "
                f"{symbols.document_ready if entry.is_initialized else symbols.document_pending}"
                for entry in group.documents
            ]))
        servers = {group.session for group in view.running}
        template.section(f"Running ({len(servers)})", lines)

    if view.missing_languages:
        lines = [f"  {symbols.bullet} {language}" for language in view.missing_languages]
        template.section(f"Missing ({len(view.missing_languages)})", lines)

    template.footer(f"Documentation: Language Servers <{DOCUMENTATION_URL}>")
    return template.render()
