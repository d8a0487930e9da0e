"""
Reconciler — Match document languages against server sessions

Answers three questions about a document tree and a session catalog:
- Which servers are running, and for which documents? (in use)
- Which servers could run but nothing needs them? (available, not in use)
- Which languages have no server at all? (missing)

When two sessions serve the same language the first one in catalog order
wins and a warning is logged. An unavailable catalog yields empty views.
"""

import logging
from typing import Dict, List, Optional, Set

from ..core.documents import DEFAULT_MAX_DEPTH, VirtualDocument, collect_documents
from ..core.sessions import ServerSession, SessionCatalog

logger = logging.getLogger(__name__)

# session -> language -> documents, in catalog-match and traversal order
DocumentsByServer = Dict[ServerSession, Dict[str, List[VirtualDocument]]]


class LanguageReconciler:
    """
    Derived language views over one tree snapshot and one catalog.

    Built fresh for every read; holds no state beyond its inputs.
    """

    def __init__(self, root: Optional[VirtualDocument], catalog: SessionCatalog,
                 max_depth: int = DEFAULT_MAX_DEPTH):
        self.catalog = catalog
        self.documents: List[VirtualDocument] = (
            collect_documents(root, max_depth=max_depth) if root is not None else []
        )

    @property
    def detected_languages(self) -> List[str]:
        """Lowercased tree languages, deduplicated in traversal order."""
        languages: Dict[str, None] = {}
        for document in self.documents:
            languages.setdefault(document.normalized_language, None)
        return list(languages)

    @property
    def supported_languages(self) -> Set[str]:
        """Every language some session serves (lowercased)."""
        return {
            language
            for session in self.catalog
            for language in session.normalized_languages
        }

    def sessions_for(self, language: str) -> List[ServerSession]:
        """Catalog sessions serving a language, in catalog order."""
        return [session for session in self.catalog if session.serves(language)]

    def is_server_running(self, session: ServerSession) -> bool:
        """A session is in use when any of its languages is in the tree."""
        detected = set(self.detected_languages)
        return any(language in detected for language in session.normalized_languages)

    @property
    def documents_by_server(self) -> DocumentsByServer:
        """
        Group documents under the session that serves them, then by language.

        Documents without a matching session are left out (see
        missing_languages).
        """
        grouped: DocumentsByServer = {}
        warned: Set[str] = set()

        for document in self.documents:
            language = document.normalized_language
            sessions = self.sessions_for(language)
            if not sessions:
                continue
            if len(sessions) > 1 and language not in warned:
                warned.add(language)
                logger.warning(
                    "More than one server per language for %s: %s; using %s",
                    language,
                    ", ".join(session.display_name for session in sessions),
                    sessions[0].display_name,
                )

            by_language = grouped.setdefault(sessions[0], {})
            by_language.setdefault(language, []).append(document)

        return grouped

    @property
    def servers_in_use(self) -> List[ServerSession]:
        return list(self.documents_by_server)

    @property
    def servers_available_not_in_use(self) -> List[ServerSession]:
        """Sessions none of whose languages appear in the tree, in catalog order."""
        return [session for session in self.catalog if not self.is_server_running(session)]

    @property
    def missing_languages(self) -> List[str]:
        """Tree languages no session serves, in traversal order."""
        if not self.catalog.available:
            return []
        supported = self.supported_languages
        return [language for language in self.detected_languages if language not in supported]
