"""
Documents — Virtual document tree and traversal

A virtual document is a unit of source text tracked on its own for
language-service purposes: a whole file, or a fragment embedded in another
document and written in a different language (a %%R cell in a Python
notebook, CSS inside HTML). Embedded documents form a tree under the
document that contains them.

Documents are owned by the editor model. This module only reads them.
Nodes hash by identity, so two documents with the same id_path are still
two documents.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Acyclicity of the embedding relation is a property of the editor model,
# not of this structure, so traversal is bounded.
DEFAULT_MAX_DEPTH = 64


@dataclass(eq=False)
class VirtualDocument:
    """One logical document and the documents embedded in it."""
    id_path: str
    language: str
    foreign_documents: List['VirtualDocument'] = field(default_factory=list)
    parent: Optional['VirtualDocument'] = field(default=None, repr=False)

    def add_foreign(self, document: 'VirtualDocument') -> 'VirtualDocument':
        """Embed a document in this one. Returns the embedded document."""
        document.parent = self
        self.foreign_documents.append(document)
        return document

    def remove_foreign(self, document: 'VirtualDocument') -> bool:
        for i, candidate in enumerate(self.foreign_documents):
            if candidate is document:
                del self.foreign_documents[i]
                document.parent = None
                return True
        return False

    @property
    def normalized_language(self) -> str:
        """Language tag used for matching against servers."""
        return self.language.lower()

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def __repr__(self) -> str:
        return f"VirtualDocument({self.id_path!r}, language={self.language!r})"


def collect_documents(root: VirtualDocument,
                      max_depth: int = DEFAULT_MAX_DEPTH) -> List[VirtualDocument]:
    """
    Collect the root and every document embedded in it, recursively.

    Depth-first, root first, children in embedding order. Each document
    appears once (by identity). Descent stops at max_depth.

    Args:
        root: Top-level document
        max_depth: Deepest embedding level to visit (root is level 0)

    Returns:
        Documents in traversal order, root first
    """
    collected: Dict[VirtualDocument, None] = {}
    _collect(root, collected, depth=0, max_depth=max_depth)
    return list(collected)


def _collect(document: VirtualDocument, collected: Dict[VirtualDocument, None],
             depth: int, max_depth: int) -> None:
    if document in collected:
        logger.warning("Document %s reached twice during traversal; skipping", document.id_path)
        return
    collected[document] = None

    if not document.foreign_documents:
        return
    if depth >= max_depth:
        logger.warning(
            "Embedding depth limit (%d) reached at %s; %d embedded document(s) not visited",
            max_depth, document.id_path, len(document.foreign_documents)
        )
        return

    for foreign in document.foreign_documents:
        _collect(foreign, collected, depth + 1, max_depth)


def collect_languages(root: VirtualDocument,
                      max_depth: int = DEFAULT_MAX_DEPTH) -> List[str]:
    """
    Lowercased languages present in the tree.

    Deduplicated, in the order they are first met during traversal.
    """
    languages: Dict[str, None] = {}
    for document in collect_documents(root, max_depth=max_depth):
        languages.setdefault(document.normalized_language, None)
    return list(languages)
