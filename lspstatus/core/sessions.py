"""
Sessions — Language server session catalog

The server extension reports which language servers it can run. Each
session declares a display name and the languages it serves. The catalog
arrives whole or not at all; until it arrives (or if fetching it fails)
it is "unavailable" and behaves as an empty catalog.

Response shape:
    {"sessions": [{"spec": {"display_name": "pylsp", "languages": ["python"]}}]}

"sessions" may also be a mapping of server name to session, and a session
may carry display_name/languages directly instead of under "spec".
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple


class CatalogFormatError(ValueError):
    """Raised when a catalog response does not have the expected shape."""
    pass


@dataclass(frozen=True)
class ServerSession:
    """One language server the backend can run."""
    display_name: str
    languages: Tuple[str, ...] = ()
    name: Optional[str] = None  # Server key, when the backend reports one

    @property
    def normalized_languages(self) -> Tuple[str, ...]:
        return tuple(language.lower() for language in self.languages)

    def serves(self, language: str) -> bool:
        """Check whether this session serves a (lowercased) language."""
        return language.lower() in self.normalized_languages

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> 'ServerSession':
        """
        Build a session from one catalog entry.

        Raises:
            CatalogFormatError: If display_name or languages are missing or mistyped
        """
        if not isinstance(data, dict):
            raise CatalogFormatError(f"Session entry must be an object, got {type(data).__name__}")

        spec = data.get("spec", data)
        if not isinstance(spec, dict):
            raise CatalogFormatError("Session 'spec' must be an object")

        display_name = spec.get("display_name", name)
        if not isinstance(display_name, str) or not display_name:
            raise CatalogFormatError("Session is missing 'display_name'")

        languages = spec.get("languages", [])
        if not isinstance(languages, list) or not all(isinstance(lang, str) for lang in languages):
            raise CatalogFormatError(f"Session '{display_name}' has invalid 'languages'")

        return cls(display_name=display_name, languages=tuple(languages), name=name)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "display_name": self.display_name,
            "languages": list(self.languages),
        }
        if self.name:
            d["name"] = self.name
        return d


@dataclass(frozen=True)
class SessionCatalog:
    """Ordered, immutable list of server sessions."""
    sessions: Tuple[ServerSession, ...] = ()
    available: bool = True

    @classmethod
    def unavailable(cls) -> 'SessionCatalog':
        """Catalog placeholder for "not fetched yet" and "fetch failed"."""
        return cls(sessions=(), available=False)

    @classmethod
    def from_sessions(cls, sessions: List[ServerSession]) -> 'SessionCatalog':
        return cls(sessions=tuple(sessions), available=True)

    @classmethod
    def from_response(cls, data: Any) -> 'SessionCatalog':
        """
        Parse a server extension response.

        Raises:
            CatalogFormatError: If the response is not a valid catalog
        """
        if not isinstance(data, dict):
            raise CatalogFormatError("Catalog response must be an object")

        raw_sessions = data.get("sessions")
        if isinstance(raw_sessions, dict):
            sessions = [ServerSession.from_dict(entry, name=key) for key, entry in raw_sessions.items()]
        elif isinstance(raw_sessions, list):
            sessions = [ServerSession.from_dict(entry) for entry in raw_sessions]
        else:
            raise CatalogFormatError("Catalog response is missing 'sessions'")

        return cls.from_sessions(sessions)

    def __iter__(self) -> Iterator[ServerSession]:
        return iter(self.sessions)

    def __len__(self) -> int:
        return len(self.sessions)

    def to_dict(self) -> Dict[str, Any]:
        return {"sessions": [session.to_dict() for session in self.sessions]}
