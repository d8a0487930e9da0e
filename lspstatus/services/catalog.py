"""
Catalog — Fetch the language server session catalog

The server extension publishes its sessions at a JSON endpoint
(`<base_url>lsp`). A fetch either yields a SessionCatalog or, on any
network, HTTP or format problem, an unavailable one. Failures are logged
here and never raised to the status model.

Local files (JSON or YAML) are accepted too, for offline use from the CLI.
"""

import logging
from pathlib import Path
from typing import Optional

import httpx
import yaml

from ..core.sessions import CatalogFormatError, SessionCatalog

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class CatalogFetcher:
    """Asynchronous, failure-tolerant catalog client."""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            url: Catalog endpoint
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def fetch(self) -> SessionCatalog:
        """
        Fetch and parse the catalog.

        Returns:
            SessionCatalog, or SessionCatalog.unavailable() on any failure
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException:
            logger.warning("Catalog request to %s timed out after %ss", self.url, self.timeout)
            return SessionCatalog.unavailable()
        except httpx.HTTPError as exc:
            logger.warning("Catalog request to %s failed: %s", self.url, exc)
            return SessionCatalog.unavailable()
        except ValueError as exc:
            logger.warning("Catalog response from %s is not JSON: %s", self.url, exc)
            return SessionCatalog.unavailable()

        return parse_catalog(data, source=self.url)


class FileCatalogFetcher:
    """Read the catalog from a local JSON or YAML file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    async def fetch(self) -> SessionCatalog:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError, ValueError) as exc:
            logger.warning("Could not read catalog file %s: %s", self.path, exc)
            return SessionCatalog.unavailable()

        return parse_catalog(data, source=str(self.path))


def parse_catalog(data, source: str = "response") -> SessionCatalog:
    """Parse catalog data, degrading to unavailable on a bad shape."""
    try:
        catalog = SessionCatalog.from_response(data)
    except CatalogFormatError as exc:
        logger.warning("Invalid catalog from %s: %s", source, exc)
        return SessionCatalog.unavailable()

    logger.debug("Catalog from %s lists %d session(s)", source, len(catalog))
    return catalog


def get_fetcher(source: str, timeout: float = DEFAULT_TIMEOUT):
    """Pick a fetcher for a URL or a file path."""
    if source.startswith(("http://", "https://")):
        return CatalogFetcher(source, timeout=timeout)
    return FileCatalogFetcher(Path(source))
