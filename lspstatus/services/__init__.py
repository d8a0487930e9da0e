"""
Services — I/O at the edges

- Catalog: fetch the server session catalog over HTTP or from a file
"""

from .catalog import CatalogFetcher, FileCatalogFetcher, get_fetcher, parse_catalog

__all__ = ["CatalogFetcher", "FileCatalogFetcher", "get_fetcher", "parse_catalog"]
