"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.lspstatus/config.yaml)
  3. User config (~/.lspstatus/config.yaml)
  4. Defaults
"""

import math
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .core.documents import DEFAULT_MAX_DEPTH
from .presentation.symbols import get_symbols
from .services.catalog import DEFAULT_TIMEOUT


DEFAULT_CATALOG_URL = "http://localhost:8888/lsp"


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    format: str = "auto"   # "auto" | "json"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"

        valid_formats = ("auto", "json")
        if self.format not in valid_formats:
            return f"Unknown format '{self.format}'. Valid: {', '.join(valid_formats)}"
        return None


@dataclass
class CatalogConfig:
    """Where and how to fetch the server session catalog."""
    url: str = DEFAULT_CATALOG_URL
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> Optional[str]:
        if not self.url:
            return "Catalog url must not be empty"
        if not math.isfinite(self.timeout) or self.timeout <= 0:
            return f"Catalog timeout must be positive, got {self.timeout}"
        return None


@dataclass
class TraversalConfig:
    """Document tree traversal limits."""
    max_depth: int = DEFAULT_MAX_DEPTH

    def validate(self) -> Optional[str]:
        if self.max_depth < 1:
            return f"max_depth must be at least 1, got {self.max_depth}"
        return None


@dataclass
class Config:
    """Application configuration."""
    display: DisplayConfig = field(default_factory=DisplayConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)
    traversal: TraversalConfig = field(default_factory=TraversalConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "display": {
                "symbols": self.display.symbols,
                "format": self.display.format
            },
            "catalog": {
                "url": self.catalog.url,
                "timeout": self.catalog.timeout
            },
            "traversal": {
                "max_depth": self.traversal.max_depth
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        display_data = data.get("display", {})
        catalog_data = data.get("catalog", {})
        traversal_data = data.get("traversal", {})

        return cls(
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                format=display_data.get("format", "auto")
            ),
            catalog=CatalogConfig(
                url=catalog_data.get("url", DEFAULT_CATALOG_URL),
                timeout=float(catalog_data.get("timeout", DEFAULT_TIMEOUT))
            ),
            traversal=TraversalConfig(
                max_depth=int(traversal_data.get("max_depth", DEFAULT_MAX_DEPTH))
            )
        )

    def validate(self) -> Optional[str]:
        """First validation error across sections, or None."""
        for section in (self.display, self.catalog, self.traversal):
            error = section.validate()
            if error:
                return error
        return None


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment (LSPSTATUS_CATALOG_URL, LSPSTATUS_SYMBOLS)
      2. Project config (.lspstatus/config.yaml)
      3. User config (~/.lspstatus/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".lspstatus"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".lspstatus"
    PROJECT_CONFIG_FILE = "config.yaml"

    # section -> setting -> parser
    SETTINGS = {
        "display": {"symbols": str, "format": str},
        "catalog": {"url": str, "timeout": float},
        "traversal": {"max_depth": int},
    }

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore unreadable config, fall back to lower layers
        return data if isinstance(data, dict) else {}

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        if os.environ.get("LSPSTATUS_CATALOG_URL"):
            config_data.setdefault("catalog", {})["url"] = os.environ["LSPSTATUS_CATALOG_URL"]
        if os.environ.get("LSPSTATUS_SYMBOLS"):
            config_data.setdefault("display", {})["symbols"] = os.environ["LSPSTATUS_SYMBOLS"]

        self._config = Config.from_dict(config_data)
        return self._config

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "catalog.url")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'catalog.url')"

        section, setting = parts
        if section not in self.SETTINGS:
            return f"Unknown section: {section}. Valid: {', '.join(self.SETTINGS)}"

        settings = self.SETTINGS[section]
        if setting not in settings:
            return f"Unknown {section} setting: {setting}. Valid: {', '.join(settings)}"

        try:
            parsed = settings[setting](value)
        except ValueError:
            return f"Invalid value for {key}: {value!r}"

        section_config = getattr(config, section)
        previous = getattr(section_config, setting)
        setattr(section_config, setting, parsed)

        error = section_config.validate()
        if error:
            setattr(section_config, setting, previous)
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts
        if setting not in self.SETTINGS.get(section, {}):
            return None
        return str(getattr(getattr(config, section), setting))

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        error = config.validate()
        validity = f"{symbols.check_pass} Valid" if error is None else f"{symbols.check_fail} {error}"
        lines = [
            "Configuration:",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            f"  Format: {config.display.format}",
            "",
            "Catalog:",
            f"  URL: {config.catalog.url}",
            f"  Timeout: {config.catalog.timeout}s",
            "",
            "Traversal:",
            f"  Max depth: {config.traversal.max_depth}",
            "",
            f"Status: {validity}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()
