"""
Configuration management using Pydantic Settings.
Loads settings from environment variables, .env files and an optional YAML config file.
"""

import re
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    CONFIG_FILE_NAMES,
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    DEFAULT_PLACEHOLDER_PATTERNS,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_REQUIRED_SECTIONS,
    DEFAULT_SEPARATOR_MARKER,
    DEFAULT_TEMPLATE_HEADINGS,
    LogFormat,
    Severity,
)
from .exceptions import ConfigurationError
from ..models.document import TemplateHeading

_HEADING_SPEC = re.compile(r"^(#{1,6})\s+(\S.*)$")


class Settings(BaseSettings):
    """Auditor settings."""

    model_config = SettingsConfigDict(
        env_prefix="DOCS_AUDITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Discovery
    include: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCLUDE),
        description="Glob patterns of documents to audit, relative to the docs dir",
    )
    exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDE),
        description="Glob patterns to skip",
    )

    # Template
    template_headings: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TEMPLATE_HEADINGS),
        description="Ordered heading specs every document must contain",
    )
    separator_marker: str = Field(
        default=DEFAULT_SEPARATOR_MARKER,
        description="Marker line expected between consecutive template sections",
    )
    require_separators: bool = Field(default=True, description="Check section separators")
    required_sections: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_SECTIONS),
        description="Sections whose emptiness is an error rather than a warning",
    )
    placeholder_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PLACEHOLDER_PATTERNS),
        description="Case-insensitive regexes matching placeholder lines",
    )
    product_name: str = Field(
        default=DEFAULT_PRODUCT_NAME,
        description="Product name used in scaffolded placeholder text",
    )

    # Rules
    disabled_rules: list[str] = Field(default_factory=list, description="Rule ids to skip")
    severity_overrides: dict[str, Severity] = Field(
        default_factory=dict, description="Per-rule severity overrides"
    )
    strict: bool = Field(default=False, description="Treat warnings as failures")

    # Logging
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Log renderer")

    @field_validator("template_headings")
    @classmethod
    def validate_template_headings(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("template_headings must not be empty")
        for spec in v:
            if not _HEADING_SPEC.match(spec.strip()):
                raise ValueError(f"invalid heading spec '{spec}' (expected e.g. '## Overview')")
        return v

    @field_validator("placeholder_patterns")
    @classmethod
    def validate_placeholder_patterns(cls, v: list[str]) -> list[str]:
        for pattern in v:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValueError(f"invalid placeholder pattern '{pattern}': {e}") from e
        return v

    @field_validator("separator_marker")
    @classmethod
    def validate_separator_marker(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("separator_marker must not be blank")
        return v.strip()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @property
    def template(self) -> list[TemplateHeading]:
        """Parsed template headings in order."""
        headings = []
        for spec in self.template_headings:
            match = _HEADING_SPEC.match(spec.strip())
            headings.append(TemplateHeading(level=len(match.group(1)), text=match.group(2).strip()))
        return headings

    @property
    def template_depth(self) -> int:
        """Deepest heading level the template constrains."""
        return max(h.level for h in self.template)

    @property
    def compiled_placeholders(self) -> list[re.Pattern[str]]:
        """Placeholder regexes, compiled case-insensitively."""
        return [re.compile(p, re.IGNORECASE) for p in self.placeholder_patterns]

    def is_required_section(self, name: str) -> bool:
        """Check whether a section must have content (case-insensitive)."""
        key = _normalize(name)
        return any(_normalize(s) == key for s in self.required_sections)


def _normalize(text: str) -> str:
    return " ".join(text.split()).lower()


def find_config_file(*directories: Optional[Path]) -> Optional[Path]:
    """
    Find the first config file in the given directories.

    Args:
        directories: Directories to search, in priority order

    Returns:
        Path to the config file, or None
    """
    for directory in directories:
        if directory is None:
            continue
        for name in CONFIG_FILE_NAMES:
            candidate = Path(directory) / name
            if candidate.is_file():
                return candidate
    return None


def read_config_file(path: Path) -> dict[str, Any]:
    """
    Read a YAML config file.

    Raises:
        ConfigurationError: If the file is missing or not a YAML mapping
    """
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}", details={"path": str(path)})

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in config file: {e}", details={"path": str(path)}
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping", details={"path": str(path)}
        )
    return data


def load_settings(
    config_file: Optional[Path] = None,
    search_dirs: tuple[Optional[Path], ...] = (),
    **overrides: Any,
) -> Settings:
    """
    Build settings from a config file plus explicit overrides.

    Precedence: overrides > config file > environment > defaults.

    Args:
        config_file: Explicit config file path
        search_dirs: Directories searched for a config file when none is given
        overrides: Values that win over everything else (None values are ignored)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the file is unreadable or values fail validation
    """
    path = config_file or find_config_file(*search_dirs)
    values: dict[str, Any] = read_config_file(path) if path else {}
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid configuration",
            details={
                "source": str(path) if path else None,
                "errors": [
                    {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                    for err in e.errors()
                ],
            },
        ) from e


@lru_cache
def get_settings() -> Settings:
    """
    Get cached default settings instance.
    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
