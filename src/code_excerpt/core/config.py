"""Configuration models for code-excerpt.

This module provides Pydantic models for excerpt rendering and document
source configuration:
- ExcerptConfig: Budget, line numbering and anchor window defaults
- SourceConfig: Repository, ref, URL templates and HTTP settings
- Config: Root configuration loaded from YAML

Environment variable substitution is supported for the source token via
${VAR} syntax.

Example:
    >>> from code_excerpt.core.config import Config, SourceConfig
    >>> config = Config(source=SourceConfig(repository="Snazzah/slash-create", token="${GH_TOKEN}"))
    >>> config.excerpt.budget
    2000

"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from code_excerpt.core.exceptions import ConfigError
from code_excerpt.excerpt.types import (
    DEFAULT_BUDGET,
    DEFAULT_RADIUS,
    MIN_BUDGET,
    FormattingOptions,
)

logger = logging.getLogger(__name__)

# Pattern for env var substitution: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")

# Config files larger than this are rejected before parsing
MAX_CONFIG_SIZE = 1024 * 1024

_REPOSITORY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")


def _substitute_env_vars(value: str) -> str:
    """Substitute ${VAR} patterns with environment variable values.

    Args:
        value: String potentially containing ${VAR} patterns.

    Returns:
        String with env vars substituted. Missing vars become empty string.

    """

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name, "")
        if not env_value:
            logger.debug("Environment variable %s not set", var_name)
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


class ExcerptConfig(BaseModel):
    """Excerpt rendering configuration.

    Attributes:
        budget: Maximum serialized excerpt length in characters.
        include_line_numbers: Prefix body lines with line-number tags.
        radius: Default lines shown on each side of an anchor.
        offset: Default shift applied to anchor windows.
        fence_language: Fence language tag. None derives it from the file
            extension, "" disables the tag.

    """

    model_config = ConfigDict(frozen=True)

    budget: int = Field(
        default=DEFAULT_BUDGET,
        ge=MIN_BUDGET,
        description="Maximum excerpt length in characters",
    )
    include_line_numbers: bool = Field(
        default=False,
        description="Prefix every line with its line number",
    )
    radius: int = Field(
        default=DEFAULT_RADIUS,
        ge=1,
        description="Lines shown around an anchor line",
    )
    offset: int = Field(
        default=0,
        description="Shift applied to anchor windows",
    )
    fence_language: str | None = Field(
        default=None,
        description="Code fence language (None = detect from extension)",
    )

    def formatting_options(self, **overrides: object) -> FormattingOptions:
        """Build FormattingOptions from this config.

        Args:
            **overrides: FormattingOptions fields taking precedence over
                config values (None values are ignored).

        Returns:
            FormattingOptions for render_excerpt().

        """
        values: dict[str, object] = {
            "include_line_numbers": self.include_line_numbers,
            "budget": self.budget,
            "language": self.fence_language,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return FormattingOptions(**values)  # type: ignore[arg-type]


class SourceConfig(BaseModel):
    """Document source configuration.

    Attributes:
        repository: GitHub repository as "owner/name".
        ref: Branch, tag or commit documents are read from.
        raw_url_template: Template for raw file URLs.
        blob_url_template: Template for deep links to a line range.
        token: Optional API token (${VAR} supported).
        timeout: HTTP timeout in seconds.
        max_retries: Retries after the first attempt on transient errors.

    """

    model_config = ConfigDict(frozen=True)

    repository: str = Field(
        ...,
        description="Repository as owner/name",
    )
    ref: str = Field(
        default="master",
        min_length=1,
        description="Branch, tag or commit",
    )
    raw_url_template: str = Field(
        default="https://raw.githubusercontent.com/{repository}/{ref}/{file}",
        description="Raw file URL template",
    )
    blob_url_template: str = Field(
        default="https://github.com/{repository}/blob/{ref}/{file}#L{start}-L{end}",
        description="Line range deep link template",
    )
    token: str | None = Field(
        default=None,
        description="API token (${VAR} supported)",
    )
    timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout in seconds",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries on timeouts, 429 and 5xx",
    )

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        """Require the owner/name form."""
        if not _REPOSITORY_PATTERN.match(v):
            raise ValueError(f"repository must be 'owner/name', got '{v}'")
        return v

    @field_validator("token", mode="before")
    @classmethod
    def substitute_env_vars(cls, v: str | None) -> str | None:
        """Substitute ${VAR} patterns with environment variable values."""
        if v is None:
            return None
        return _substitute_env_vars(v)

    def __repr__(self) -> str:
        """Return string representation with the token masked."""
        token = "***" if self.token else None
        return (
            f"SourceConfig(repository={self.repository!r}, ref={self.ref!r}, "
            f"token={token})"
        )


class Config(BaseModel):
    """Root configuration.

    Attributes:
        excerpt: Excerpt rendering configuration.
        source: Document source, None when only local files are used.

    """

    model_config = ConfigDict(frozen=True)

    excerpt: ExcerptConfig = Field(
        default_factory=ExcerptConfig,
        description="Excerpt rendering configuration",
    )
    source: SourceConfig | None = Field(
        default=None,
        description="Remote document source",
    )


def load_config(path: Path | None) -> Config:
    """Load and validate configuration from a YAML file.

    Args:
        path: Path to the YAML file, or None for defaults.

    Returns:
        Validated Config.

    Raises:
        ConfigError: On file/parse/validation errors.

    """
    if path is None:
        return Config()

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read(MAX_CONFIG_SIZE + 1)
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    if len(content) > MAX_CONFIG_SIZE:
        raise ConfigError(f"Config {path} exceeds 1MB limit")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(data).__name__}")

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed for {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config
