"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
Relative paths are anchored at ``project_root``.
"""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ThemeScope(str, Enum):
    """Where the user theme block applies."""

    ROOT = "root"
    ATTR = "attr"


DEFAULT_STYLESHEET_CANDIDATES: tuple[Path, ...] = (
    Path("dist/ds-preview.css"),
    Path("preview/css/ds-preview.css"),
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have defaults matching the conventional design-system
    project layout. Override via environment variables (prefixed with
    TOKEN_CHAIN_) or a .env file.

    Examples:
        TOKEN_CHAIN_PROJECT_ROOT=/srv/design-system
        TOKEN_CHAIN_THEME_NAME=brand-x
        TOKEN_CHAIN_SCOPE=attr
        TOKEN_CHAIN_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="TOKEN_CHAIN_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "token-chain"

    # Project layout
    project_root: Path = Field(default=Path("."), description="Design system root")
    stylesheet_candidates: list[Path] = Field(
        default_factory=lambda: list(DEFAULT_STYLESHEET_CANDIDATES),
        description="Compiled stylesheets tried in order; first existing file wins",
    )
    export_file: Path = Field(
        default=Path("figma-export.json"),
        description="Default external token export consumed by sync/apply",
    )
    registry_path: Path = Field(
        default=Path("preview/data/user-theme.registry.json"),
        description="Persisted user theme registry",
    )
    scss_path: Path = Field(
        default=Path("scss/themes/_user-theme.scss"),
        description="SCSS source fragment for the upstream compiler",
    )
    output_dir: Path = Field(
        default=Path("dist"), description="Directory receiving user-theme.css"
    )

    # User theme
    theme_name: str = Field(default="user", min_length=1)
    scope: ThemeScope = ThemeScope.ROOT

    # Logging
    log_level: LogLevel = LogLevel.WARNING
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format: 'json' for CI pipelines, 'console' for terminals",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    @field_validator("theme_name", mode="after")
    @classmethod
    def validate_theme_name(cls, v: str) -> str:
        """Theme names end up inside an attribute selector; keep them quote-free."""
        if '"' in v or "\\" in v:
            raise ValueError(f"Theme name may not contain quotes or backslashes: {v!r}")
        return v

    def resolve(self, path: Path) -> Path:
        """Anchor a relative path at the project root."""
        if path.is_absolute():
            return path
        return self.project_root / path

    @property
    def resolved_stylesheet_candidates(self) -> list[Path]:
        return [self.resolve(candidate) for candidate in self.stylesheet_candidates]


def load_settings(**overrides: object) -> Settings:
    """Build a fresh Settings instance.

    Each run gets its own instance; overrides (typically from CLI flags)
    take precedence over environment variables. ``None`` values are ignored
    so unset flags fall through to the environment.

    An explicit ``project_root`` also decides which ``.env`` file is read:
    the one inside that root rather than the one in the working directory.

    Returns:
        Configured Settings instance.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    if "project_root" in values:
        return Settings(_env_file=Path(str(values["project_root"])) / ".env", **values)
    return Settings(**values)
