"""Client configuration profile and sub-configurations.

This module defines the configuration structure for the rate gate and the
document submitter using Pydantic V2 for validation, with YAML
serialization and dotted-key overrides.
"""

from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_ENDPOINT_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


class GateConfig(BaseModel):
    """Configuration for the rate gate.

    Attributes:
        limit: Maximum tasks admitted per window.
        window: Refresh period in seconds.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    limit: int = Field(
        default=40,
        ge=1,
        description="Maximum tasks admitted per window",
    )
    window: float = Field(
        default=1.0,
        gt=0.0,
        description="Refresh period in seconds",
    )

    @field_validator("window", mode="before")
    @classmethod
    def accept_integer_window(cls, v: Any) -> Any:
        """Allow integral seconds (e.g. `window: 1` in YAML) under strict mode."""
        if isinstance(v, int) and not isinstance(v, bool):
            return float(v)
        return v


class SubmitterConfig(BaseModel):
    """Configuration for the document submitter.

    Attributes:
        endpoint_url: Document-creation endpoint.
        timeout: Per-request HTTP timeout in seconds (None waits forever).
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    endpoint_url: str = Field(
        default=DEFAULT_ENDPOINT_URL,
        description="Document-creation endpoint URL",
    )
    timeout: float | None = Field(
        default=None,
        gt=0.0,
        description="Per-request HTTP timeout in seconds",
    )

    @field_validator("endpoint_url")
    @classmethod
    def endpoint_must_be_http(cls, v: str) -> str:
        """Validate that the endpoint is an absolute http(s) URL.

        Args:
            v: Endpoint URL.

        Returns:
            The validated URL.

        Raises:
            ValueError: If the scheme is not http/https or the host is missing.
        """
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("endpoint_url must be an absolute http(s) URL")
        if parsed.query:
            raise ValueError("endpoint_url must not carry a query string")
        return v

    @field_validator("timeout", mode="before")
    @classmethod
    def accept_integer_timeout(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return float(v)
        return v


class ClientProfile(BaseModel):
    """Complete client configuration profile.

    Attributes:
        gate: Rate gate configuration.
        submitter: Document submitter configuration.
    """

    model_config = ConfigDict(strict=True, extra="forbid")

    gate: GateConfig = Field(
        default_factory=GateConfig,
        description="Rate gate configuration",
    )
    submitter: SubmitterConfig = Field(
        default_factory=SubmitterConfig,
        description="Document submitter configuration",
    )

    @classmethod
    def from_yaml(cls, path: Path) -> "ClientProfile":
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file.

        Returns:
            Validated ClientProfile instance.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigError: If YAML is invalid or validation fails.
        """
        from docgate.exceptions import ConfigError

        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {e}") from e

        try:
            return cls.model_validate(data or {})
        except Exception as e:
            raise ConfigError(f"Configuration validation failed: {e}") from e

    def to_yaml(self, path: Path) -> None:
        """Export configuration to a YAML file.

        Args:
            path: Output file path.
        """
        data = self.model_dump(mode="python")

        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                data,
                f,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )

    def with_overrides(self, overrides: dict[str, Any]) -> "ClientProfile":
        """Create a new profile with `section.field` overrides applied.

        Overrides are grouped by section and each touched section is
        validated on its own, so an error names the exact field at fault.
        Sections without overrides are shared with this profile.

        Args:
            overrides: Mapping of dotted keys to new values.
                Example: {"gate.limit": 10, "submitter.timeout": 5.0}

        Returns:
            New ClientProfile instance with overrides applied.

        Raises:
            ConfigOverrideError: If a key does not name a section field, or
                an overridden section fails validation.
        """
        from docgate.exceptions import ConfigOverrideError

        updates: dict[str, dict[str, Any]] = {}
        for key, value in overrides.items():
            section, _, field = key.partition(".")
            section_field = type(self).model_fields.get(section)
            if (
                section_field is None
                or "." in field
                or field not in type(getattr(self, section)).model_fields
            ):
                raise ConfigOverrideError(f"Invalid override key: {key}", field_path=key)
            updates.setdefault(section, {})[field] = value

        sections: dict[str, BaseModel] = {}
        for section, fields in updates.items():
            current = getattr(self, section)
            try:
                sections[section] = type(current).model_validate(
                    {**current.model_dump(mode="python"), **fields}
                )
            except ValidationError as e:
                location = ".".join(str(part) for part in e.errors()[0]["loc"])
                field_path = f"{section}.{location}" if location else section
                raise ConfigOverrideError(
                    f"Override validation failed for {field_path}",
                    field_path=field_path,
                    cause=e,
                ) from e

        return self.model_copy(update=sections)
