"""Generator settings.

Defaults can be overridden through the environment:
  ROUTEGEN_ROOT_NAMESPACE  exported root namespace (default: client)
  ROUTEGEN_FILENAME        virtual filename handed to the formatter (default: client.ts)
  ROUTEGEN_INDENT_WIDTH    spaces per indent level (default: 4)
  ROUTEGEN_LINE_WIDTH      preferred maximum line width (default: 90)
  ROUTEGEN_WRAPPER         input is a wrapper object with one list field (default: true)
"""

from __future__ import annotations

from pydantic import PositiveInt, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigError
from .formatter import FormatStyle


class GeneratorConfig(BaseSettings):
    """Settings for one generator run, read from ROUTEGEN_* variables."""

    model_config = SettingsConfigDict(
        env_prefix="ROUTEGEN_",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    root_namespace: str = "client"
    filename: str = "client.ts"
    indent_width: PositiveInt = 4
    line_width: PositiveInt = 90
    wrapper: bool = True

    @property
    def style(self) -> FormatStyle:
        return FormatStyle(self.indent_width, self.line_width)

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorConfig":
        """Load settings from the environment; explicit overrides win."""
        try:
            return cls(**overrides)
        except ValidationError as exc:
            fields = ", ".join(
                "ROUTEGEN_" + str(err["loc"][0]).upper() for err in exc.errors() if err["loc"]
            )
            raise ConfigError(f"Invalid settings: {fields}", {"errors": exc.error_count()}) from exc
