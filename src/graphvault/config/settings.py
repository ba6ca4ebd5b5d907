"""Settings shared by connections and the CLI.

Priority chain (highest to lowest):
  1. Init kwargs  — explicit arguments and CLI flags
  2. Env vars     — ``GRAPHVAULT_*`` prefix
  3. TOML file    — only when ``config_path`` names one
  4. Code defaults

Connection arguments (``path``, ``realtime``) always win over settings;
settings only supply the defaults a caller left unspecified.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

TOML_TABLE = "graphvault"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings read from a graphvault TOML file.

    Keys may sit at the top level or in a ``[graphvault]`` table, which
    wins over top-level keys. Keys that name no settings field are
    ignored, so the file can be shared with other tools.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._values = self._read(toml_path) if toml_path is not None else {}

    def _read(self, toml_path: Path) -> dict[str, Any]:
        try:
            with toml_path.open("rb") as fh:
                document = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc

        table = document.get(TOML_TABLE)
        merged = {**document, **table} if isinstance(table, dict) else document
        fields = self.settings_cls.model_fields
        return {k: v for k, v in merged.items() if k in fields and k != "config_path"}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._values.get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(self._values)


def _init_config_path(init_settings: PydanticBaseSettingsSource) -> Path | None:
    value = getattr(init_settings, "init_kwargs", {}).get("config_path")
    if not value:
        return None
    path = Path(value)
    return path if path.is_file() else None


class GraphVaultSettings(BaseSettings):
    """Settings shared by connections and the CLI.

    Attributes:
        realtime: Save after every create when a connection does not
            specify ``realtime`` itself.
        create_on_save: Let ``save()`` create a missing snapshot file.
            When False, saving to a never-written path is a no-op.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "GRAPHVAULT_",
        "env_nested_delimiter": "__",
    }

    # --- Persistence policy ---
    realtime: bool = False
    create_on_save: bool = True

    # --- CLI flags ---
    config_path: Path | None = None
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Read the TOML file named by the ``config_path`` init kwarg, below env vars."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _init_config_path(init_settings)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        **cli_flags: Any,
    ) -> GraphVaultSettings:
        """Construct settings from a CLI invocation.

        Reads *config_path* as TOML when it names an existing file and
        merges *cli_flags* as highest-priority overrides. A missing file
        is ignored and leaves ``config_path`` unset.
        """
        toml_path = Path(config_path) if config_path else None
        if toml_path is not None and not toml_path.is_file():
            toml_path = None
        return cls(config_path=toml_path, **cli_flags)
