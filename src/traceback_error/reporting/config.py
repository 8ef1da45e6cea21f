from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from traceback_error.core.context import COMPUTER_VAR, PROJECT_VAR, USER_VAR

CONFIG_FILENAMES = ("traceback_error.yaml", ".traceback_error.yaml")


class ConfigError(ValueError):
    """Raised when a configuration file is missing required structure or is malformed."""


def load_config(root: Path) -> dict[str, Any]:
    """
    Load the reporting config from `root` if present.

    Search order:
    1) ``traceback_error.yaml``
    2) ``.traceback_error.yaml``
    """

    for filename in CONFIG_FILENAMES:
        config_path = root / filename
        if not config_path.exists():
            continue
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as error:
            raise ConfigError(f"Could not parse {config_path}: {error}") from error
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{config_path} must contain a mapping at top level.")
        return data
    return {}


def _parse_level(raw: str, fallback: int) -> int:
    raw = raw.strip()
    if not raw:
        return fallback
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else fallback


@dataclass(frozen=True)
class ReportingConfig:
    """
    Configuration for error reporting + logging behavior.

    Parameters
    ----------
    errors_dir
        Directory where the fallback handler writes one JSON file per error.
    project_var, computer_var, user_var
        Names of the environment variables read when a record is dispatched.
    console_level
        Logging level for console output.
    file_level
        Logging level for file output.
    log_dir
        If set, log lines are also written to <log_dir>/traceback_error.log.
    env_prefix
        Prefix of the environment-variable overrides read by `from_env`.

    Usage example
    -------------
        cfg = ReportingConfig(errors_dir=Path("var/errors"))
    """

    errors_dir: Path = Path("errors")

    project_var: str = PROJECT_VAR
    computer_var: str = COMPUTER_VAR
    user_var: str = USER_VAR

    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_dir: Optional[Path] = None

    env_prefix: str = field(default="TRACEBACK_", repr=False)

    @classmethod
    def from_env(cls, *, default: Optional["ReportingConfig"] = None) -> "ReportingConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>ERRORS_DIR: path
        - <PFX>PROJECT_VAR / <PFX>COMPUTER_VAR / <PFX>USER_VAR: variable names
        - <PFX>LOG_DIR: path
        - <PFX>LOG_LEVEL: level name or number for the console

        Usage example
        -------------
            cfg = ReportingConfig.from_env(default=ReportingConfig(env_prefix="MYAPP_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        errors_dir = Path(os.getenv(f"{pfx}ERRORS_DIR", str(base.errors_dir)))

        project_var = os.getenv(f"{pfx}PROJECT_VAR", "").strip() or base.project_var
        computer_var = os.getenv(f"{pfx}COMPUTER_VAR", "").strip() or base.computer_var
        user_var = os.getenv(f"{pfx}USER_VAR", "").strip() or base.user_var

        log_dir_raw = os.getenv(f"{pfx}LOG_DIR", "").strip()
        log_dir = Path(log_dir_raw) if log_dir_raw else base.log_dir

        console_level = _parse_level(os.getenv(f"{pfx}LOG_LEVEL", ""), base.console_level)

        return replace(
            base,
            errors_dir=errors_dir,
            project_var=project_var,
            computer_var=computer_var,
            user_var=user_var,
            log_dir=log_dir,
            console_level=console_level,
        )

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], *, default: Optional["ReportingConfig"] = None
    ) -> "ReportingConfig":
        """
        Create config from the ``reporting`` section of a loaded config file.

        Unknown keys are ignored; a non-mapping section raises ConfigError.
        """
        base = default if default is not None else cls()
        section = data.get("reporting")
        if section is None:
            return base
        if not isinstance(section, Mapping):
            raise ConfigError("The 'reporting' section must be a mapping.")

        updates: dict[str, Any] = {}
        for key in ("errors_dir", "log_dir"):
            value = section.get(key)
            if isinstance(value, str) and value.strip():
                updates[key] = Path(value.strip())
        for key in ("project_var", "computer_var", "user_var"):
            value = section.get(key)
            if isinstance(value, str) and value.strip():
                updates[key] = value.strip()
        level = section.get("log_level")
        if level is not None:
            updates["console_level"] = _parse_level(str(level), base.console_level)
        return replace(base, **updates)


def resolve_errors_dir(config: Mapping[str, Any], cli_errors_dir: Optional[Path]) -> Path:
    """
    Resolve the errors directory from CLI arg, config file or environment.

    CLI value has highest priority. Fallbacks:
    - ``reporting.errors_dir``
    - ``<PFX>ERRORS_DIR`` / ``errors``
    """

    if cli_errors_dir is not None:
        return cli_errors_dir
    return ReportingConfig.from_mapping(config, default=ReportingConfig.from_env()).errors_dir
