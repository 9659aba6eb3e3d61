"""Configuration loader for drill sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from quiz_drill.core import config as core_config
from quiz_drill.core import workspace as workspace_mod

CONFIG_FILENAME = "drill.toml"
CONFIG_ENV = "QUIZ_DRILL_CONFIG"
ENV_PREFIX = "QUIZ_DRILL_"

_DEFAULT_LOG_LEVEL = "INFO"


class DrillConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


class InterfaceMode(Enum):
    """Front end used to run a drill."""

    TUI = "tui"
    CONSOLE = "console"

    @classmethod
    def from_value(cls, value: str) -> "InterfaceMode":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        expected = ", ".join(member.value for member in cls)
        raise DrillConfigError(
            f"Unknown interface mode '{value}'. Expected one of: {expected}."
        )


@dataclass(frozen=True)
class DrillConfig:
    """Fully resolved settings for one drill run."""

    hide_answers: bool
    shuffle: bool
    seed: Optional[int]
    interface: InterfaceMode
    log_level: str
    verbose: bool


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of environment and file options."""

    hide_answers: Optional[bool] = None
    shuffle: Optional[bool] = None
    seed: Optional[int] = None
    interface: Optional[InterfaceMode] = None
    log_level: Optional[str] = None
    verbose: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    config: DrillConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested_path)
            )
        except core_config.TomlConfigError as exc:
            raise DrillConfigError(str(exc)) from exc
    elif config_path is not None or _env_string(env_map, "CONFIG"):
        raise DrillConfigError(f"Config file not found: {requested_path}")

    session = table["session"]
    try:
        hide_answers = _pick_bool(
            overrides.hide_answers,
            _env_bool(env_map, "HIDE_ANSWERS"),
            session["hide_answers"],
            field="session.hide_answers",
        )
        shuffle = _pick_bool(
            overrides.shuffle,
            _env_bool(env_map, "SHUFFLE"),
            session["shuffle"],
            field="session.shuffle",
        )
        verbose = _pick_bool(
            overrides.verbose,
            None,
            table["logging"]["verbose"],
            field="logging.verbose",
        )
    except core_config.TomlConfigError as exc:
        raise DrillConfigError(str(exc)) from exc

    config = DrillConfig(
        hide_answers=hide_answers,
        shuffle=shuffle,
        seed=_resolve_seed(
            overrides.seed, _env_string(env_map, "SEED"), session["seed"]
        ),
        interface=_resolve_interface(
            overrides.interface,
            _env_string(env_map, "INTERFACE"),
            table["interface"]["mode"],
        ),
        log_level=_resolve_log_level(
            overrides.log_level,
            _env_string(env_map, "LOG_LEVEL"),
            table["logging"]["level"],
        ),
        verbose=verbose,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "session": {"hide_answers": True, "shuffle": True, "seed": None},
        "interface": {"mode": InterfaceMode.TUI.value},
        "logging": {"level": _DEFAULT_LOG_LEVEL, "verbose": False},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _pick_bool(
    override: Optional[bool],
    env_value: Optional[bool],
    file_value: object,
    *,
    field: str,
) -> bool:
    if override is not None:
        return override
    if env_value is not None:
        return env_value
    if isinstance(file_value, bool):
        return file_value
    raise core_config.TomlConfigError(f"{field} must be true or false.")


def _resolve_seed(
    override: Optional[int], env_value: Optional[str], file_value: object
) -> Optional[int]:
    if override is not None:
        return override
    if env_value is not None:
        try:
            return int(env_value)
        except ValueError as exc:
            raise DrillConfigError(
                f"{ENV_PREFIX}SEED must be an integer, got '{env_value}'."
            ) from exc
    if file_value is None:
        return None
    if isinstance(file_value, bool) or not isinstance(file_value, int):
        raise DrillConfigError("session.seed must be an integer.")
    return file_value


def _resolve_interface(
    override: Optional[InterfaceMode],
    env_value: Optional[str],
    file_value: object,
) -> InterfaceMode:
    if override is not None:
        return override
    if env_value is not None:
        return InterfaceMode.from_value(env_value)
    if isinstance(file_value, str):
        return InterfaceMode.from_value(file_value)
    raise DrillConfigError("interface.mode must be 'tui' or 'console'.")


def _resolve_log_level(
    override: Optional[str], env_value: Optional[str], file_value: object
) -> str:
    for candidate in (override, env_value, file_value):
        if candidate is None:
            continue
        if not isinstance(candidate, str) or not candidate.strip():
            raise DrillConfigError(
                "logging.level must be a non-empty string."
            )
        return candidate.strip().upper()
    return _DEFAULT_LOG_LEVEL


def _env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    return core_config.parse_bool(raw, field=f"{ENV_PREFIX}{key}")


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None
