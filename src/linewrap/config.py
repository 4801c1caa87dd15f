from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "linewrap.toml"
TIMEOUT_ENV = "LINEWRAP_TIMEOUT_MS"

DEFAULT_INDENT_WIDTH = 4
DEFAULT_MAX_LINE_LENGTH = 88
DEFAULT_TIMEOUT_MS = 2000

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def wrapping_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("wrapping", {})
    return section if isinstance(section, dict) else {}


def server_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("server", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return default


def _as_positive_int(value: TomlValue, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, str):
        try:
            parsed = int(value.strip())
        except ValueError:
            return default
        return parsed if parsed > 0 else default
    return default


@dataclass(frozen=True)
class WrappingConfig:
    """Layout settings for the call argument rewrites.

    ``trailing_comma`` applies to the one-argument-per-line layout only. The
    filled layout never ends with a comma, since formatters read a trailing
    comma as a request to put every argument on its own line.
    """

    indent_width: int = DEFAULT_INDENT_WIDTH
    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    trailing_comma: bool = True

    @classmethod
    def from_section(cls, section: TomlTable | None) -> "WrappingConfig":
        if not isinstance(section, dict):
            return cls()
        return cls(
            indent_width=_as_positive_int(section.get("indent_width"), DEFAULT_INDENT_WIDTH),
            max_line_length=_as_positive_int(
                section.get("max_line_length"), DEFAULT_MAX_LINE_LENGTH
            ),
            trailing_comma=_as_bool(section.get("trailing_comma"), True),
        )

    @property
    def indent_unit(self) -> str:
        return " " * self.indent_width


def server_timeout_ms(section: TomlTable | None) -> int:
    raw_env = os.environ.get(TIMEOUT_ENV, "").strip()
    if raw_env:
        return _as_positive_int(raw_env, DEFAULT_TIMEOUT_MS)
    if not isinstance(section, dict):
        return DEFAULT_TIMEOUT_MS
    return _as_positive_int(section.get("timeout_ms"), DEFAULT_TIMEOUT_MS)
