"""Process configuration.

Sources are layered, later ones winning: ``config.toml``, then an env file,
then the process environment. Only ``APP_<SECTION>_<KEY>`` variables are
read from the env layers.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote

APPLICATION_NAME = "sea_battle_bot"
ENV_PREFIX = "APP_"


class ConfigError(ValueError):
    """Configuration is missing or malformed."""


def read_env_file(path: str | Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines; a missing file reads as empty."""
    env_path = _resolve_path(path)
    if not env_path.exists():
        return {}
    values: dict[str, str] = {}
    for number, raw_line in enumerate(env_path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"{env_path}:{number}: expected KEY=VALUE.")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def load_env_file(path: str | Path = ".env", *, override_existing: bool = False) -> dict[str, str]:
    """Export an env file into ``os.environ`` and return what it contained."""
    values = read_env_file(path)
    for key, value in values.items():
        if override_existing or key not in os.environ:
            os.environ[key] = value
    return values


@dataclass(frozen=True, slots=True)
class DbConfig:
    """Connection settings for the game store."""

    host: str
    port: int
    database: str
    user: str
    password: str
    max_connections: int

    def dsn(self) -> str:
        """Return a PostgreSQL connection URL."""
        credentials = f"{quote(self.user, safe='')}:{quote(self.password, safe='')}"
        return (
            f"postgresql://{credentials}@{self.host}:{self.port}/{quote(self.database, safe='')}"
            f"?application_name={APPLICATION_NAME}"
        )


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    db: DbConfig

    @classmethod
    def load(
        cls,
        path: str | Path = "config.toml",
        *,
        env_file: str | Path | None = ".env",
        environ: Mapping[str, str] | None = None,
    ) -> AppConfig:
        """Merge TOML, env file and environment, then validate."""
        db = dict(_table(_read_toml(_resolve_path(path)), "db"))
        if env_file is not None:
            db.update(_prefixed(read_env_file(env_file), "db"))
        db.update(_prefixed(os.environ if environ is None else environ, "db"))
        return cls(db=_parse_db(db))


def _read_toml(path: Path) -> dict[str, object]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Malformed config file {path}: {exc}") from exc


def _table(data: Mapping[str, object], name: str) -> Mapping[str, object]:
    table = data.get(name, {})
    if not isinstance(table, Mapping):
        raise ConfigError(f"Config section [{name}] must be a table.")
    return table


def _prefixed(source: Mapping[str, str], section: str) -> dict[str, str]:
    prefix = f"{ENV_PREFIX}{section.upper()}_"
    return {
        key.removeprefix(prefix).lower(): value
        for key, value in source.items()
        if key.startswith(prefix) and key != prefix
    }


def _parse_db(table: Mapping[str, object]) -> DbConfig:
    def text(key: str) -> str:
        if key not in table:
            raise ConfigError(f"Missing config value db.{key}.")
        return str(table[key])

    def number(key: str) -> int:
        raw = text(key)
        if isinstance(table[key], bool) or not raw.strip().isdigit():
            raise ConfigError(f"Config value db.{key} must be a non-negative integer.")
        return int(raw)

    return DbConfig(
        host=text("host"),
        port=number("port"),
        database=text("database"),
        user=text("user"),
        password=text("password"),
        max_connections=number("max_connections"),
    )


def _resolve_path(path: str | Path) -> Path:
    """Resolve a path from cwd, falling back to the project root."""
    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    return Path(__file__).resolve().parents[3] / candidate
