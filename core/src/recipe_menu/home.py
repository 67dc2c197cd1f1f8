"""Per-user home directory: ``config/app.json`` and ``logs/app.log`` live here.

Relative paths in the config (data file, static dir) are anchored at the home
too, so a home directory can be copied around as a unit.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

HOME_ENV = "RECIPE_MENU_HOME"


@dataclass(frozen=True)
class RecipeMenuHome:
    root: Path

    @property
    def config_dir(self) -> Path:
        return self.root / "config"

    @property
    def logs_dir(self) -> Path:
        return self.root / "logs"

    @property
    def config_path(self) -> Path:
        return self.config_dir / "app.json"

    @property
    def log_path(self) -> Path:
        return self.logs_dir / "app.log"

    def ensure(self) -> RecipeMenuHome:
        for path in (self.config_dir, self.logs_dir):
            path.mkdir(parents=True, exist_ok=True)
        return self

    def resolve(self, raw: str | None, default: Path) -> Path:
        """Resolve a configured path; blank means ``default``, relative means under the home."""

        if raw is None or not str(raw).strip():
            return default
        return (self.root / Path(raw).expanduser()).resolve()

    def log_handler(self, *, max_size_mb: int, backup_count: int) -> RotatingFileHandler:
        # delay: the file is only opened once a record is emitted.
        return RotatingFileHandler(
            self.log_path,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
            delay=True,
        )


def resolve_home(environ: dict[str, str] | None = None) -> RecipeMenuHome:
    env = os.environ if environ is None else environ

    raw = (env.get(HOME_ENV) or "").strip()
    if raw:
        # Relative values hang off the user's home, never the CWD.
        return RecipeMenuHome((Path.home() / Path(raw).expanduser()).resolve())

    if sys.platform.startswith("win"):
        base = Path(env.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
        return RecipeMenuHome((base / "RecipeMenu").resolve())
    base = Path(env.get("XDG_DATA_HOME") or Path.home() / ".local" / "share")
    return RecipeMenuHome((base / "recipe-menu").resolve())


def prepare_home(environ: dict[str, str] | None = None) -> RecipeMenuHome:
    return resolve_home(environ).ensure()
