from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from recipe_menu.home import RecipeMenuHome

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_PATH = PACKAGE_DIR / "data" / "recipes.json"
DEFAULT_STATIC_DIR = PACKAGE_DIR / "ui" / "static"


class NetworkConfig(BaseModel):
    bind_host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=0, le=65535, description="0 picks a free port.")


class PathsConfig(BaseModel):
    data_file: str | None = Field(
        default=None,
        description="Recipe collection JSON; if relative, resolved under RECIPE_MENU_HOME",
    )
    static_dir: str | None = Field(
        default=None,
        description="Directory of client assets (bundle.js); defaults to the packaged one",
    )


class LoggingConfig(BaseModel):
    max_size_mb: int = Field(
        default=10, ge=1, description="Max size of a log file in MB before rolling."
    )
    backup_count: int = Field(default=5, ge=1, description="Number of log archives to keep.")


class PageConfig(BaseModel):
    title: str = Field(default="React Recipes App")
    bundle: str = Field(
        default="bundle.js", description="Client bundle path referenced by the page"
    )


class AppConfig(BaseModel):
    version: str = Field(default="1")
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    page: PageConfig = Field(default_factory=PageConfig)


def _read_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_app_config(home: RecipeMenuHome) -> AppConfig:
    """Load config from ${RECIPE_MENU_HOME}/config/app.json.

    - If missing: returns defaults.
    - Validation is performed by Pydantic.
    """

    if not home.config_path.exists():
        return AppConfig()

    raw = _read_json(home.config_path)
    return AppConfig.model_validate(raw)


def write_app_config(home: RecipeMenuHome, config: AppConfig) -> None:
    """Persist config to ${RECIPE_MENU_HOME}/config/app.json."""

    payload = config.model_dump(mode="json", exclude_none=True)
    home.config_dir.mkdir(parents=True, exist_ok=True)
    home.config_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def resolve_data_path(home: RecipeMenuHome, config: AppConfig) -> Path:
    return home.resolve(config.paths.data_file, DEFAULT_DATA_PATH)


def resolve_static_dir(home: RecipeMenuHome, config: AppConfig) -> Path:
    return home.resolve(config.paths.static_dir, DEFAULT_STATIC_DIR)
