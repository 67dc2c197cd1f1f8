from __future__ import annotations

import argparse
import logging
import os

from recipe_menu.config import AppConfig, load_app_config
from recipe_menu.home import RecipeMenuHome, prepare_home
from recipe_menu.server import serve


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-menu",
        description="Serve the server-rendered recipe menu with client hydration.",
    )
    parser.add_argument("--host", help="Bind address (default from config: 127.0.0.1)")
    parser.add_argument("--port", type=int, help="TCP port (default from config: 3000)")
    parser.add_argument("--data", help="Path to the recipe collection JSON file")
    parser.add_argument("--static-dir", help="Directory holding bundle.js and other assets")
    return parser


def _log_handlers(home: RecipeMenuHome, config: AppConfig) -> list[logging.Handler]:
    return [
        home.log_handler(
            max_size_mb=config.logging.max_size_mb,
            backup_count=config.logging.backup_count,
        ),
        logging.StreamHandler(),
    ]


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    home = prepare_home()
    config = load_app_config(home)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=_log_handlers(home, config),
    )

    network = config.network
    host = args.host or os.environ.get("RECIPE_MENU_BIND") or network.bind_host
    env_port = os.environ.get("RECIPE_MENU_PORT")
    if args.port is not None:
        port = args.port
    elif env_port:
        port = int(env_port)
    else:
        port = network.port
    network = network.model_copy(update={"bind_host": host, "port": port})

    path_overrides = {}
    if args.data:
        path_overrides["data_file"] = os.path.abspath(args.data)
    if args.static_dir:
        path_overrides["static_dir"] = os.path.abspath(args.static_dir)
    config_paths = config.paths.model_copy(update=path_overrides)

    config = config.model_copy(update={"network": network, "paths": config_paths})
    serve(config)


if __name__ == "__main__":
    main()
