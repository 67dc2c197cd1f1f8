from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles

from recipe_menu.config import (
    AppConfig,
    load_app_config,
    resolve_data_path,
    resolve_static_dir,
)
from recipe_menu.home import prepare_home
from recipe_menu.recipes import load_recipes
from recipe_menu.ui.render import render_menu, render_page

logger = logging.getLogger(__name__)

STATIC_METHODS = frozenset({"GET", "HEAD"})


async def static_response(static: StaticFiles | None, request: Request) -> Response | None:
    """Serve the request from the static directory, or None when nothing matches.

    ``/`` maps to ``index.html``. Misses, paths outside the directory, unreadable
    files and paths the filesystem rejects (e.g. NUL bytes) all count as no match.
    """

    if static is None or request.method not in STATIC_METHODS:
        return None
    try:
        response = await static.get_response(static.get_path(request.scope), request.scope)
    except (StarletteHTTPException, ValueError):
        return None
    # html mode may answer a miss with the directory's own 404.html.
    if response.status_code == 404:
        return None
    return response


def create_app(config: AppConfig | None = None) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        home = prepare_home()
        cfg = config if config is not None else load_app_config(home)

        root = logging.getLogger()
        root.setLevel(logging.INFO)
        file_handler: RotatingFileHandler | None = None
        # The CLI may already have attached one.
        if not any(isinstance(h, RotatingFileHandler) for h in root.handlers):
            file_handler = home.log_handler(
                max_size_mb=cfg.logging.max_size_mb, backup_count=cfg.logging.backup_count
            )
            file_handler.setFormatter(
                logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            )
            root.addHandler(file_handler)

        try:
            data_path = resolve_data_path(home, cfg)
            recipes = load_recipes(data_path)
            logger.info("Loaded %d recipes from %s", len(recipes), data_path)

            # Rendered once; the collection never changes while the process runs.
            fragment = render_menu(recipes)
            page = render_page(fragment, recipes, title=cfg.page.title, bundle=cfg.page.bundle)

            static_dir = resolve_static_dir(home, cfg)
            static: StaticFiles | None = None
            if static_dir.is_dir():
                static = StaticFiles(directory=str(static_dir), html=True)
            else:
                logger.warning(
                    "Static directory is missing (%s); every request will get the page",
                    static_dir,
                )

            app.state.recipe_menu_home = home
            app.state.recipe_menu_config = cfg
            app.state.recipes = recipes
            app.state.fragment = fragment
            app.state.page_html = page
            app.state.static_files = static

            yield
        finally:
            if file_handler is not None:
                root.removeHandler(file_handler)
                file_handler.close()

    app = FastAPI(
        title="Recipe Menu",
        version="0.1.0",
        lifespan=_lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # No routes: the middleware chain answers every method and path.
    @app.middleware("http")
    async def static_or_page(request: Request, call_next) -> Response:
        response = await static_response(getattr(request.app.state, "static_files", None), request)
        if response is not None:
            return response
        return HTMLResponse(request.app.state.page_html, status_code=200)

    # Registered last so it wraps the handler above.
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        logger.info("%s request for '%s'", request.method, target)
        return await call_next(request)

    return app
