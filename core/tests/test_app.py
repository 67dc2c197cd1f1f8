from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from recipe_menu.app import create_app
from recipe_menu.config import AppConfig
from recipe_menu.ui.render import STATIC_DIR


def test_get_root_returns_rendered_page(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.get("/")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        assert '<div id="app">' in r.text
        assert "Baked Salmon" in r.text
        assert "Fish Tacos" in r.text
        assert "window.__DATA__ = " in r.text
        assert '<script src="bundle.js"></script>' in r.text


def test_page_is_rendered_once_at_startup(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        first = client.get("/").text
        second = client.get("/recipes/fish-tacos").text
        assert first == second == client.app.state.page_html
        assert client.app.state.recipes.names == ["Baked Salmon", "Fish Tacos"]


def test_static_bundle_is_served_verbatim(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.get("/bundle.js")
        assert r.status_code == 200
        assert r.content == (STATIC_DIR / "bundle.js").read_bytes()
        assert "javascript" in r.headers["content-type"]


def test_missing_asset_falls_back_to_page(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.get("/styles/missing.css")
        assert r.status_code == 200
        assert r.text == client.app.state.page_html


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "PATCH"])
def test_other_methods_get_the_page(tmp_path: Path, monkeypatch, method: str) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.request(method, "/bundle.js", content=b"ignored")
        assert r.status_code == 200
        assert r.text == client.app.state.page_html


def test_data_file_and_static_dir_from_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    (tmp_path / "menu.json").write_text(
        json.dumps([{"name": "Pancakes", "ingredients": [], "steps": ["Flip."]}]),
        encoding="utf-8",
    )
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "app.css").write_text("body { margin: 0 }\n", encoding="utf-8")
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "app.json").write_text(
        json.dumps({"paths": {"data_file": "menu.json", "static_dir": "dist"}}),
        encoding="utf-8",
    )

    with TestClient(create_app()) as client:
        page = client.get("/")
        assert "Pancakes" in page.text
        assert "Baked Salmon" not in page.text

        css = client.get("/app.css")
        assert css.text == "body { margin: 0 }\n"

        # The packaged bundle is not served from a custom static dir.
        assert client.get("/bundle.js").text == page.text


def test_index_html_in_static_dir_is_served_for_root(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "index.html").write_text("<p>static</p>", encoding="utf-8")

    cfg = AppConfig.model_validate({"paths": {"static_dir": str(dist)}})
    with TestClient(create_app(cfg)) as client:
        assert client.get("/").text == "<p>static</p>"


def test_requests_are_logged(tmp_path: Path, monkeypatch, caplog) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    caplog.set_level(logging.INFO, logger="recipe_menu.app")

    with TestClient(create_app()) as client:
        client.get("/bundle.js?v=2")
        client.post("/")

    messages = [r.getMessage() for r in caplog.records if r.name == "recipe_menu.app"]
    assert "GET request for '/bundle.js?v=2'" in messages
    assert "POST request for '/'" in messages


def test_missing_data_file_fails_startup(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    cfg = AppConfig.model_validate({"paths": {"data_file": "absent.json"}})

    with pytest.raises(FileNotFoundError):
        with TestClient(create_app(cfg)):
            pass


def test_conditional_get_returns_not_modified(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        first = client.get("/bundle.js")
        etag = first.headers["etag"]

        again = client.get("/bundle.js", headers={"If-None-Match": etag})
        assert again.status_code == 304
        assert again.content == b""


def test_head_serves_static_headers(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.head("/bundle.js")
        assert r.status_code == 200
        assert int(r.headers["content-length"]) == (STATIC_DIR / "bundle.js").stat().st_size


@pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "OPTIONS"])
def test_unusual_methods_get_the_page(tmp_path: Path, monkeypatch, method: str) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))

    with TestClient(create_app()) as client:
        r = client.request(method, "/")
        assert r.status_code == 200
        assert r.text == client.app.state.page_html


@pytest.mark.parametrize("path", ["/bundle%00.js", "/%2e%2e/secret.txt", "/recipes/"])
def test_unservable_paths_fall_back_to_page(tmp_path: Path, monkeypatch, path: str) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    (tmp_path / "secret.txt").write_text("secret", encoding="utf-8")

    with TestClient(create_app()) as client:
        r = client.get(path)
        assert r.status_code == 200
        assert r.text == client.app.state.page_html


def test_static_404_page_is_not_served(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "404.html").write_text("<p>gone</p>", encoding="utf-8")

    cfg = AppConfig.model_validate({"paths": {"static_dir": str(dist)}})
    with TestClient(create_app(cfg)) as client:
        r = client.get("/nope.png")
        assert r.status_code == 200
        assert r.text == client.app.state.page_html


def test_log_file_handler_is_closed_on_shutdown(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("RECIPE_MENU_HOME", str(tmp_path))
    log_path = (tmp_path / "logs" / "app.log").resolve()
    root = logging.getLogger()

    with TestClient(create_app()) as client:
        client.get("/")
        ours = [
            h
            for h in root.handlers
            if isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_path
        ]
        assert len(ours) == 1

    assert ours[0] not in root.handlers
    assert ours[0].stream is None
    assert "Loaded 2 recipes" in log_path.read_text(encoding="utf-8")
