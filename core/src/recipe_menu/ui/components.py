"""Menu components as plain functions returning element trees.

``static/bundle.js`` carries the browser-side copy of these components; the two
must produce the same tree for the same records or hydration will report a
mismatch.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

Node = Union["Element", str]


@dataclass(frozen=True)
class Element:
    tag: str
    props: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    children: tuple[Node, ...] = field(default_factory=tuple)

    def prop(self, name: str) -> str | None:
        for key, value in self.props:
            if key == name:
                return value
        return None


def text(value: Any) -> str:
    """Stringify a field the same way bundle.js does.

    Missing/None is empty, booleans are lowercase, integral floats print as ints.
    """

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _flatten(children: Iterable[Any]) -> list[Node]:
    out: list[Node] = []
    for child in children:
        if child is None or child is False or child is True:
            continue
        if isinstance(child, (list, tuple)):
            out.extend(_flatten(child))
        elif isinstance(child, Element):
            out.append(child)
        else:
            # Empty text never survives a round trip through markup.
            s = text(child)
            if s:
                out.append(s)
    return out


def h(tag: str, props: Mapping[str, Any] | None = None, *children: Any) -> Element:
    """Build an element; ``class_name`` maps to ``class`` like JSX's className."""

    attrs: list[tuple[str, str]] = []
    for key, value in (props or {}).items():
        if value is None or value is False:
            continue
        name = "class" if key in ("class_name", "className") else key
        attrs.append((name, "" if value is True else text(value)))
    return Element(tag=tag, props=tuple(attrs), children=tuple(_flatten(children)))


def slugify(name: str) -> str:
    return re.sub(r"\s+", "-", name.strip().lower())


def IngredientsList(ingredients: Iterable[Mapping[str, Any]]) -> Element:  # noqa: N802
    return h(
        "ul",
        {"class_name": "ingredients"},
        [
            h(
                "li",
                None,
                f"{text(i.get('amount'))} {text(i.get('measurement'))} {text(i.get('name'))}",
            )
            for i in ingredients
        ],
    )


def Instructions(  # noqa: N802
    steps: Iterable[str], title: str = "Cooking Instructions"
) -> Element:
    return h(
        "section",
        {"class_name": "instructions"},
        h("h2", None, title),
        [h("p", None, step) for step in steps],
    )


def Recipe(record: Mapping[str, Any]) -> Element:  # noqa: N802
    name = text(record.get("name"))
    return h(
        "section",
        {"id": slugify(name)},
        h("h1", None, name),
        IngredientsList(record.get("ingredients") or []),
        Instructions(record.get("steps") or []),
    )


def Menu(  # noqa: N802
    recipes: Iterable[Mapping[str, Any]], title: str = "Delicious Recipes"
) -> Element:
    return h(
        "article",
        None,
        h("header", None, h("h1", None, title)),
        h("div", {"class_name": "recipes"}, [Recipe(r) for r in recipes]),
    )
