from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from html import escape
from html.parser import HTMLParser
from pathlib import Path
from typing import Any

from fastapi.templating import Jinja2Templates

from recipe_menu.ui.components import Element, Menu, Node

BASE_DIR = Path(__file__).resolve().parent
TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

MOUNT_ID = "app"
DATA_GLOBAL = "__DATA__"
BUNDLE_NAME = "bundle.js"
PAGE_TITLE = "React Recipes App"

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# Characters that could end the inline <script> or break JS string parsing.
_SCRIPT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def render_to_string(node: Node | Iterable[Node]) -> str:
    if isinstance(node, str):
        return escape(node, quote=False)
    if not isinstance(node, Element):
        return "".join(render_to_string(n) for n in node)

    attrs = "".join(f' {key}="{escape(value, quote=True)}"' for key, value in node.props)
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(render_to_string(child) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


def render_menu(recipes: Iterable[Mapping[str, Any]]) -> str:
    return render_to_string(Menu(recipes))


def serialize_data(recipes: Iterable[Mapping[str, Any]]) -> str:
    """JSON for an inline <script>; ``json.loads`` gives back the same records."""

    text = json.dumps(list(recipes), ensure_ascii=False)
    for raw, escaped in _SCRIPT_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def render_page(
    fragment: str,
    recipes: Iterable[Mapping[str, Any]],
    *,
    title: str = PAGE_TITLE,
    bundle: str = BUNDLE_NAME,
) -> str:
    template = templates.get_template("page.html")
    return template.render(
        title=title,
        mount_id=MOUNT_ID,
        fragment=fragment,
        data_global=DATA_GLOBAL,
        data_json=serialize_data(recipes),
        bundle=bundle,
    )


class _TreeBuilder(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.root: list[Any] = []
        self._stack: list[tuple[str, list[tuple[str, str]], list[Any]]] = []

    def _children(self) -> list[Any]:
        return self._stack[-1][2] if self._stack else self.root

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        props = [(k, v or "") for k, v in attrs]
        if tag in VOID_ELEMENTS:
            self._children().append(Element(tag=tag, props=tuple(props)))
            return
        self._stack.append((tag, props, []))

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        props = [(k, v or "") for k, v in attrs]
        self._children().append(Element(tag=tag, props=tuple(props)))

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return
        # Close implicitly-open elements up to the matching tag.
        while self._stack:
            name, props, children = self._stack.pop()
            self._children().append(
                Element(tag=name, props=tuple(props), children=_merge(children))
            )
            if name == tag:
                break

    def handle_data(self, data: str) -> None:
        self._children().append(data)

    def close(self) -> None:
        super().close()
        while self._stack:
            self.handle_endtag(self._stack[-1][0])


def _merge(children: list[Any]) -> tuple[Node, ...]:
    out: list[Node] = []
    for child in children:
        if isinstance(child, str) and out and isinstance(out[-1], str):
            out[-1] = out[-1] + child
        else:
            out.append(child)
    return tuple(c for c in out if not (isinstance(c, str) and c == ""))


def parse_markup(markup: str) -> list[Node]:
    """Parse an HTML fragment back into element nodes."""

    builder = _TreeBuilder()
    builder.feed(markup)
    builder.close()
    return list(_merge(builder.root))


def _label(node: Node) -> str:
    if isinstance(node, str):
        return "#text"
    ident = node.prop("id")
    cls = node.prop("class")
    if ident:
        return f"{node.tag}#{ident}"
    if cls:
        return f"{node.tag}.{cls.replace(' ', '.')}"
    return node.tag


def find_mismatch(
    expected: Node | Sequence[Node], actual: Node | Sequence[Node], path: str = ""
) -> str | None:
    """Return where two trees first differ, or None when they are identical."""

    if not isinstance(expected, (str, Element)) or not isinstance(actual, (str, Element)):
        exp_list = [expected] if isinstance(expected, (str, Element)) else list(expected)
        act_list = [actual] if isinstance(actual, (str, Element)) else list(actual)
        if len(exp_list) != len(act_list):
            return f"{path or '/'}: {len(exp_list)} children != {len(act_list)}"
        for idx, (e, a) in enumerate(zip(exp_list, act_list)):
            found = find_mismatch(e, a, f"{path}/{_label(e)}[{idx}]")
            if found:
                return found
        return None

    if isinstance(expected, str) or isinstance(actual, str):
        if expected != actual:
            return f"{path}: {expected!r} != {actual!r}"
        return None

    if expected.tag != actual.tag:
        return f"{path}: <{expected.tag}> != <{actual.tag}>"
    if dict(expected.props) != dict(actual.props):
        return f"{path}: attributes {dict(expected.props)} != {dict(actual.props)}"
    return find_mismatch(list(expected.children), list(actual.children), path)
