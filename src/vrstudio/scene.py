import base64
import html as html_lib
import json
from typing import Any, Dict, Iterator, List, Optional, Sequence

from vrstudio.entity import Entity, entity
from vrstudio.layout import LayoutItem
from vrstudio.util import CONFIG
from vrstudio.widget import to_json


class Asset:
    """An item preloaded through `<a-assets>`, referenced elsewhere as `#id`."""

    def __init__(self, id: str, src: str):
        self.id = id
        self.src = src

    @classmethod
    def from_json(cls, id: str, data: Any) -> "Asset":
        """Embed `data` as a base64 JSON data URI, so no file needs to be served."""
        payload = json.dumps(to_json(data)).encode("utf-8")
        encoded = base64.b64encode(payload).decode("ascii")
        return cls(id, f"data:application/json;base64,{encoded}")

    def for_json(self) -> Dict[str, str]:
        return {"id": self.id, "src": self.src}

    def to_html(self) -> str:
        return (
            f'<a-asset-item id="{html_lib.escape(self.id)}" '
            f'src="{html_lib.escape(self.src)}"></a-asset-item>'
        )

    def __eq__(self, other):
        return isinstance(other, Asset) and self.for_json() == other.for_json()

    def __repr__(self):
        return f"Asset({self.id!r})"


def template_entities(template: str) -> List[Entity]:
    """Decorations a template adds in front of the scene's own children."""
    if template == "empty":
        return []
    if template == "basic":
        return [entity("sky", color="#ECECEC")]
    return [entity("entity", environment={"preset": template})]


class Scene(LayoutItem):
    """The root of an A-Frame scene.

    Args:
        *children: Top-level entities.
        template: "empty", "basic", or an aframe-environment-component
            preset name such as "forest". Defaults to CONFIG["template"].
        title: Document title.
        assets: Assets to preload.
        scripts: Extra script URLs loaded after A-Frame and its components.
    """

    def __init__(
        self,
        *children: Entity,
        template: Optional[str] = None,
        title: Optional[str] = None,
        assets: Sequence[Asset] = (),
        scripts: Sequence[str] = (),
    ):
        super().__init__()
        for child in children:
            if not isinstance(child, Entity):
                raise TypeError(f"Invalid type in scene children: {type(child)}")
        self.children = tuple(children)
        self.template = template or CONFIG["template"]
        self.title = title or "vrstudio scene"
        self.assets = tuple(assets)
        self.scripts = tuple(scripts)

    def __add__(self, other: Any) -> "Scene":
        """Append an entity, or merge another scene's children, assets and scripts."""
        if isinstance(other, Entity):
            return self._with(children=(*self.children, other))
        elif isinstance(other, Scene):
            return self._with(
                children=(*self.children, *other.children),
                assets=(*self.assets, *other.assets),
                scripts=(*self.scripts, *[s for s in other.scripts if s not in self.scripts]),
            )
        else:
            raise TypeError(f"Cannot add Scene with {type(other)}")

    def _with(self, **changes: Any) -> "Scene":
        opts = {
            "children": self.children,
            "template": self.template,
            "title": self.title,
            "assets": self.assets,
            "scripts": self.scripts,
            **changes,
        }
        return Scene(*opts.pop("children"), **opts)

    def __eq__(self, other):
        return isinstance(other, Scene) and self.for_json() == other.for_json()

    def walk(self) -> Iterator[Entity]:
        for child in self.children:
            yield from child.walk()

    def find(self, id: str) -> Optional[Entity]:
        return next((e for e in self.walk() if e.id == id), None)

    def select(self, class_name: str) -> List[Entity]:
        """All entities carrying `class_name` in their class attribute, in tree order."""
        return [e for e in self.walk() if class_name in e.classes()]

    def for_json(self) -> Dict[str, Any]:
        return {
            "template": self.template,
            "title": self.title,
            "children": [c.for_json() for c in self.children],
            "assets": [a.for_json() for a in self.assets],
            "scripts": list(self.scripts),
        }

    def script_urls(self) -> List[str]:
        scripts = CONFIG["scripts"]
        urls = [scripts["aframe"], scripts["event_set"]]
        if self.template not in ("empty", "basic"):
            urls.append(scripts["environment"])
        return urls + [s for s in self.scripts if s not in urls]

    def to_html(self) -> str:
        head = "\n".join(
            f'    <script src="{html_lib.escape(url)}"></script>'
            for url in self.script_urls()
        )
        body: List[str] = []
        if self.assets:
            items = "\n".join(f"        {a.to_html()}" for a in self.assets)
            body.append(f"      <a-assets>\n{items}\n      </a-assets>")
        for e in [*template_entities(self.template), *self.children]:
            body.append(e.to_html(indent=3))
        content = "\n".join(body)
        return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <title>{html_lib.escape(self.title)}</title>
{head}
  </head>
  <body>
    <a-scene>
{content}
    </a-scene>
  </body>
</html>
"""

    def __repr__(self):
        return f"<Scene title={self.title!r} template={self.template!r} children={len(self.children)}>"
