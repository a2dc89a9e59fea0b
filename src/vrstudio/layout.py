import html as html_lib
import os
import uuid
from typing import Any

from html2image import Html2Image
from PIL import Image

from vrstudio.util import CONFIG
from vrstudio.widget import Widget


def create_parent_dir(path: str) -> None:
    """Create parent directory if it doesn't exist."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def html_snippet(document: str, id=None, height=None) -> str:
    id = id or f"vrstudio-scene-{uuid.uuid4().hex}"
    height = height or CONFIG["widget_height"]
    # A-Frame takes over the whole page it is loaded in, so it gets its own frame.
    return (
        f'<iframe id="{id}" style="width: 100%; height: {height}px; border: none;" '
        f'srcdoc="{html_lib.escape(document, quote=True)}"></iframe>'
    )


class HTML:
    def __init__(self, document: str):
        self.document = document
        self.id = f"vrstudio-scene-{uuid.uuid4().hex}"

    def set_document(self, document: str):
        self.document = document

    def _repr_mimebundle_(self, **kwargs):
        return {"text/html": html_snippet(self.document, self.id)}, {}


class LayoutItem:
    def __init__(self):
        self._html: HTML | None = None
        self._widget: Widget | None = None
        self._display_as = None

    def display_as(self, display_as) -> "LayoutItem":
        if display_as not in ["html", "widget"]:
            raise ValueError("display_as must be either 'html' or 'widget'")
        self._display_as = display_as
        return self

    def for_json(self) -> Any:
        raise NotImplementedError("Subclasses must implement for_json method")

    def to_html(self) -> str:
        raise NotImplementedError("Subclasses must implement to_html method")

    def _repr_mimebundle_(self, **kwargs: Any) -> Any:
        return self.repr()._repr_mimebundle_(**kwargs)

    def _repr_html_(self, **kwargs: Any) -> str | None:
        bundle = self.repr()._repr_mimebundle_(**kwargs)
        if (
            isinstance(bundle, tuple)
            and len(bundle) > 0
            and isinstance(bundle[0], dict)
        ):
            return bundle[0].get("text/html")
        return None

    def html(self) -> HTML:
        """
        Lazily generate & cache the HTML for this LayoutItem.
        """
        if self._html is None:
            self._html = HTML(self.to_html())
        return self._html

    def widget(self) -> Widget:
        """
        Lazily generate & cache the widget for this LayoutItem.
        """
        if self._widget is None:
            self._widget = Widget(self)
        return self._widget

    def repr(self) -> Widget | HTML:
        display_as = self._display_as or CONFIG["display_as"]
        if display_as == "widget":
            return self.widget()
        else:
            return self.html()

    def save_html(self, path: str) -> None:
        create_parent_dir(path)
        with open(path, "w") as f:
            f.write(self.to_html())
        print(f"HTML saved to {path}")

    def save_image(self, path, width=800, height=600):
        # Save image using headless browser
        create_parent_dir(path)

        hti = Html2Image()
        hti.size = (width, height)
        hti.output_path = os.path.dirname(os.path.abspath(path))

        hti.screenshot(html_str=self.to_html(), save_as=os.path.basename(path))

        # Crop transparent regions
        img = Image.open(path)
        img = img.crop(img.getbbox())
        img.save(path)

        print(f"Image saved to {path}")
