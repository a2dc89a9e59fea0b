import datetime
import warnings
from typing import Any, Iterable

import anywidget
import numpy as np
import traitlets

from vrstudio.util import CONFIG


def to_json(data: Any) -> Any:
    """
    Convert `data` into plain JSON-compatible Python values.

    NaN becomes None, numpy scalars and arrays become numbers and lists,
    dates become ISO strings, and objects exposing `for_json` are serialized
    through it.
    """
    # Handle NaN at top level
    if isinstance(data, float):
        if np.isnan(data):
            return None
        return data

    # Handle basic JSON-serializable types first since they're most common
    if isinstance(data, (str, int, bool)):
        return data

    if data is None:
        return None

    if isinstance(data, np.generic):
        return to_json(data.item())

    if isinstance(data, (datetime.date, datetime.datetime)):
        return data.isoformat()

    if isinstance(data, np.ndarray):
        if data.ndim == 0:
            return to_json(data.item())
        return [to_json(x) for x in data.tolist()]

    # Handle objects with custom serialization
    if hasattr(data, "for_json"):
        return to_json(data.for_json())

    if isinstance(data, dict):
        return {str(k): to_json(v) for k, v in data.items()}

    if isinstance(data, (list, tuple)):
        return [to_json(x) for x in data]

    if isinstance(data, Iterable):
        if not hasattr(data, "__len__") and not hasattr(data, "__getitem__"):
            warnings.warn(
                "Potentially exhaustible iterator encountered: generator", UserWarning
            )
        return [to_json(x) for x in data]

    raise TypeError(f"Object of type {type(data)} is not JSON serializable")


_ESM = """
function render({ model, el }) {
  const frame = document.createElement("iframe");
  frame.style.width = "100%";
  frame.style.border = "none";
  const sync = () => {
    frame.style.height = model.get("frame_height") + "px";
    frame.srcdoc = model.get("html");
  };
  sync();
  model.on("change:html", sync);
  model.on("change:frame_height", sync);
  el.appendChild(frame);
}
export default { render };
"""


class Widget(anywidget.AnyWidget):
    """Shows a rendered scene document inside a notebook output cell."""

    _esm = _ESM
    html = traitlets.Unicode("").tag(sync=True)
    frame_height = traitlets.Int(500).tag(sync=True)

    def __init__(self, item: Any):
        super().__init__()
        self.frame_height = CONFIG["widget_height"]
        self.set_item(item)

    def set_item(self, item: Any):
        self.html = item.to_html()
