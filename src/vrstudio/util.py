import copy
from typing import Any, Dict, Optional

CONFIG: Dict[str, Any] = {
    "display_as": "html",
    "template": "basic",
    "widget_height": 500,
    "scripts": {
        "aframe": "https://aframe.io/releases/1.4.0/aframe.min.js",
        "environment": "https://unpkg.com/aframe-environment-component@1.3.1/dist/aframe-environment-component.min.js",
        "event_set": "https://unpkg.com/aframe-event-set-component@5.0.0/dist/aframe-event-set-component.min.js",
        "d3": "https://d3js.org/d3.v4.min.js",
        "scatterplot": "https://cdn.jsdelivr.net/gh/zcanter/aframe-scatterplot/dist/a-framedc.min.js",
    },
}


def deep_merge(dict1: Dict[str, Any], dict2: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries. Values from dict2 win, nested dicts are
    merged rather than replaced. Neither input is mutated.
    """
    result = copy.deepcopy(dict1)
    for key, value in dict2.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def configure(options: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    """Update the global CONFIG in place and return it.

    Example:
        configure(template="forest", scripts={"aframe": "/static/aframe.js"})
    """
    merged = deep_merge(CONFIG, {**(options or {}), **kwargs})
    CONFIG.clear()
    CONFIG.update(merged)
    return CONFIG
