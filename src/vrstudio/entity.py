import html as html_lib
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from vrstudio.errors import InvalidInputError

Vec3 = Tuple[float, float, float]
VectorLike = Union[Sequence[float], np.ndarray]


def format_number(value) -> str:
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return f"{float(value):.6g}"


def format_value(value: Any) -> str:
    """
    Render a Python value in A-Frame's attribute syntax.

    >>> format_value([0, 1.5, 0])
    '0 1.5 0'
    >>> format_value({"primitive": "box", "width": 0.1})
    'primitive: box; width: 0.1'
    """
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (int, float, np.number)):
        return format_number(value)
    if isinstance(value, Mapping):
        return "; ".join(f"{k}: {format_value(v)}" for k, v in value.items())
    if isinstance(value, (list, tuple, np.ndarray)):
        return " ".join(format_value(v) for v in value)
    if hasattr(value, "for_json"):
        return format_value(value.for_json())
    return str(value)


def as_vec3(value: VectorLike, name: str) -> Vec3:
    """Validate a 3-vector of finite numbers and return it as a float tuple."""
    try:
        values = [float(v) for v in value]
    except (TypeError, ValueError):
        raise InvalidInputError(f"'{name}' must be a sequence of 3 numbers, got {value!r}")
    if len(values) != 3:
        raise InvalidInputError(f"'{name}' must have 3 components, got {len(values)}")
    if not all(math.isfinite(v) for v in values):
        raise InvalidInputError(f"'{name}' must be finite, got {values}")
    return (values[0], values[1], values[2])


@dataclass(frozen=True)
class EventSet:
    """
    An `event-set` binding: when `event` fires on the entity, set `props` on
    the entity matching the `target` selector.
    """

    event: str
    target: str
    props: Mapping[str, Any] = field(default_factory=dict)

    def component_name(self) -> str:
        return f"event-set__{self.event}"

    def for_json(self) -> Dict[str, Any]:
        return {"_event": self.event, "_target": self.target, **self.props}


@dataclass(frozen=True)
class Entity:
    """A node of the scene graph.

    Geometric, appearance and interaction fields are validated on
    construction; anything A-Frame understands beyond those goes in
    `attributes` and is passed through untouched.
    """

    tag: str = "entity"
    id: Optional[str] = None
    position: Optional[VectorLike] = None
    rotation: Optional[VectorLike] = None
    scale: Optional[VectorLike] = None
    color: Optional[str] = None
    radius: Optional[float] = None
    value: Optional[str] = None
    visible: Optional[bool] = None
    geometry: Optional[Mapping[str, Any]] = None
    material: Optional[Mapping[str, Any]] = None
    events: Tuple[EventSet, ...] = ()
    attributes: Mapping[str, Any] = field(default_factory=dict)
    children: Tuple["Entity", ...] = ()

    def __post_init__(self):
        set_ = self._set
        for name in ("position", "rotation", "scale"):
            vec = getattr(self, name)
            if vec is not None:
                set_(name, as_vec3(vec, name))
        if self.radius is not None:
            try:
                radius = float(self.radius)
            except (TypeError, ValueError):
                raise InvalidInputError(f"'radius' must be a number, got {self.radius!r}")
            if not math.isfinite(radius) or radius < 0:
                raise InvalidInputError(f"'radius' must be a non-negative number, got {self.radius}")
            set_("radius", radius)
        if self.color is not None and not isinstance(self.color, str):
            raise InvalidInputError(f"'color' must be a string, got {self.color!r}")

        events = tuple(self.events)
        names = [e.event for e in events]
        if len(set(names)) != len(names):
            raise InvalidInputError(f"Duplicate event bindings: {names}")
        set_("events", events)

        attributes = dict(self.attributes)
        clashes = KNOWN_FIELDS.intersection(attributes)
        if clashes:
            raise InvalidInputError(
                f"Attributes {sorted(clashes)} must be passed as entity fields"
            )
        set_("attributes", attributes)

        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Entity):
                raise TypeError(f"Invalid child type: {type(child)}")
        set_("children", children)

    def _set(self, name: str, value: Any) -> None:
        # frozen dataclass: normalized values are written once, here
        object.__setattr__(self, name, value)

    def attribute_items(self) -> Dict[str, Any]:
        """All attributes in render order: known fields, extras, then event bindings."""
        out: Dict[str, Any] = {}
        for name in KNOWN_ORDER:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        out.update(self.attributes)
        for binding in self.events:
            out[binding.component_name()] = binding.for_json()
        return out

    def classes(self) -> list[str]:
        return str(self.attributes.get("class", "")).split()

    def walk(self) -> Iterator["Entity"]:
        yield self
        for child in self.children:
            yield from child.walk()

    def for_json(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "attributes": self.attribute_items(),
            "children": [c.for_json() for c in self.children],
        }

    def to_html(self, indent: int = 0) -> str:
        pad = "  " * indent
        name = f"a-{self.tag}"
        attrs = "".join(
            f' {k}="{html_lib.escape(format_value(v), quote=True)}"'
            for k, v in self.attribute_items().items()
        )
        if not self.children:
            return f"{pad}<{name}{attrs}></{name}>"
        inner = "\n".join(c.to_html(indent + 1) for c in self.children)
        return f"{pad}<{name}{attrs}>\n{inner}\n{pad}</{name}>"


KNOWN_ORDER = (
    "id",
    "position",
    "rotation",
    "scale",
    "color",
    "radius",
    "value",
    "visible",
    "geometry",
    "material",
)
KNOWN_FIELDS = frozenset(KNOWN_ORDER)
_ENTITY_FIELDS = frozenset(f.name for f in fields(Entity))


def attribute_name(key: str) -> str:
    # class_ -> class, look_controls -> look-controls
    return key.rstrip("_").replace("_", "-")


def entity(tag: str = "entity", *children: Entity, **kwargs: Any) -> Entity:
    """
    Create an entity. Keyword arguments naming an Entity field set that field;
    any other keyword becomes a pass-through attribute (trailing underscores
    are dropped and underscores become hyphens, so `class_="point"` renders as
    `class="point"`).
    """
    attributes = dict(kwargs.pop("attributes", {}))
    children = (*children, *kwargs.pop("children", ()))
    known = {}
    for key, value in kwargs.items():
        if key in _ENTITY_FIELDS:
            known[key] = value
        else:
            attributes[attribute_name(key)] = value
    return Entity(tag=tag, attributes=attributes, children=tuple(children), **known)


def sphere(position: VectorLike, radius: float = 0.05, color: Optional[str] = None, **kwargs: Any) -> Entity:
    """Create a sphere primitive centred at `position`."""
    return entity("sphere", position=position, radius=radius, color=color, **kwargs)


def box(position: Optional[VectorLike] = None, size: float = 0.1, color: Optional[str] = None, **kwargs: Any) -> Entity:
    """Create a cube of side `size`."""
    return entity(
        "box",
        position=position,
        color=color,
        geometry={"width": size, "height": size, "depth": size},
        **kwargs,
    )


def text(value: str, position: Optional[VectorLike] = None, color: str = "#000000", **kwargs: Any) -> Entity:
    return entity("text", position=position, value=value, color=color, **kwargs)


def line(start: VectorLike, end: VectorLike, *children: Entity, color: str = "#000000", **kwargs: Any) -> Entity:
    """
    Create a line segment using A-Frame's `line` component.

    Args:
        start: [x, y, z] start of the segment
        end: [x, y, z] end of the segment
        *children: Entities attached to the segment, eg. a text label
        color: CSS colour of the line
        **kwargs: Other entity fields or attributes
    """
    segment = {
        "start": as_vec3(start, "start"),
        "end": as_vec3(end, "end"),
        "color": color,
    }
    attributes = {**kwargs.pop("attributes", {}), "line": segment}
    return entity("entity", *children, attributes=attributes, **kwargs)


def group(*children: Entity, **kwargs: Any) -> Entity:
    """An empty transform node holding `children`."""
    return entity("entity", *children, **kwargs)


def camera(*children: Entity, **kwargs: Any) -> Entity:
    return entity("camera", *children, **kwargs)


def cursor(objects: Optional[str] = None, **kwargs: Any) -> Entity:
    """A gaze/mouse cursor. `objects` restricts raycasting to a selector."""
    if objects is not None:
        kwargs.setdefault("raycaster", {"objects": objects})
    return entity("cursor", **kwargs)
