import re
import warnings
from typing import Any, List, Optional, Sequence, Union

import numpy as np

from vrstudio.entity import (
    Entity,
    EventSet,
    VectorLike,
    as_vec3,
    box,
    camera,
    cursor,
    group,
    line,
    sphere,
    text,
)
from vrstudio.errors import (
    EmptyInputError,
    InvalidInputError,
    PaletteSizeError,
    ShapeMismatchError,
)
from vrstudio.palette import Palette, rainbow
from vrstudio.scene import Scene

# This module lays out a 3D scatterplot by hand from A-Frame primitives:
# min-max scaled spheres, three axis lines with labels, and a colour legend.
# Clicking a point shows its label on a text overlay attached to the camera;
# moving the cursor off the point hides it again.

LABEL_VIEW_ID = "label_view"
CAMERA_POSITION = (0.0, 1.6, 0.0)
LABEL_VIEW_POSITION = (0.0, -0.3, -1.0)
PLOT_POSITION = (-0.5, 1.0, -2.0)

AXIS_LABEL_FRACTION = 0.5
AXIS_LABEL_OFFSET = 0.1
LEGEND_OFFSET = 1.1

ArrayLike = Union[Sequence[Any], np.ndarray]


def as_numeric(values: ArrayLike, name: str) -> np.ndarray:
    """A 1-d float array where None becomes NaN; infinities are rejected."""
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError):
        raise InvalidInputError(f"{name} must contain only numbers")
    if arr.ndim != 1:
        raise InvalidInputError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if np.isinf(arr).any():
        raise InvalidInputError(f"{name} contains infinite values")
    return arr


def normalize(values: ArrayLike, name: str = "values") -> np.ndarray:
    """
    Min-max scale `values` to [0, 1].

    Missing values (None or NaN) are ignored when computing the range and stay
    NaN in the result.

    Raises:
        EmptyInputError: `values` is empty.
        InvalidInputError: there are no non-missing values, or they all equal
            the same number (zero range).
    """
    arr = as_numeric(values, name)
    if arr.size == 0:
        raise EmptyInputError(f"{name} is empty")
    present = arr[~np.isnan(arr)]
    if present.size == 0:
        raise InvalidInputError(f"{name} has no non-missing values")
    lo, hi = present.min(), present.max()
    if hi == lo:
        raise InvalidInputError(
            f"{name} has zero range (every value is {lo:g}) and cannot be normalized"
        )
    return (arr - lo) / (hi - lo)


def levels(values: ArrayLike) -> list:
    """Distinct values in natural sort order, or first-seen order if they don't sort."""
    if isinstance(values, np.ndarray):
        values = values.tolist()
    unique = list(dict.fromkeys(values))
    try:
        return sorted(unique)
    except TypeError:
        return unique


def broadcast(value: Any, n: int, name: str) -> list:
    """Repeat a scalar `n` times, or check a sequence has length `n`."""
    if isinstance(value, str) or np.ndim(value) == 0:
        return [value] * n
    values = list(value)
    if len(values) != n:
        raise ShapeMismatchError(name, n, len(values))
    return values


def dom_id(label: str) -> str:
    return "point-" + re.sub(r"\s+", "", label)


def point_ids(labels: Sequence[str]) -> List[str]:
    """Unique ids for points; repeated labels get -2, -3, ... suffixes."""
    ids: List[str] = []
    used = set()
    for label in labels:
        base = candidate = dom_id(label)
        k = 1
        while candidate in used:
            k += 1
            candidate = f"{base}-{k}"
        used.add(candidate)
        ids.append(candidate)
    return ids


def binding_text(label: str) -> str:
    # event-set values are split on ';' and ':'
    return re.sub(r"[;:]", ",", label)


def point(position: VectorLike, color: str, radius: float, label: str, id: Optional[str] = None) -> Entity:
    target = f"#{LABEL_VIEW_ID}"
    return sphere(
        position,
        radius=radius,
        color=color,
        id=id or dom_id(label),
        class_="point",
        events=(
            EventSet("click", target, {"visible": True, "text.value": binding_text(label)}),
            EventSet("mouseleave", target, {"visible": False}),
        ),
    )


def camera_rig() -> Entity:
    """Camera with a cursor and the hidden label overlay that points write into."""
    return camera(
        cursor(objects=".point"),
        text(
            "",
            id=LABEL_VIEW_ID,
            position=LABEL_VIEW_POSITION,
            visible=False,
            align="center",
        ),
        position=CAMERA_POSITION,
    )


def axes(dimensions: VectorLike, x_label: str, y_label: str, z_label: str) -> List[Entity]:
    dx, dy, dz = dimensions
    f, off = AXIS_LABEL_FRACTION, AXIS_LABEL_OFFSET
    origin = (0, 0, 0)
    return [
        line(
            origin,
            (dx, 0, 0),
            text(x_label, position=(f * dx, off, 0), align="center", class_="axis-label"),
            class_="axis",
        ),
        line(
            origin,
            (0, dy, 0),
            text(
                y_label,
                position=(off, f * dy, 0),
                rotation=(0, 45, 0),
                class_="axis-label",
            ),
            class_="axis",
        ),
        line(
            origin,
            (0, 0, dz),
            text(
                z_label,
                position=(0, off, f * dz),
                rotation=(0, 90, 0),
                align="center",
                class_="axis-label",
            ),
            class_="axis",
        ),
    ]


def legend_entry(label: str, color: str, index: int, box_size: float, box_spacing: float, **kwargs) -> Entity:
    """A box marker with its right-aligned label beside it, at slot `index` of the stack."""
    marker = kwargs.pop("marker", {})
    return group(
        box(size=box_size, color=color, **marker),
        # the text block starts past the marker; lines align to its right edge
        text(label, position=(box_size, 0, 0), anchor="left", align="right"),
        position=(0, index * (box_size + box_spacing), 0),
        **kwargs,
    )


def legend(
    level_names: Sequence[str],
    colors: Sequence[str],
    title: str,
    dimensions: VectorLike,
    box_size: float,
    box_spacing: float,
) -> Entity:
    entries = [
        legend_entry(name, color, i, box_size, box_spacing, class_="legend-entry")
        for i, (name, color) in enumerate(zip(level_names, colors))
    ]
    heading = legend_entry(
        title,
        "#FFFFFF",
        len(entries),
        box_size,
        box_spacing,
        class_="legend-title",
        marker={"material": {"opacity": 0, "transparent": True}},
    )
    return group(
        *entries,
        heading,
        id="legend",
        position=(dimensions[0] * LEGEND_OFFSET, 0, 0),
    )


def scatter3d(
    x: ArrayLike,
    y: ArrayLike,
    z: ArrayLike,
    colour: Optional[ArrayLike] = None,
    *,
    x_label: str,
    y_label: str,
    z_label: str,
    colour_label: str = "colour",
    palette: Palette = rainbow,
    sizes: Union[float, ArrayLike] = 0.05,
    labels: Optional[Sequence[str]] = None,
    dimensions: VectorLike = (1, 1, 1),
    box_size: float = 0.1,
    box_spacing: float = 0.05,
    title: Optional[str] = None,
    template: Optional[str] = None,
) -> Scene:
    """
    Build a 3D scatterplot scene from three numeric vectors.

    Each axis is min-max scaled to [0, 1] and stretched by `dimensions`, so
    the points fill a box of that size. Points are spheres coloured by the
    levels of `colour`; clicking one shows its label in front of the camera.
    A legend is drawn beside the plot when `colour` has more than one level.

    Args:
        x, y, z: Numeric vectors of equal length. Rows with a missing
            coordinate are dropped with a warning.
        colour: Optional categorical vector, one value per row.
        x_label, y_label, z_label: Axis titles.
        colour_label: Legend title.
        palette: Called with the number of levels, returns that many colours.
        sizes: Sphere radius, a scalar or one per row.
        labels: Text shown when a point is clicked. Defaults to row numbers.
        dimensions: [width, height, depth] of the plot box.
        box_size: Side of the legend markers.
        box_spacing: Vertical gap between legend entries.
        title: Document title.
        template: Scene template, see `Scene`.

    Returns:
        Scene: camera rig plus a plot group holding axes, points and legend.

    Raises:
        EmptyInputError: no rows, or no row with all three coordinates.
        ShapeMismatchError: a per-row argument has the wrong length.
        InvalidInputError: an axis has zero range, or dimensions/sizes are
            not usable.
        PaletteSizeError: the palette returned too few colours.
    """
    xs = as_numeric(x, "x")
    n = len(xs)
    if n == 0:
        raise EmptyInputError("No data points to plot")
    ys = as_numeric(y, "y")
    zs = as_numeric(z, "z")
    for name, arr in (("y", ys), ("z", zs)):
        if len(arr) != n:
            raise ShapeMismatchError(name, n, len(arr))

    colour_values = None if colour is None else broadcast(colour, n, "colour")
    radii = broadcast(sizes, n, "sizes")
    if labels is None:
        labels = [str(i + 1) for i in range(n)]
    point_labels = [str(label) for label in broadcast(labels, n, "labels")]

    dims = as_vec3(dimensions, "dimensions")
    if min(dims) <= 0:
        raise InvalidInputError(f"dimensions must be positive, got {list(dims)}")

    # incomplete rows go before scaling, so ranges come from plotted rows only
    complete = ~(np.isnan(xs) | np.isnan(ys) | np.isnan(zs))
    if not complete.all():
        keep = np.flatnonzero(complete)
        if keep.size == 0:
            raise EmptyInputError("No row has all three coordinates")
        warnings.warn(
            f"Dropping {n - keep.size} rows with missing coordinates", UserWarning
        )
        xs, ys, zs = xs[keep], ys[keep], zs[keep]
        radii = [radii[i] for i in keep]
        point_labels = [point_labels[i] for i in keep]
        if colour_values is not None:
            colour_values = [colour_values[i] for i in keep]

    positions = np.column_stack(
        [
            normalize(xs, f"x axis '{x_label}'"),
            normalize(ys, f"y axis '{y_label}'"),
            normalize(zs, f"z axis '{z_label}'"),
        ]
    ) * np.array(dims)

    if colour_values is None:
        level_list: list = [None]
        level_index = [0] * len(positions)
    else:
        level_list = levels(colour_values)
        lookup = {level: i for i, level in enumerate(level_list)}
        level_index = [lookup[v] for v in colour_values]

    colors = list(palette(len(level_list)))
    if len(colors) < len(level_list):
        raise PaletteSizeError(len(level_list), len(colors))

    points = [
        point(pos, colors[i], radius, label, id)
        for pos, i, radius, label, id in zip(
            positions, level_index, radii, point_labels, point_ids(point_labels)
        )
    ]

    plot_children = [*axes(dims, x_label, y_label, z_label), *points]
    if len(level_list) > 1:
        plot_children.append(
            legend(
                [str(level) for level in level_list],
                colors,
                colour_label,
                dims,
                box_size,
                box_spacing,
            )
        )

    return Scene(
        camera_rig(),
        group(*plot_children, id="plot", position=PLOT_POSITION),
        template=template,
        title=title or "3D scatterplot",
    )
