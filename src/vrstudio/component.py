from typing import Any, Dict, List, Mapping, Optional

from vrstudio.entity import camera, cursor, entity
from vrstudio.errors import EmptyInputError, InvalidInputError, ShapeMismatchError
from vrstudio.scene import Asset, Scene
from vrstudio.util import CONFIG

# Wraps the community aframe-scatterplot component
# (https://github.com/zcanter/aframe-scatterplot). The component does its own
# scaling and colouring; we only embed the data and forward options.

DATA_ASSET_ID = "plot_data"


def records(data: Any) -> List[Dict[str, Any]]:
    """
    Convert tabular data to a list of row dicts.

    Accepts a data frame (anything with `to_dict(orient="records")`), a
    mapping of equal-length columns, or a sequence of row mappings.
    """
    if hasattr(data, "to_dict"):
        return check_rows(list(data.to_dict(orient="records")))
    if isinstance(data, Mapping):
        columns = {k: list(v) for k, v in data.items()}
        if not columns:
            return []
        n = len(next(iter(columns.values())))
        for name, values in columns.items():
            if len(values) != n:
                raise ShapeMismatchError(name, n, len(values))
        return [dict(zip(columns.keys(), row)) for row in zip(*columns.values())]
    return check_rows([dict(row) for row in data])


def check_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Every row must carry the same columns as the first."""
    if not rows:
        return rows
    columns = list(rows[0])
    for i, row in enumerate(rows[1:], start=1):
        if set(row) != set(columns):
            raise ShapeMismatchError(
                f"row {i}",
                len(columns),
                len(row),
                f"Row {i} has columns {sorted(row)}, expected {sorted(columns)}",
            )
    return rows


def data_asset(data: Any, id: str = DATA_ASSET_ID) -> Asset:
    """Embed tabular data as an in-memory JSON asset."""
    return Asset.from_json(id, records(data))


def scatterplot(
    data: Any,
    x: str,
    y: str,
    z: str,
    *,
    val: Optional[str] = None,
    title: Optional[str] = None,
    template: Optional[str] = None,
    position=(0, 1, -2),
    **options: Any,
) -> Scene:
    """
    Plot `data` with the aframe-scatterplot component.

    Args:
        data: Table of observations, see `records`.
        x, y, z: Column names for each axis.
        val: Column used for point colour. Defaults to `z`.
        title: Document title.
        template: Scene template, see `Scene`.
        position: Where the plot sits in the scene.
        **options: Passed to the component as-is, eg. `xlabel="Sepal length"`,
            `pointsize=2`, `showFloor=True`.
    """
    rows = records(data)
    if not rows:
        raise EmptyInputError("No data to plot")
    columns = set().union(*(row.keys() for row in rows))
    val = val or z
    for role, column in (("x", x), ("y", y), ("z", z), ("val", val)):
        if column not in columns:
            raise InvalidInputError(f"Column '{column}' for {role} not found in data")

    plot = entity(
        "entity",
        id="scatterplot",
        position=position,
        scatterplot={
            "src": f"#{DATA_ASSET_ID}",
            "x": x,
            "y": y,
            "z": z,
            "val": val,
            **options,
        },
    )
    scripts = CONFIG["scripts"]
    return Scene(
        camera(cursor(), position=(0, 1.6, 0)),
        plot,
        template=template,
        title=title or "scatterplot",
        assets=[data_asset(rows)],
        scripts=[scripts["d3"], scripts["scatterplot"]],
    )
