# %%
import base64
import json

import pytest

from vrstudio.component import DATA_ASSET_ID, data_asset, records, scatterplot
from vrstudio.errors import EmptyInputError, InvalidInputError, ShapeMismatchError
from vrstudio.util import CONFIG

iris = {
    "Sepal.Length": [5.1, 4.9, 7.0, 6.3],
    "Sepal.Width": [3.5, 3.0, 3.2, 3.3],
    "Petal.Length": [1.4, 1.4, 4.7, 6.0],
    "Species": ["setosa", "setosa", "versicolor", "virginica"],
}


class FakeFrame:
    """Stands in for a data frame: only `to_dict(orient="records")` is used."""

    def __init__(self, rows):
        self.rows = rows

    def to_dict(self, orient):
        assert orient == "records"
        return self.rows


def decode(asset):
    return json.loads(base64.b64decode(asset.src.split(",", 1)[1]))


def test_records_from_columns():
    rows = records(iris)
    assert len(rows) == 4
    assert rows[0] == {
        "Sepal.Length": 5.1,
        "Sepal.Width": 3.5,
        "Petal.Length": 1.4,
        "Species": "setosa",
    }


def test_records_from_rows_and_frames():
    rows = [{"a": 1}, {"a": 2}]
    assert records(rows) == rows
    assert records(FakeFrame(rows)) == rows
    assert records({}) == []


def test_records_rejects_ragged_columns():
    with pytest.raises(ShapeMismatchError) as info:
        records({"a": [1, 2], "b": [1]})
    assert info.value.field == "b"


def test_records_rejects_rows_with_different_columns():
    with pytest.raises(ShapeMismatchError, match="Row 1 has columns"):
        records([{"a": 1}, {"b": 2}])
    with pytest.raises(ShapeMismatchError) as info:
        records(FakeFrame([{"a": 1, "b": 2}, {"a": 3, "b": 4}, {"a": 5}]))
    assert info.value.field == "row 2"
    with pytest.raises(ShapeMismatchError):
        scatterplot([{"x": 1, "y": 2, "z": 3}, {"x": 1, "y": 2}], x="x", y="y", z="z")


def test_data_asset():
    asset = data_asset(iris)
    assert asset.id == DATA_ASSET_ID
    assert decode(asset) == records(iris)


def test_scatterplot_forwards_axes_in_their_roles():
    scene = scatterplot(
        iris,
        x="Sepal.Length",
        y="Sepal.Width",
        z="Petal.Length",
        xlabel="Sepal length",
        showFloor=True,
    )
    component = scene.find("scatterplot").attributes["scatterplot"]
    assert component == {
        "src": f"#{DATA_ASSET_ID}",
        "x": "Sepal.Length",
        "y": "Sepal.Width",
        "z": "Petal.Length",
        "val": "Petal.Length",
        "xlabel": "Sepal length",
        "showFloor": True,
    }
    assert decode(scene.assets[0]) == records(iris)
    assert scene.scripts == (CONFIG["scripts"]["d3"], CONFIG["scripts"]["scatterplot"])
    assert scene.children[0].tag == "camera"


def test_scatterplot_html():
    doc = scatterplot(iris, "Sepal.Length", "Sepal.Width", "Petal.Length", val="Species").to_html()
    assert "val: Species" in doc
    assert doc.index(CONFIG["scripts"]["aframe"]) < doc.index(CONFIG["scripts"]["d3"])
    assert doc.index(CONFIG["scripts"]["d3"]) < doc.index(CONFIG["scripts"]["scatterplot"])


def test_scatterplot_errors():
    with pytest.raises(InvalidInputError, match="Petal.Width"):
        scatterplot(iris, "Sepal.Length", "Sepal.Width", "Petal.Width")
    with pytest.raises(InvalidInputError, match="val"):
        scatterplot(iris, "Sepal.Length", "Sepal.Width", "Petal.Length", val="colour")
    with pytest.raises(EmptyInputError):
        scatterplot([], "a", "b", "c")
