# %%
import copy
import datetime

import numpy as np
import pytest

from vrstudio import util
from vrstudio.entity import sphere
from vrstudio.palette import grey, rainbow, to_hex
from vrstudio.util import CONFIG, configure, deep_merge
from vrstudio.widget import to_json


@pytest.fixture
def restore_config():
    saved = copy.deepcopy(CONFIG)
    yield
    CONFIG.clear()
    CONFIG.update(saved)


def test_deep_merge():
    a = {"x": 1, "nested": {"a": 1, "b": 2}}
    b = {"y": 2, "nested": {"b": 3}}
    assert deep_merge(a, b) == {"x": 1, "y": 2, "nested": {"a": 1, "b": 3}}
    assert a == {"x": 1, "nested": {"a": 1, "b": 2}}


def test_configure(restore_config):
    aframe = CONFIG["scripts"]["aframe"]
    result = configure({"template": "forest"}, scripts={"d3": "/static/d3.js"})
    assert result is CONFIG
    assert util.CONFIG["template"] == "forest"
    assert CONFIG["scripts"]["d3"] == "/static/d3.js"
    assert CONFIG["scripts"]["aframe"] == aframe


def test_to_json():
    assert to_json(float("nan")) is None
    assert to_json({"a": [1, 2.5, "x", None, True]}) == {"a": [1, 2.5, "x", None, True]}
    assert to_json(np.array([[1, 2], [3, 4]])) == [[1, 2], [3, 4]]
    assert to_json(np.array([1.0, np.nan])) == [1.0, None]
    assert to_json(np.float32(0.5)) == 0.5
    assert isinstance(to_json(np.int64(3)), int)
    assert to_json(np.bool_(True)) is True
    assert to_json(datetime.date(2024, 1, 2)) == "2024-01-02"
    assert to_json((1, 2)) == [1, 2]
    assert to_json(sphere([0, 0, 0]))["tag"] == "sphere"


def test_to_json_iterables():
    assert to_json(range(3)) == [0, 1, 2]
    with pytest.warns(UserWarning):
        assert to_json(x for x in [1, 2]) == [1, 2]


def test_to_json_rejects_unknown_objects():
    with pytest.raises(TypeError):
        to_json(object())


def test_palettes():
    assert rainbow(0) == []
    assert rainbow(1) == ["#ff0000"]
    assert rainbow(3) == ["#ff0000", "#00ff00", "#0000ff"]
    assert len(set(rainbow(7))) == 7
    assert len(grey(4)) == 4
    assert grey(1) == ["#4c4c4c"]
    assert to_hex([1, 0.5, 0]) == "#ff8000"
