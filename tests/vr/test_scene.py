# %%
import base64
import json

import pytest

from vrstudio.entity import sphere, text
from vrstudio.scene import Asset, Scene, template_entities
from vrstudio.util import CONFIG
from vrstudio.widget import Widget


def test_scene_for_json():
    s = Scene(sphere([0, 0, 0]), template="empty", title="Points")
    assert s.for_json() == {
        "template": "empty",
        "title": "Points",
        "children": [sphere([0, 0, 0]).for_json()],
        "assets": [],
        "scripts": [],
    }


def test_scene_defaults():
    s = Scene()
    assert s.template == CONFIG["template"]
    assert s.title == "vrstudio scene"


def test_scene_rejects_non_entities():
    with pytest.raises(TypeError):
        Scene({"tag": "sphere"})


def test_scene_add():
    a = Scene(sphere([0, 0, 0]), title="A", scripts=["one.js"])
    b = Scene(text("b"), assets=[Asset("x", "x.json")], scripts=["one.js", "two.js"])
    combined = a + b
    assert len(combined.children) == 2
    assert combined.title == "A"
    assert combined.assets == (Asset("x", "x.json"),)
    assert combined.scripts == ("one.js", "two.js")
    assert len(a.children) == 1

    appended = a + text("c")
    assert [c.tag for c in appended.children] == ["sphere", "text"]

    with pytest.raises(TypeError):
        a + 1


def test_templates():
    assert template_entities("empty") == []
    assert template_entities("basic")[0].tag == "sky"
    forest = template_entities("forest")[0]
    assert forest.attributes == {"environment": {"preset": "forest"}}


def test_to_html():
    s = Scene(sphere([0, 1, 0], id="ball"), template="basic", title="My <scene>")
    doc = s.to_html()
    assert doc.startswith("<!DOCTYPE html>")
    assert "<title>My &lt;scene&gt;</title>" in doc
    assert f'<script src="{CONFIG["scripts"]["aframe"]}"></script>' in doc
    assert CONFIG["scripts"]["event_set"] in doc
    assert CONFIG["scripts"]["environment"] not in doc
    assert "<a-sky" in doc
    assert '<a-sphere id="ball" position="0 1 0"' in doc
    assert doc.index("<a-sky") < doc.index("<a-sphere")


def test_to_html_environment_template():
    doc = Scene(template="forest").to_html()
    assert CONFIG["scripts"]["environment"] in doc
    assert 'environment="preset: forest"' in doc
    assert "<a-sky" not in Scene(template="empty").to_html()


def test_assets():
    data = [{"a": 1, "b": 2.5}]
    asset = Asset.from_json("plot_data", data)
    prefix = "data:application/json;base64,"
    assert asset.src.startswith(prefix)
    assert json.loads(base64.b64decode(asset.src[len(prefix):])) == data

    doc = Scene(assets=[asset], scripts=["extra.js"]).to_html()
    assert "<a-assets>" in doc
    assert '<a-asset-item id="plot_data"' in doc
    assert '<script src="extra.js"></script>' in doc


def test_find_and_select():
    s = Scene(
        sphere([0, 0, 0], id="a", class_="point"),
        sphere([1, 0, 0], id="b", class_="point big"),
        text("t", class_="label"),
    )
    assert s.find("b").position == (1, 0, 0)
    assert s.find("missing") is None
    assert [e.id for e in s.select("point")] == ["a", "b"]
    assert [e.id for e in s.select("big")] == ["b"]


def test_save_html(tmp_path, capsys):
    path = tmp_path / "nested" / "scene.html"
    s = Scene(sphere([0, 0, 0]))
    s.save_html(str(path))
    assert path.read_text() == s.to_html()
    assert "HTML saved to" in capsys.readouterr().out


def test_html_repr():
    s = Scene(sphere([0, 0, 0]))
    snippet = s._repr_html_()
    assert snippet.startswith("<iframe")
    assert "srcdoc=" in snippet
    assert "&lt;a-sphere" in snippet
    assert s.html() is s.html()


def test_display_as():
    s = Scene()
    with pytest.raises(ValueError):
        s.display_as("pdf")
    assert s.display_as("widget") is s


def test_widget():
    s = Scene(sphere([0, 0, 0]))
    w = s.widget()
    assert isinstance(w, Widget)
    assert w.html == s.to_html()
    assert w.frame_height == CONFIG["widget_height"]
    assert s.widget() is w
