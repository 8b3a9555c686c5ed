"""Tests for the storyboard command line."""

import json
import sys

import pytest

from storyboard.cli import main


def _graph(scene_children):
    return {
        "children": [{
            "type": "group",
            "name": "stage:0,0",
            "children": [{"type": "group", "name": "intro-4", "children": scene_children}],
        }],
    }


BOX = {
    "type": "path",
    "name": "box",
    "fillColor": "rgb(255,0,0)",
    "bounds": {"x": 0, "y": 0, "width": 10, "height": 10},
    "segments": [{"point": {"x": 0, "y": 0}}, {"point": {"x": 10, "y": 0}}],
}


@pytest.fixture()
def graph_path(tmp_path):
    path = tmp_path / "graph.json"
    path.write_text(json.dumps(_graph([BOX])))
    return path


class TestCompileCommand:
    def test_writes_output_file(self, graph_path, tmp_path, monkeypatch):
        out = tmp_path / "out" / "animation.json"
        monkeypatch.setattr(sys, "argv", [
            "storyboard", "compile", str(graph_path), "-o", str(out), "-c", str(tmp_path / "none.yaml"),
        ])
        main()
        ir = json.loads(out.read_text())
        assert ir["shapes"][0]["id"] == "intro:box"
        assert [k["offset"] for k in ir["shapes"][0]["keyframes"]] == [0, 4]

    def test_writes_stdout_with_animation_document(self, graph_path, tmp_path, monkeypatch, capsys):
        animation = tmp_path / "animation.yaml"
        animation.write_text("text:\n  - time: 0\n    text: hi\n")
        monkeypatch.setattr(sys, "argv", ["storyboard", "compile", str(graph_path), "-a", str(animation)])
        main()
        ir = json.loads(capsys.readouterr().out)
        assert ir["text"][0]["text"] == "hi"

    def test_compile_error_exits(self, tmp_path, monkeypatch):
        path = tmp_path / "graph.json"
        path.write_text(json.dumps(_graph([BOX, {**BOX, "name": "ghost:2"}])))
        monkeypatch.setattr(sys, "argv", ["storyboard", "compile", str(path)])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1

    def test_invalid_color_exits(self, tmp_path, monkeypatch, caplog):
        group = {"type": "group", "name": "g[fadein]", "children": [{**BOX, "fillColor": "rgb(a,b,c)"}]}
        path = tmp_path / "graph.json"
        path.write_text(json.dumps(_graph([group])))
        monkeypatch.setattr(sys, "argv", ["storyboard", "compile", str(path)])
        with pytest.raises(SystemExit) as excinfo:
            main()
        assert excinfo.value.code == 1
        assert "Compile failed" in caplog.text

    def test_no_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["storyboard"])
        main()
        assert "compile" in capsys.readouterr().out
