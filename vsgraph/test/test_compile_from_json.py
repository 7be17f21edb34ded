import json

import pytest

from vsgraph.compile_from_json import _graph_name_to_filename, main
from vsgraph.config import load_settings

GRAPH = {
    "name": "Simple Pipeline",
    "nodes": [
        {"id": "s", "type": "Source", "file_path": "in.mkv"},
        {"id": "f", "type": "Filter", "filter_type": "crop",
         "parameters": [{"name": "top", "value": "8"}]},
        {"id": "o", "type": "Output"},
    ],
    "connections": [
        {"from_node": "s", "from_port": "clip", "to_node": "f", "to_port": "clip"},
        {"from_node": "f", "from_port": "clip", "to_node": "o", "to_port": "clip"},
    ],
}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ("VSGRAPH_STRICT", "VSGRAPH_OUTPUT_DIR", "VSGRAPH_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _write(tmp_path, data, name="graph.json"):
    path = tmp_path / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestCompileFromJson:

    def test_filename_from_graph_name(self):
        assert _graph_name_to_filename("Simple Pipeline") == "simple_pipeline.vpy"
        assert _graph_name_to_filename("denoise-v2") == "denoise_v2.vpy"
        assert _graph_name_to_filename("  ") == "graph.vpy"

    def test_print_mode(self, tmp_path, capsys):
        path = _write(tmp_path, GRAPH)
        assert main([str(path), "--print"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("import vapoursynth as vs\n")
        assert "clip1 = core.std.Crop(clip0, top=8)" in out
        assert "clip1.set_output(0)" in out

    def test_writes_script_file(self, tmp_path):
        path = _write(tmp_path, GRAPH)
        out_dir = tmp_path / "build"
        assert main([str(path), "--out", str(out_dir)]) == 0
        script = (out_dir / "simple_pipeline.vpy").read_text(encoding="utf-8")
        assert "clip1.set_output(0)" in script

    def test_output_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VSGRAPH_OUTPUT_DIR", str(tmp_path / "env_out"))
        path = _write(tmp_path, GRAPH)
        assert main([str(path)]) == 0
        assert (tmp_path / "env_out" / "simple_pipeline.vpy").exists()

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.json")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_schema_error(self, tmp_path, capsys):
        path = _write(tmp_path, {"name": "x", "nodes": []})
        assert main([str(path)]) == 1
        assert "Schema validation failed" in capsys.readouterr().err

    def test_compile_error(self, tmp_path, capsys):
        data = {"name": "no-output", "nodes": [GRAPH["nodes"][0]], "connections": []}
        path = _write(tmp_path, data)
        assert main([str(path), "--print"]) == 1
        assert "No output node found" in capsys.readouterr().err

    def test_strict_flag(self, tmp_path, capsys):
        data = dict(GRAPH, connections=GRAPH["connections"][:1])
        path = _write(tmp_path, data)
        assert main([str(path), "--print"]) == 0
        assert main([str(path), "--print", "--strict"]) == 1
        assert "is not connected" in capsys.readouterr().err

    def test_strict_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VSGRAPH_STRICT", "true")
        data = dict(GRAPH, connections=GRAPH["connections"][:1])
        path = _write(tmp_path, data)
        assert main([str(path), "--print"]) == 1

    def test_filename_drops_path_separators(self):
        assert _graph_name_to_filename("../escaped") == "_escaped.vpy"
        assert _graph_name_to_filename("a/b") == "a_b.vpy"
        assert _graph_name_to_filename("..") == "graph.vpy"

    def test_graph_name_cannot_leave_output_dir(self, tmp_path):
        path = _write(tmp_path, dict(GRAPH, name="../escaped"))
        out_dir = tmp_path / "build"
        assert main([str(path), "--out", str(out_dir)]) == 0
        assert (out_dir / "_escaped.vpy").exists()
        assert not (tmp_path / "escaped.vpy").exists()

    def test_nested_graph_name_writes_into_output_dir(self, tmp_path):
        path = _write(tmp_path, dict(GRAPH, name="a/b"))
        out_dir = tmp_path / "build"
        assert main([str(path), "--out", str(out_dir)]) == 0
        assert (out_dir / "a_b.vpy").exists()

    def test_invalid_log_level_in_environment(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("VSGRAPH_LOG_LEVEL", "verbose")
        path = _write(tmp_path, GRAPH)
        assert main([str(path), "--print"]) == 1
        assert "VSGRAPH_LOG_LEVEL must be one of" in capsys.readouterr().err


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("VSGRAPH_PORT", raising=False)
        settings = load_settings()
        assert settings.log_level == "INFO"
        assert settings.port == 3001

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("VSGRAPH_LOG_LEVEL", " debug ")
        assert load_settings().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("VSGRAPH_LOG_LEVEL", "verbose")
        with pytest.raises(ValueError, match="VSGRAPH_LOG_LEVEL"):
            load_settings()

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("VSGRAPH_PORT", "http")
        with pytest.raises(ValueError, match="VSGRAPH_PORT"):
            load_settings()
