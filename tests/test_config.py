"""Tests for Config loading and formatter command construction."""

import pytest

from rcsfmt.config import Config, ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("RCSFMT_COMMAND", "RCSFMT_ARGS", "RCSFMT_MODE", "RCSFMT_STDIN",
                "RCSFMT_WIDTH", "RCSFMT_WIDTH_FLAG", "RCSFMT_TIMEOUT",
                "RCSFMT_DIFF_COMMAND", "RCSFMT_LOG_DIR", "RCSFMT_METRICS",
                "RCSFMT_METRICS_DIR"):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_defaults(self):
        cfg = Config()
        assert cfg.COMMAND == "gofmt"
        assert cfg.ARGS == []
        assert cfg.MODE == "stdout"
        assert cfg.WIDTH is None
        assert cfg.DIFF_COMMAND == "diff"
        assert cfg.METRICS is False

    def test_default_argv_appends_file(self):
        assert Config().formatter_argv("/tmp/x.go") == ["gofmt", "/tmp/x.go"]


class TestYaml:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / ".rcsfmt.yaml"
        path.write_text(
            "formatter:\n"
            "  command: elm-format\n"
            "  args: [--yes, '{file}']\n"
            "  mode: write\n"
            "  width: 100\n"
            "  width_flag: --width\n"
            "diff_command: gdiff\n"
            "metrics: true\n",
            encoding="utf-8",
        )
        cfg = Config.load(str(path))

        assert cfg.COMMAND == "elm-format"
        assert cfg.MODE == "write"
        assert cfg.DIFF_COMMAND == "gdiff"
        assert cfg.METRICS is True
        assert cfg.formatter_argv("/tmp/a.elm") == [
            "elm-format", "--width", "100", "--yes", "/tmp/a.elm",
        ]

    def test_args_as_string(self):
        cfg = Config({"formatter": {"command": "black", "args": "-q -"}})
        assert cfg.ARGS == ["-q", "-"]

    def test_invalid_yaml_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("formatter: [unclosed\n", encoding="utf-8")
        assert Config.load(str(path)).COMMAND == "gofmt"

    def test_missing_explicit_path(self, tmp_path):
        assert Config.load(str(tmp_path / "nope.yaml")).COMMAND == "gofmt"


class TestEnv:
    def test_env_beats_yaml(self, monkeypatch):
        monkeypatch.setenv("RCSFMT_COMMAND", "goimports")
        monkeypatch.setenv("RCSFMT_METRICS", "true")
        cfg = Config({"formatter": {"command": "gofmt"}, "metrics": False})
        assert cfg.COMMAND == "goimports"
        assert cfg.METRICS is True


class TestValidation:
    def test_bad_mode(self):
        with pytest.raises(ConfigError):
            Config({"formatter": {"mode": "inplace"}})

    def test_width_without_flag(self):
        with pytest.raises(ConfigError):
            Config({"formatter": {"width": 80}})

    def test_non_positive_width(self):
        with pytest.raises(ConfigError):
            Config({"formatter": {"width": 0, "width_flag": "-w"}})


class TestOverride:
    def test_command_override_splits_args(self):
        cfg = Config().override(command="black -q --fast")
        assert cfg.COMMAND == "black"
        assert cfg.ARGS == ["-q", "--fast"]

    def test_width_override(self):
        cfg = Config().override(width=88, width_flag="--line-length")
        assert cfg.formatter_argv("f.py") == ["gofmt", "--line-length", "88", "f.py"]

    def test_stdin_mode_does_not_append_file(self):
        cfg = Config({"formatter": {"command": "black", "args": ["-q", "-"],
                                    "stdin": True}})
        assert cfg.formatter_argv("/tmp/f.py") == ["black", "-q", "-"]
