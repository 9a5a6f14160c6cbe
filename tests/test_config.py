"""
Tests for project configuration loading.
"""

import json

import pytest

from litdoc.config import ExampleHandler, ProjectConfig, find_config, load_config
from litdoc.core import Litdoc
from litdoc.errors import ConfigError


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run in an empty directory with no config env var."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LITDOC_CONFIG", raising=False)
    return tmp_path


def write_config(path, data):
    path.write_text(json.dumps(data))
    return path


class TestExampleHandler:
    def test_test_handler(self):
        handler = ExampleHandler.model_validate({"pattern": "^instanceof", "test": "function() {}"})
        assert handler.template is None

    def test_requires_test_or_template(self):
        with pytest.raises(ValueError, match="either"):
            ExampleHandler.model_validate({"pattern": "x"})

    def test_rejects_both(self):
        with pytest.raises(ValueError, match="either"):
            ExampleHandler.model_validate({"pattern": "x", "test": "f", "template": "t"})

    def test_rejects_bad_pattern(self):
        with pytest.raises(ValueError, match="invalid regular expression"):
            ExampleHandler.model_validate({"pattern": "(", "test": "f"})


class TestLoadConfig:
    def test_defaults_without_file(self, isolated):
        config = load_config()
        assert config == ProjectConfig()
        assert config.highlight

    def test_finds_default_file(self, isolated):
        write_config(isolated / "litdoc.json", {"tags": ["public"]})
        assert load_config().tags == ["public"]

    def test_env_var(self, isolated, monkeypatch):
        path = write_config(isolated / "other.json", {"grep": "map"})
        monkeypatch.setenv("LITDOC_CONFIG", str(path))
        assert find_config() == path
        assert load_config().grep == "map"

    def test_paths_relative_to_config(self, isolated):
        (isolated / "tpl").mkdir()
        (isolated / "tpl" / "page.j2").write_text("{{ name }}")
        (isolated / "tpl" / "row.j2").write_text("row")
        path = write_config(
            isolated / "litdoc.json",
            {"template": "tpl/page.j2", "partials": {"row": "tpl/row.j2"}},
        )
        config = load_config(path)
        assert config.read_template() == "{{ name }}"
        assert config.read_partials() == {"row": "row"}

    def test_invalid_json(self, isolated):
        (isolated / "litdoc.json").write_text("{not json")
        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config()

    def test_invalid_field(self, isolated):
        write_config(isolated / "litdoc.json", {"tags": "public"})
        with pytest.raises(ConfigError, match="tags"):
            load_config()

    def test_invalid_handler(self, isolated):
        write_config(isolated / "litdoc.json", {"example_handlers": [{"pattern": "x"}]})
        with pytest.raises(ConfigError, match="either"):
            load_config()

    def test_missing_explicit_file(self, isolated):
        with pytest.raises(ConfigError, match="Cannot read"):
            load_config(isolated / "missing.json")

    def test_missing_template_file(self, isolated):
        path = write_config(isolated / "litdoc.json", {"template": "nope.j2"})
        with pytest.raises(ConfigError, match="nope.j2"):
            load_config(path).read_template()


class TestFromConfig:
    def test_options_carried_over(self):
        config = ProjectConfig(
            namespaces=["A"],
            tags=["public"],
            require_description=True,
            highlight=False,
            extra_options={"theme": "dark"},
        )
        litdoc = Litdoc.from_config(config)
        assert litdoc.namespaces == ["A"]
        assert litdoc.tags == ["public"]
        assert litdoc.require_description
        assert litdoc.highlighter is None
        assert litdoc.extra_options == {"theme": "dark"}

    def test_overrides_win(self):
        litdoc = Litdoc.from_config(ProjectConfig(tags=["public"]), tags=["beta"])
        assert litdoc.tags == ["beta"]
