"""
Tests for settings loading.
"""

import pytest

from jresolve.config.loader import DEFAULTS, Settings, _merge_dict, load_settings
from jresolve.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("JRESOLVE_CONFIG", raising=False)


class TestSettings:
    """Tests for Settings class."""

    def test_dot_notation(self):
        settings = Settings({"resolver": {"unique_match": False}})
        assert settings.get("resolver.unique_match") is False
        assert settings.unique_match is False

    def test_dot_notation_missing_returns_default(self):
        assert Settings({"a": 1}).get("a.b.c", "fallback") == "fallback"

    def test_contains(self):
        settings = Settings({"a": {"b": 1}})
        assert "a" in settings
        assert "a.b" in settings
        assert "a.c" not in settings

    def test_getitem_missing_raises(self):
        with pytest.raises(KeyError):
            _ = Settings({})["missing"]

    def test_properties_defaults(self):
        settings = Settings({})
        assert settings.unique_match is True
        assert settings.external is True
        assert settings.shell_executable is None
        assert settings.indent == 2
        assert settings.max_substitutions == 1000

    def test_zero_indent_kept(self):
        assert Settings({"output": {"indent": 0}}).indent == 0

    def test_validate_section_type(self):
        with pytest.raises(ConfigurationError, match="must be a mapping"):
            Settings({"resolver": "yes"}).validate()

    def test_validate_bool(self):
        data = {"resolver": {"unique_match": "sometimes", "external": True}}
        with pytest.raises(ConfigurationError, match="unique_match"):
            Settings(data).validate()

    @pytest.mark.parametrize("limit", [0, -1, "many", True])
    def test_validate_max_substitutions(self, limit):
        data = {"resolver": {"unique_match": True, "external": True, "max_substitutions": limit}}
        with pytest.raises(ConfigurationError, match="max_substitutions"):
            Settings(data).validate()

    def test_validate_indent(self):
        data = {"resolver": {"unique_match": True, "external": True}, "output": {"indent": -1}}
        with pytest.raises(ConfigurationError, match="indent"):
            Settings(data).validate()


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_defaults_without_file(self):
        settings = load_settings()
        assert settings.data == DEFAULTS
        assert settings.data is not DEFAULTS

    def test_cwd_file(self, tmp_path):
        (tmp_path / "jresolve.yaml").write_text("resolver:\n  unique_match: false\n")
        settings = load_settings()
        assert settings.unique_match is False
        assert settings.external is True  # default kept

    def test_explicit_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("shell:\n  executable: /bin/bash\n")
        assert load_settings(path).shell_executable == "/bin/bash"

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "from-env.yaml"
        path.write_text("output:\n  indent: 4\n")
        monkeypatch.setenv("JRESOLVE_CONFIG", str(path))
        assert load_settings().indent == 4

    def test_overrides_win(self, tmp_path):
        (tmp_path / "jresolve.yaml").write_text("resolver:\n  external: true\n")
        settings = load_settings(overrides={"resolver": {"external": False}})
        assert settings.external is False

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        (tmp_path / "jresolve.yaml").write_text(":\n  :\n  invalid: [")
        with pytest.raises(ConfigurationError, match="Error parsing"):
            load_settings()

    def test_non_mapping_raises(self, tmp_path):
        (tmp_path / "jresolve.yaml").write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings()

    def test_empty_file_uses_defaults(self, tmp_path):
        (tmp_path / "jresolve.yaml").write_text("")
        assert load_settings().data == DEFAULTS


class TestMergeDict:
    """Tests for _merge_dict helper."""

    def test_simple_override(self):
        base = {"a": 1, "b": 2}
        _merge_dict(base, {"b": 3})
        assert base == {"a": 1, "b": 3}

    def test_nested_merge(self):
        base = {"a": {"x": 1, "y": 2}}
        _merge_dict(base, {"a": {"y": 3, "z": 4}})
        assert base == {"a": {"x": 1, "y": 3, "z": 4}}

    def test_replace_non_dict_with_dict(self):
        base = {"a": "string"}
        _merge_dict(base, {"a": {"nested": True}})
        assert base == {"a": {"nested": True}}
