"""
Tests for the error handler registry and the built-in handlers.
"""

import logging

import pytest

from jresolve.core.engine import ResolutionEngine
from jresolve.core.flatten import flatten
from jresolve.core.handlers import (
    HandlerRegistry,
    array_join_handler,
    build_default_registry,
    circular_dependency_handler,
    parse_join,
)
from jresolve.exceptions import (
    CircularDependencyError,
    EnvVarMissingError,
    ErrorKind,
    KeyNotFoundError,
)


def make_engine(doc, **kwargs):
    return ResolutionEngine(flatten(doc), environ={}, **kwargs)


class TestRegistry:
    """Tests for HandlerRegistry."""

    def test_default_registry_contents(self):
        registry = build_default_registry()
        assert ErrorKind.KEY_NOT_FOUND in registry
        assert ErrorKind.CIRCULAR_DEPENDENCY in registry
        assert ErrorKind.ENV_VAR_MISSING not in registry
        assert len(registry) == 2

    def test_unhandled_kind_reraises(self):
        registry = HandlerRegistry()
        error = EnvVarMissingError("HOME")
        with pytest.raises(EnvVarMissingError):
            registry.handle(error, make_engine({}))

    def test_custom_handler_result_is_used(self):
        registry = HandlerRegistry()
        registry.register(ErrorKind.KEY_NOT_FOUND, lambda error, engine: f"<missing {error.key}>")
        engine = make_engine({"a": "${nope}"}, registry=registry)
        assert engine.resolve_key("a") == "<missing nope>"

    def test_registries_are_independent(self):
        first = build_default_registry()
        second = build_default_registry()
        first.register(ErrorKind.KEY_NOT_FOUND, lambda error, engine: "x")
        assert second.get(ErrorKind.KEY_NOT_FOUND) is array_join_handler


class TestParseJoin:
    """Tests for parse_join()."""

    def test_plain_separator(self):
        assert parse_join("list.join(-)") == ("list", "-")

    def test_quoted_separator(self):
        assert parse_join("list.join(', ')") == ("list", ", ")
        assert parse_join('list.join(" ")') == ("list", " ")

    def test_control_characters_removed(self):
        assert parse_join("list.join(\t;\n)") == ("list", ";")

    def test_empty_separator(self):
        assert parse_join("build.args.join()") == ("build.args", "")

    def test_not_a_join(self):
        assert parse_join("build.args") is None
        assert parse_join("join(-)") is None


class TestArrayJoinHandler:
    """Tests for array_join_handler()."""

    def test_joins_elements(self):
        engine = make_engine({"list": ["a", "b", "c"]})
        assert array_join_handler(KeyNotFoundError("list.join(-)"), engine) == "a-b-c"

    def test_skips_empty_strings_renders_null(self):
        engine = make_engine({"list": ["a", "", None, "b"]})
        assert array_join_handler(KeyNotFoundError("list.join(,)"), engine) == "a,null,b"

    @pytest.mark.parametrize("element", [{"b": 1}, ["b"], {}, []])
    def test_non_scalar_element_reraises_original(self, element):
        error = KeyNotFoundError("list.join(-)")
        with pytest.raises(KeyNotFoundError) as exc_info:
            array_join_handler(error, make_engine({"list": ["a", element]}))
        assert exc_info.value is error

    def test_other_error_kinds_reraised(self):
        error = EnvVarMissingError("HOME")
        with pytest.raises(EnvVarMissingError) as exc_info:
            array_join_handler(error, make_engine({"list": ["a"]}))
        assert exc_info.value is error

    def test_non_string_elements(self):
        engine = make_engine({"ports": [80, 443, True]})
        assert array_join_handler(KeyNotFoundError("ports.join(:)"), engine) == "80:443:true"

    def test_resolves_element_placeholders(self):
        engine = make_engine({"name": "app", "tags": ["${name}:latest", "${name}:1.0"]})
        assert array_join_handler(KeyNotFoundError("tags.join( )"), engine) == "app:latest app:1.0"

    def test_not_a_join_reraises_original(self):
        error = KeyNotFoundError("missing.key")
        with pytest.raises(KeyNotFoundError) as exc_info:
            array_join_handler(error, make_engine({"a": 1}))
        assert exc_info.value is error

    def test_missing_array_reraises_original(self):
        error = KeyNotFoundError("nothing.join(-)")
        with pytest.raises(KeyNotFoundError) as exc_info:
            array_join_handler(error, make_engine({"a": 1}))
        assert exc_info.value is error

    def test_empty_array_reraises(self):
        with pytest.raises(KeyNotFoundError):
            array_join_handler(KeyNotFoundError("list.join(-)"), make_engine({"list": []}))


class TestCircularDependencyHandler:
    """Tests for circular_dependency_handler()."""

    def test_logs_report_and_reraises(self, caplog):
        error = CircularDependencyError("a", ["a", "b"])
        with caplog.at_level(logging.ERROR, logger="jresolve"):
            with pytest.raises(CircularDependencyError):
                circular_dependency_handler(error, make_engine({}))
        assert "BACK-REFERENCE" in caplog.text
        assert "1. ${a}" in caplog.text
        assert "2. ${b}" in caplog.text

    def test_other_error_kinds_reraised_without_report(self, caplog):
        error = KeyNotFoundError("a")
        with caplog.at_level(logging.ERROR, logger="jresolve"):
            with pytest.raises(KeyNotFoundError):
                circular_dependency_handler(error, make_engine({}))
        assert "BACK-REFERENCE" not in caplog.text
