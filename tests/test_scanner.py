"""
Tests for placeholder recognition.
"""

from jresolve.core.scanner import (
    INTERNAL_KINDS,
    PlaceholderKind,
    find_all,
    has_placeholder,
    scan,
)


class TestScan:
    """Tests for scan()."""

    def test_json_ref(self):
        p = scan("prefix ${build.tags} suffix")
        assert p.kind is PlaceholderKind.JSON_REF
        assert p.payload == "build.tags"
        assert p.text == "${build.tags}"
        assert (p.start, p.end) == (7, 20)

    def test_shell_command(self):
        p = scan("v$(git rev-parse HEAD)")
        assert p.kind is PlaceholderKind.SHELL_COMMAND
        assert p.payload == "git rev-parse HEAD"

    def test_env_var(self):
        p = scan("$HOME/bin")
        assert p.kind is PlaceholderKind.ENV_VAR
        assert p.payload == "HOME"

    def test_env_var_name_grammar(self):
        assert scan("$_private1x").payload == "_private1x"
        assert scan("$1abc") is None

    def test_priority_json_ref_first(self):
        p = scan("$HOME $(date) ${name}")
        assert p.kind is PlaceholderKind.JSON_REF

    def test_priority_shell_before_env(self):
        p = scan("$HOME $(date)")
        assert p.kind is PlaceholderKind.SHELL_COMMAND

    def test_leftmost_within_kind(self):
        assert scan("${a} ${b}").payload == "a"

    def test_nested_json_ref_innermost_first(self):
        assert scan("${env.${stage}.url}").payload == "stage"

    def test_nested_shell_innermost_first(self):
        assert scan("$(echo $(whoami))").payload == "whoami"

    def test_shell_command_with_parentheses(self):
        p = scan("v$(python -c 'print(1)') end")
        assert p.payload == "python -c 'print(1)'"
        assert p.text == "$(python -c 'print(1)')"
        assert p.end == len("v$(python -c 'print(1)')")

    def test_shell_command_with_quoted_parentheses(self):
        assert scan('$(echo "(x)")').payload == 'echo "(x)"'

    def test_nested_shell_with_parentheses(self):
        assert scan("$(echo $(printf '(%s)' a))").payload == "printf '(%s)' a"

    def test_unterminated_shell_is_text(self):
        assert scan("$(echo") is None
        assert scan("$(echo $(date)").payload == "date"

    def test_empty_shell_is_text(self):
        assert scan("$()") is None

    def test_join_expression_payload(self):
        assert scan("${list.join(-)}").payload == "list.join(-)"

    def test_no_placeholder(self):
        assert scan("price is $5") is None
        assert scan("plain text") is None

    def test_restricted_kinds(self):
        assert scan("$HOME", INTERNAL_KINDS) is None


class TestHasPlaceholder:
    """Tests for has_placeholder()."""

    def test_strings(self):
        assert has_placeholder("${a}")
        assert has_placeholder("$A")
        assert not has_placeholder("no markers")
        assert not has_placeholder("$")

    def test_non_strings(self):
        assert not has_placeholder(42)
        assert not has_placeholder(None)

    def test_internal_only(self):
        assert not has_placeholder("$(date)", INTERNAL_KINDS)


class TestFindAll:
    """Tests for find_all()."""

    def test_ordered_by_position(self):
        kinds = [p.kind for p in find_all("$A ${b} $(c)")]
        assert kinds == [PlaceholderKind.ENV_VAR, PlaceholderKind.JSON_REF, PlaceholderKind.SHELL_COMMAND]

    def test_splice(self):
        text = "a ${x} b"
        p = scan(text)
        assert p.splice(text, "X") == "a X b"

    def test_nested_commands_innermost_only(self):
        found = find_all("$(echo $(whoami)) $(date)")
        assert [p.payload for p in found] == ["whoami", "date"]
