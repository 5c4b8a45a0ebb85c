"""Unit tests for the pattern compiler."""

import re

import pytest

from config.extraction_config import EXTRACTION_CONFIG
from services.errors import PatternConfigError
from services.rules.pattern_compiler import (
    JoinType,
    PatternGroup,
    compile_pattern,
    default_separator,
    parse_pattern,
)


class TestJoins:
    """Tests for each join type."""

    def test_string_is_returned_unescaped(self):
        """Test that string leaves are regex source, never escaped."""
        assert compile_pattern(r"Net Pay \| (?P<net>\d+)") == r"Net Pay \| (?P<net>\d+)"

    def test_none_join(self):
        """Test join none concatenates."""
        assert compile_pattern({"join": "none", "values": ["a", "b"]}) == "ab"

    def test_space_join(self):
        """Test join space."""
        assert compile_pattern({"join": "space", "values": ["a", "b"]}) == "a b"

    def test_any_text_join(self):
        """Test join any-text inserts a lazy wildcard."""
        assert compile_pattern({"join": "any-text", "values": ["a", "b"]}) == "a.*?b"

    def test_line_separator_join_uses_escaped_column_delimiter(self):
        """Test join line-separator uses the escaped ' | ' delimiter."""
        assert compile_pattern({"join": "line-separator", "values": ["a", "b"]}) == r"a \| b"
        assert default_separator() == r" \| "

    def test_separator_escapes_only_metacharacters(self, monkeypatch):
        """Test spaces stay literal while regex metacharacters are escaped."""
        monkeypatch.setitem(EXTRACTION_CONFIG["text_layout"], "line_element_separator", " . ( ")
        assert default_separator() == r" \. \( "
        assert re.fullmatch(compile_pattern(["a", "b"]), "a . ( b")

    def test_literal_join(self):
        """Test join_string gives a literal join."""
        assert compile_pattern({"join_string": "--", "values": ["a", "b", "c"]}) == "a--b--c"

    def test_top_level_list_defaults_to_line_separator(self):
        """Test a bare list joins with the column delimiter."""
        assert compile_pattern(["Taxes", "Amount", "YTD"]) == r"Taxes \| Amount \| YTD"

    def test_custom_separator(self):
        """Test an explicit separator overrides the configured one."""
        assert compile_pattern(["a", "b"], separator=";") == "a;b"

    def test_empty_values(self):
        """Test an empty composite compiles to the empty string."""
        assert compile_pattern({"join": "any-text", "values": []}) == ""

    def test_legacy_spellings(self):
        """Test join_type key with any / line-element aliases."""
        assert compile_pattern({"join_type": "any", "values": ["a", "b"]}) == "a.*?b"
        assert compile_pattern({"join_type": "line-element", "values": ["a", "b"]}) == r"a \| b"


class TestNesting:
    """Tests for join inheritance through nested nodes."""

    def test_nested_list_inherits_parent_join(self):
        """Test a list inside a composite uses the composite's join."""
        node = {"join": "any-text", "values": [["a", "b"], "c"]}
        assert compile_pattern(node) == "a.*?b.*?c"

    def test_nested_composite_uses_own_join(self):
        """Test a composite inside a composite keeps its own join."""
        node = {"join": "none", "values": ["^(?:", {"join": "line-separator", "values": ["Taxes", ""]}, ")?"]}
        assert compile_pattern(node) == r"^(?:Taxes \| )?"

    def test_composite_without_join_inherits(self):
        """Test a composite that declares no join inherits the enclosing one."""
        node = {"join": "space", "values": [{"values": ["a", "b"]}, "c"]}
        assert compile_pattern(node) == "a b c"

    def test_deterministic(self):
        """Test compiling the same tree twice gives the same string."""
        node = parse_pattern({"join": "any-text", "values": [["x", {"join": "none", "values": ["y", "z"]}]]})
        assert compile_pattern(node) == compile_pattern(node)


class TestParsePattern:
    """Tests for converting JSON shapes into pattern nodes."""

    def test_list_becomes_tuple(self):
        """Test lists become immutable tuples."""
        assert parse_pattern(["a", ["b"]]) == ("a", ("b",))

    def test_dict_becomes_group(self):
        """Test composites become PatternGroup values."""
        node = parse_pattern({"join": "space", "values": ["a"]})
        assert node == PatternGroup(values=("a",), join=JoinType.SPACE)

    def test_join_string_implies_literal(self):
        """Test join_string sets a literal join."""
        node = parse_pattern({"join_string": ",", "values": []})
        assert node.join == JoinType.LITERAL
        assert node.join_string == ","


class TestInvalidPatterns:
    """Tests for malformed pattern nodes."""

    @pytest.mark.parametrize("node", [42, None, 1.5, True])
    def test_non_pattern_values_raise(self, node):
        """Test scalars other than strings are rejected."""
        with pytest.raises(PatternConfigError):
            compile_pattern(node)

    def test_unknown_join(self):
        """Test an unknown join name is rejected."""
        with pytest.raises(PatternConfigError):
            parse_pattern({"join": "sideways", "values": ["a"]})

    def test_missing_values(self):
        """Test a composite without values is rejected."""
        with pytest.raises(PatternConfigError):
            parse_pattern({"join": "none"})

    def test_literal_without_join_string(self):
        """Test a literal join needs its join_string."""
        with pytest.raises(PatternConfigError):
            parse_pattern({"join": "literal", "values": ["a"]})

    def test_unexpected_keys(self):
        """Test unknown composite keys are rejected."""
        with pytest.raises(PatternConfigError):
            parse_pattern({"values": ["a"], "glue": "+"})

    def test_invalid_child(self):
        """Test an invalid node nested in a list is rejected."""
        with pytest.raises(PatternConfigError):
            compile_pattern(["a", 3])
