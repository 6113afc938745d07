"""Unit tests for domain models."""

import re

import pytest

from hopper.errors import InvalidPatternError
from hopper.models import (
    AtBoundary,
    Direction,
    Found,
    HopResult,
    InstanceDef,
    LiteralPattern,
    NoMatch,
    PlacementRule,
    RegexPattern,
    name_problem,
)


class TestLiteralPattern:
    def test_duplicates_removed_keeping_first_position(self):
        """
        Given literal strings with a repeat
        When a LiteralPattern is constructed
        Then the repeat is dropped and the original order kept
        """
        pattern = LiteralPattern(("foo", "bar", "foo", "baz"))
        assert pattern.strings == ("foo", "bar", "baz")

    def test_empty_strings_dropped(self):
        """
        Given a mix of empty and non-empty strings
        When a LiteralPattern is constructed
        Then only the non-empty strings remain
        """
        assert LiteralPattern(("", "foo", "")).strings == ("foo",)

    def test_all_empty_raises(self):
        """
        Given only empty strings
        When a LiteralPattern is constructed
        Then InvalidPatternError is raised
        """
        with pytest.raises(InvalidPatternError):
            LiteralPattern(("", ""))

    def test_no_strings_raises(self):
        """
        Given no strings at all
        When a LiteralPattern is constructed
        Then InvalidPatternError is raised
        """
        with pytest.raises(InvalidPatternError):
            LiteralPattern(())

    def test_regex_escapes_metacharacters(self):
        """
        Given a literal containing regex metacharacters
        When converted to a regex
        Then the metacharacters match literally
        """
        regex = LiteralPattern(("a.b", "(x)")).to_regex()
        assert re.search(regex, "a.b")
        assert not re.search(regex, "axb")
        assert re.search(regex, "(x)")

    def test_longer_literal_wins_over_prefix(self):
        """
        Given literals where one is a prefix of another
        When the alternation matches at a position where both apply
        Then the longer literal is matched
        """
        regex = LiteralPattern(("foo", "foobar")).to_regex()
        assert re.match(regex, "foobar").group() == "foobar"


class TestRegexPattern:
    def test_used_as_is(self):
        assert RegexPattern("foo|bar").to_regex() == "foo|bar"

    def test_empty_raises(self):
        """
        Given an empty regular expression
        When a RegexPattern is constructed
        Then InvalidPatternError is raised
        """
        with pytest.raises(InvalidPatternError):
            RegexPattern("")


class TestPlacementRule:
    @pytest.mark.parametrize("label", ["natural", "start", "end"])
    def test_label_round_trips(self, label):
        assert PlacementRule.from_label(label).label == label

    def test_unknown_label_raises(self):
        with pytest.raises(ValueError, match="middle"):
            PlacementRule.from_label("middle")

    def test_natural_lands_on_end_forward_and_start_backward(self):
        """
        Given the natural placement
        When asking where a hop leaves the cursor
        Then forward hops end on a match end and backward hops on a match start
        """
        rule = PlacementRule.natural()
        assert rule.lands_on_start(Direction.FORWARD) is False
        assert rule.lands_on_start(Direction.BACKWARD) is True

    def test_adjusted_placement_ignores_direction(self):
        assert PlacementRule.start().lands_on_start(Direction.BACKWARD) is True
        assert PlacementRule.start().lands_on_start(Direction.FORWARD) is True
        assert PlacementRule.end().lands_on_start(Direction.FORWARD) is False
        assert PlacementRule.end().lands_on_start(Direction.BACKWARD) is False


class TestInstanceDef:
    def test_empty_name_raises(self):
        with pytest.raises(InvalidPatternError):
            InstanceDef(name="", pattern=RegexPattern("x"))

    def test_default_placement_is_natural(self):
        assert InstanceDef("x", RegexPattern("x")).placement == PlacementRule.natural()

    def test_describe_literal(self):
        instance = InstanceDef("kw", LiteralPattern(("foo", "bar")), PlacementRule.end())
        assert instance.describe() == "literal ['foo', 'bar'] · end"

    def test_describe_regex(self):
        instance = InstanceDef("todo", RegexPattern("TODO|FIXME"))
        assert instance.describe() == "regex /TODO|FIXME/ · natural"


class TestNameProblem:
    @pytest.mark.parametrize("name", ["todo", "two words", "x-1"])
    def test_accepts_plain_names(self, name):
        assert name_problem(name) is None

    @pytest.mark.parametrize("name", ["", "   "])
    def test_blank_names(self, name):
        assert name_problem(name) == "Name cannot be blank"

    @pytest.mark.parametrize("name", [" x", "x ", "\tx"])
    def test_surrounding_whitespace_is_refused(self, name):
        assert "whitespace" in name_problem(name)


class TestHopResultMessage:
    def test_found(self):
        result = HopResult("todo", 10, Found(index=3, total=7))
        assert result.message == "todo: instance 3 of 7"
        assert result.moved is True

    def test_at_boundary(self):
        result = HopResult("todo", 10, AtBoundary(which="last", total=7))
        assert result.message == "todo: this is the last instance (7/7)"
        assert result.moved is False

    def test_no_match_backward(self):
        result = HopResult("todo", 0, NoMatch(direction=Direction.BACKWARD, total=7))
        assert result.message == "todo: no previous instance (total 7)"
