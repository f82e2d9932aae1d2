"""Tests for the outline helpers and scan scopes."""

import pytest

from org_annotate.buffer import OrgBuffer
from org_annotate.errors import OutlineError
from org_annotate.outline import (
    find_heading,
    heading_at,
    heading_ordinal,
    iter_headings,
    subtree_bounds,
)
from org_annotate.scanner import scan
from org_annotate.scope import Scope

DOC = (
    "Intro text\n"
    "* One\n"
    "A [[note:a][x]]\n"
    "** Sub\n"
    "B [[note:b]]\n"
    "* Two :work:\n"
    "C [[note:c][y]]\n"
)


class TestOutline:
    """Tests for heading discovery."""

    def test_iter_headings(self):
        """Headings are found with their level, tags removed."""
        headings = list(iter_headings(DOC))
        assert [h.title for h in headings] == ["One", "Sub", "Two"]
        assert [h.level for h in headings] == [1, 2, 1]
        assert headings[0].begin == DOC.index("* One")

    def test_bold_text_is_not_a_heading(self):
        """Stars need a following blank to start a heading."""
        assert list(iter_headings("*bold* text\n")) == []

    def test_heading_at(self):
        """The nearest heading above an offset owns it."""
        assert heading_at(DOC, DOC.index("A [[")).title == "One"
        assert heading_at(DOC, DOC.index("B [[")).title == "Sub"

    def test_heading_at_before_first_heading(self):
        """Text before the first heading has no subtree."""
        with pytest.raises(OutlineError, match="before the first heading"):
            heading_at(DOC, 0)

    def test_subtree_includes_children(self):
        """A subtree runs to the next heading at or above its level."""
        start, end = subtree_bounds(DOC, DOC.index("A [["))
        assert start == DOC.index("* One")
        assert end == DOC.index("* Two")

    def test_child_subtree(self):
        """A child subtree stops at the parent's next sibling."""
        start, end = subtree_bounds(DOC, DOC.index("B [["))
        assert DOC[start:end] == "** Sub\nB [[note:b]]\n"

    def test_last_subtree_runs_to_end(self):
        """The last subtree ends with the document."""
        _, end = subtree_bounds(DOC, DOC.index("C [["))
        assert end == len(DOC)

    def test_find_heading_missing(self):
        """A missing title lists the available headings."""
        with pytest.raises(OutlineError) as exc_info:
            find_heading(DOC, "Three")
        assert "Available headings: One, Sub, Two" in str(exc_info.value)

    def test_heading_ordinal(self):
        """Headings are numbered among those with the same title."""
        doc = "* Tasks\n** Tasks\n* Done\n* Tasks\n"
        headings = list(iter_headings(doc))
        assert [heading_ordinal(doc, h) for h in headings] == [0, 1, 0, 2]


class TestScope:
    """Tests for Scope."""

    def test_parse_none_is_whole_document(self):
        """No specification means the whole document."""
        buf = OrgBuffer(DOC)
        scope = Scope.parse(buf, None)
        assert scope.is_whole
        assert scope.key is None
        assert scope.bounds(buf) == (0, len(DOC))
        assert scope.describe() == "whole document"

    def test_parse_section(self):
        """A "section:" specification selects a subtree by title."""
        buf = OrgBuffer(DOC)
        scope = Scope.parse(buf, "section:Sub")
        assert scope.key == ("Sub", 0)
        start, end = scope.bounds(buf)
        assert DOC[start:end] == "** Sub\nB [[note:b]]\n"
        assert scope.describe() == "subtree 'Sub'"

    def test_parse_offset(self):
        """An offset selects the subtree containing it."""
        buf = OrgBuffer(DOC)
        scope = Scope.parse(buf, DOC.index("C [["))
        assert scope.key == ("Two", 0)

    def test_parse_invalid(self):
        """Unknown specifications raise ValueError."""
        buf = OrgBuffer(DOC)
        with pytest.raises(ValueError, match="Invalid scope"):
            Scope.parse(buf, "chapter:One")
        with pytest.raises(ValueError):
            Scope.parse(buf, 3.5)

    def test_bounds_follow_edits(self):
        """The subtree region is re-derived from the current text."""
        buf = OrgBuffer(DOC)
        scope = Scope.section(buf, "Two")
        buf.replace(0, 0, "#+TITLE: t\n")
        start, end = scope.bounds(buf)
        assert buf.text[start:end].startswith("* Two")
        assert end == len(buf)

    def test_bounds_grow_with_subtree(self):
        """Text added inside the subtree is part of it."""
        buf = OrgBuffer(DOC)
        scope = Scope.section(buf, "One")
        buf.replace(DOC.index("A [["), DOC.index("A [["), "new line\n")
        start, end = scope.bounds(buf)
        assert "new line" in buf.text[start:end]
        assert buf.text[end:].startswith("* Two")

    def test_insertion_before_heading_keeps_subtree(self):
        """Text inserted right before the heading line does not move the scope."""
        doc = "* A\n[[note:a]]\n* B\n[[note:b]]\n"
        buf = OrgBuffer(doc)
        scope = Scope.subtree_at(buf, doc.index("* B"))
        buf.replace(doc.index("* B"), doc.index("* B"), "more A text\n")
        start, end = scope.bounds(buf)
        assert buf.text[start:end] == "* B\n[[note:b]]\n"
        assert [m.body for m in scan(buf, scope)] == ["b"]

    def test_repeated_titles_are_distinct(self):
        """Subtrees sharing a title get different keys."""
        doc = "* Notes\n[[note:a]]\n* Other\n* Notes\n[[note:b]]\n"
        buf = OrgBuffer(doc)
        first = Scope.subtree_at(buf, 0)
        second = Scope.subtree_at(buf, doc.rindex("* Notes"))
        assert first.key == ("Notes", 0)
        assert second.key == ("Notes", 1)
        assert Scope.section(buf, "Notes").key == first.key
