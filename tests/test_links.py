"""Tests for the Org bracket-link grammar."""

from org_annotate.links import (
    ZERO_WIDTH_SPACE,
    escape_link,
    link_at,
    make_link,
    parse_links,
    restore_description,
    unescape_link,
)


class TestParseLinks:
    """Tests for finding links in text."""

    def test_link_with_description(self):
        """A [[target][description]] link is found with its bounds."""
        text = "See [[https://orgmode.org][the site]] now."
        links = list(parse_links(text))
        assert len(links) == 1
        link = links[0]
        assert link.target == "https://orgmode.org"
        assert link.description == "the site"
        assert link.begin == 4
        assert text[link.begin : link.end] == "[[https://orgmode.org][the site]]"
        assert text[link.contents_begin : link.contents_end] == "the site"

    def test_link_without_description(self):
        """A [[target]] link has no description."""
        links = list(parse_links("Open [[file:notes.org]]"))
        assert len(links) == 1
        assert links[0].target == "file:notes.org"
        assert links[0].description is None
        assert links[0].contents_begin is None

    def test_links_in_document_order(self):
        """Several links are yielded top to bottom."""
        text = "[[a]] text [[b][B]]\nmore [[c]]"
        assert [link.target for link in parse_links(text)] == ["a", "b", "c"]

    def test_escaped_brackets_in_target(self):
        """Backslash-escaped brackets stay inside the target."""
        text = r"x [[note:see \[1\]][ref]] y"
        links = list(parse_links(text))
        assert len(links) == 1
        assert links[0].target == r"note:see \[1\]"
        assert links[0].path == "note:see [1]"
        assert links[0].description == "ref"

    def test_description_may_span_one_newline(self):
        """A description can wrap onto the next line."""
        links = list(parse_links("[[note:x][one\ntwo]]"))
        assert len(links) == 1
        assert links[0].description == "one\ntwo"

    def test_description_cannot_span_blank_line(self):
        """A blank line ends the paragraph, so no link is formed."""
        assert list(parse_links("[[note:x][one\n\ntwo]]")) == []

    def test_description_cannot_span_list_items(self):
        """A link cannot straddle two sibling list items."""
        assert list(parse_links("- [[note:x][one\n- two]]")) == []

    def test_description_cannot_span_heading(self):
        """A link cannot continue onto a heading line."""
        assert list(parse_links("[[note:x][one\n* Heading]]")) == []

    def test_target_cannot_span_lines(self):
        """Link targets are single-line."""
        assert list(parse_links("[[note:one\ntwo]]")) == []

    def test_post_blank(self):
        """Spaces and tabs after the link are counted."""
        links = list(parse_links("[[a][b]] \t next"))
        assert links[0].post_blank == 3

    def test_post_blank_stops_at_newline(self):
        """A newline is not counted as trailing blank."""
        links = list(parse_links("[[a][b]]\nnext"))
        assert links[0].post_blank == 0

    def test_region_restriction(self):
        """Only links inside the region are found."""
        text = "[[a]] [[b]] [[c]]"
        assert [link.target for link in parse_links(text, 6, 11)] == ["b"]

    def test_single_brackets_are_not_links(self):
        """Ordinary brackets are not mistaken for links."""
        assert list(parse_links("a [b] c [d][e]")) == []


class TestLinkAt:
    """Tests for finding the link under a position."""

    def test_on_link(self):
        """Any offset from the opening bracket to the last char matches."""
        text = "x [[a][b]] y"
        assert link_at(text, 2).target == "a"
        assert link_at(text, 9).target == "a"

    def test_outside_link(self):
        """Offsets before and after the link find nothing."""
        text = "x [[a][b]] y"
        assert link_at(text, 0) is None
        assert link_at(text, 10) is None

    def test_second_link(self):
        """The link covering the offset is returned, not the first one."""
        text = "[[a]] [[b]]"
        assert link_at(text, 7).target == "b"


class TestEscaping:
    """Tests for link target escaping."""

    def test_escape_brackets(self):
        """Brackets get a backslash."""
        assert escape_link("see [1]") == r"see \[1\]"

    def test_escape_plain_text_unchanged(self):
        """Text without brackets or trailing backslashes is unchanged."""
        assert escape_link("plain text") == "plain text"

    def test_escape_trailing_backslash(self):
        """A trailing backslash is doubled so it cannot escape the closing bracket."""
        assert escape_link("dir\\") == "dir\\\\"

    def test_escape_backslash_before_bracket(self):
        """Backslashes before a bracket are doubled, then the bracket escaped."""
        assert escape_link("x\\[y") == "x\\\\\\[y"

    def test_inner_backslash_unchanged(self):
        """Backslashes not next to a bracket or the end stay as they are."""
        assert escape_link("a\\b") == "a\\b"

    def test_unescape_reverses_escape(self):
        """Unescaping restores the original target."""
        for target in ["see [1]", "dir\\", "x\\[y", "a\\b", "]]", "[[nested]]"]:
            assert unescape_link(escape_link(target)) == target


class TestMakeLink:
    """Tests for building link strings."""

    def test_with_description(self):
        """Target and description are bracketed."""
        assert make_link("note:hi", "word") == "[[note:hi][word]]"

    def test_without_description(self):
        """No description gives a [[target]] link."""
        assert make_link("note:hi") == "[[note:hi]]"

    def test_empty_description_is_omitted(self):
        """An empty description is treated as none."""
        assert make_link("note:hi", "") == "[[note:hi]]"

    def test_target_is_escaped(self):
        """Brackets in the target are escaped."""
        assert make_link("note:see [1]") == r"[[note:see \[1\]]]"

    def test_description_with_double_bracket(self):
        """A "]]" in the description cannot close the link early."""
        link = make_link("note:x", "a]]b")
        assert ZERO_WIDTH_SPACE in link
        parsed = list(parse_links(link))
        assert len(parsed) == 1
        assert parsed[0].end == len(link)
        assert restore_description(parsed[0].description) == "a]]b"

    def test_description_ending_with_bracket(self):
        """A trailing "]" in the description is broken up too."""
        link = make_link("note:x", "see [2]")
        parsed = list(parse_links(link))
        assert parsed[0].end == len(link)
        assert restore_description(parsed[0].description) == "see [2]"

    def test_made_link_parses_back(self):
        """A built link parses back to the same target."""
        link = make_link("note:dir\\ and [x]", "text")
        parsed = list(parse_links(link))
        assert len(parsed) == 1
        assert parsed[0].path == "note:dir\\ and [x]"
