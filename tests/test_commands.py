"""Tests for the user-facing annotation commands."""

import logging

import pytest

from org_annotate.buffer import OrgBuffer
from org_annotate.commands import AnnotationCommands
from org_annotate.config import AnnotateConfig
from org_annotate.errors import NotAMarkerError
from org_annotate.models.marker import MarkerKind
from org_annotate.scope import Scope

SCENARIO = "Some [[note:remember this][important]] text."


class TestEditingCommands:
    """Tests for insert, edit and delete."""

    def test_insert_comment(self):
        """The configured kind selects the link prefix."""
        commands = AnnotationCommands(AnnotateConfig(kind=MarkerKind.COMMENT))
        buf = OrgBuffer("Check the totals.")
        buf.set_region(10, 16)
        commands.insert(buf, "they do not add up")
        assert buf.text == "Check the [[comment:they do not add up][totals]]."

    def test_delete(self):
        """delete() restores the displayed text."""
        buf = OrgBuffer(SCENARIO)
        AnnotationCommands().delete(buf, 5)
        assert buf.text == "Some important text."

    def test_delete_other_kind(self):
        """The note commands do not touch comments."""
        buf = OrgBuffer("[[comment:c][t]]")
        with pytest.raises(NotAMarkerError):
            AnnotationCommands().delete(buf, 0)
        assert buf.text == "[[comment:c][t]]"

    def test_edit(self):
        """edit() rewrites the link through the editor."""
        buf = OrgBuffer(SCENARIO)
        AnnotationCommands().edit(buf, lambda target, text: ("note:forget it", text), 5)
        assert buf.text == "Some [[note:forget it][important]] text."


class TestListCommands:
    """Tests for the list view commands."""

    def test_list(self):
        """list() opens a view with the rows."""
        commands = AnnotationCommands()
        buf = OrgBuffer(SCENARIO)
        state = commands.list(buf)
        assert state.entries() == [("important", "remember this")]
        assert commands.views.get(buf) is state

    def test_list_empty(self, caplog):
        """An empty list reports a status message and opens nothing."""
        caplog.set_level(logging.INFO, logger="org_annotate.commands")
        commands = AnnotationCommands()
        buf = OrgBuffer("no annotations")
        assert commands.list(buf) is None
        assert "No notes found in whole document" in caplog.text
        assert len(commands.views) == 0

    def test_list_subtree_empty(self, caplog):
        """The status message names the subtree."""
        caplog.set_level(logging.INFO, logger="org_annotate.commands")
        buf = OrgBuffer("* Empty\ntext\n* Full\n[[note:x]]\n")
        assert AnnotationCommands().list(buf, Scope.section(buf, "Empty")) is None
        assert "subtree 'Empty'" in caplog.text

    def test_delete_row(self):
        """Deleting from the list refreshes it; the last deletion closes it."""
        commands = AnnotationCommands()
        buf = OrgBuffer("[[note:a][A]] and [[note:b][B]]")
        state = commands.list(buf)

        state = commands.delete_row(state, 0)
        assert state.entries() == [("B", "b")]
        assert buf.text == "A and [[note:b][B]]"

        assert commands.delete_row(state, 0) is None
        assert buf.text == "A and B"
        assert len(commands.views) == 0

    def test_export_list_as_table(self):
        """The list exports as an Org table."""
        table = AnnotationCommands().export_list_as_table(OrgBuffer(SCENARIO))
        assert table == "| important | remember this |\n"

    def test_export_list_as_table_empty(self):
        """Nothing to list gives an empty table."""
        assert AnnotationCommands().export_list_as_table(OrgBuffer("")) == ""


class TestFollowAndExport:
    """Tests for following and exporting annotations."""

    def test_follow_shows_popup(self):
        """Following an annotation shows its body."""
        commands = AnnotationCommands()
        marker = commands.follow(OrgBuffer(SCENARIO), 10)
        assert marker.body == "remember this"
        assert commands.popup.visible
        assert commands.popup.content == "remember this"

    def test_follow_off_marker(self):
        """Following plain text fails without showing the popup."""
        commands = AnnotationCommands()
        with pytest.raises(NotAMarkerError):
            commands.follow(OrgBuffer(SCENARIO), 0)
        assert not commands.popup.visible

    def test_export(self):
        """export() renders the buffer for a backend."""
        result = AnnotationCommands().export(OrgBuffer(SCENARIO), "latex")
        assert result == "Some important\\marginpar{\\footnotesize remember this} text."

    def test_export_configured_author(self):
        """The configured author reaches document comments."""
        commands = AnnotationCommands(AnnotateConfig(author="Ann"))
        result = commands.export(OrgBuffer(SCENARIO), "odt")
        assert "<dc:creator>Ann</dc:creator>" in result
