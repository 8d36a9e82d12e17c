"""Tests for revision gating and revision comparison."""

from types import SimpleNamespace

from projecthub.application.services.wiki_revision_service import (
    compare_revisions,
    should_create_revision,
)


class TestShouldCreateRevision:
    def test_unchanged(self) -> None:
        assert should_create_revision("Home", "hello", "Home", "hello") is False

    def test_title_change(self) -> None:
        assert should_create_revision("Home", "hello", "Start", "hello") is True

    def test_any_content_change(self) -> None:
        assert should_create_revision("Home", "hello", "Home", "hello!") is True

    def test_none_equals_empty(self) -> None:
        assert should_create_revision("Home", None, "Home", "") is False


def test_compare_revisions() -> None:
    """Line and size differences are reported old -> new."""
    old = SimpleNamespace(title="Home", content="one\ntwo")
    new = SimpleNamespace(title="Home", content="one\nthree four")
    diff = compare_revisions(old, new)
    assert diff["title_changed"] is False
    assert diff["content_changed"] is True
    assert diff["added_lines"] == ["three four"]
    assert diff["removed_lines"] == ["two"]
    assert diff["character_diff"] == len("one\nthree four") - len("one\ntwo")
    assert diff["word_diff"] == 1
