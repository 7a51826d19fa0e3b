"""Unit tests for the todo.txt record and project path models."""

import pytest
from datetime import date
from pydantic import ValidationError
from todotree.models import (
    Priority, TodoItem, TodoResponse, ProjectPath, ProjectNode, PROJECT_SEPARATOR
)


class TestParse:
    """Test parsing single todo.txt lines."""

    def test_priority_and_tags(self):
        """Test a pending line with priority, context and project."""
        item = TodoItem.parse("(A) Buy milk @shopping +home---errands")
        assert item.finished is False
        assert item.priority == "A"
        assert item.subject == "Buy milk @shopping +home---errands"
        assert item.contexts == ["shopping"]
        assert item.projects == ["home---errands"]

    def test_completed_line(self):
        """Test a completed line without dates."""
        item = TodoItem.parse("x Clean desk @home")
        assert item.finished is True
        assert item.priority is None
        assert item.contexts == ["home"]
        assert item.projects == []
        assert item.subject == "Clean desk @home"

    def test_completed_with_dates(self):
        """Test completion date followed by creation date."""
        item = TodoItem.parse("x 2024-03-02 2024-03-01 Pay bills")
        assert item.finished
        assert item.finish_date == date(2024, 3, 2)
        assert item.create_date == date(2024, 3, 1)
        assert item.subject == "Pay bills"

    def test_completed_with_single_date(self):
        """A single date after the marker is the completion date."""
        item = TodoItem.parse("x 2024-03-02 Pay bills")
        assert item.finish_date == date(2024, 3, 2)
        assert item.create_date is None

    def test_pending_with_creation_date(self):
        """Test priority followed by a creation date."""
        item = TodoItem.parse("(B) 2024-01-15 Write report +work")
        assert item.priority == "B"
        assert item.create_date == date(2024, 1, 15)
        assert item.subject == "Write report +work"

    def test_completed_line_ignores_priority_marker(self):
        """Priority markers are only recognized on pending lines."""
        item = TodoItem.parse("x (A) Done thing")
        assert item.finished
        assert item.priority is None
        assert item.subject == "(A) Done thing"

    def test_completed_priority_tag(self):
        """A pri: tag on a completed line is read back as the priority."""
        item = TodoItem.parse("x 2024-03-02 Ship it +work pri:C")
        assert item.priority == "C"
        assert item.subject == "Ship it +work"

    def test_duplicate_tags_preserved(self):
        """Test duplicates are kept in first-seen order."""
        item = TodoItem.parse("Plan @home +a @work +b @home +a")
        assert item.contexts == ["home", "work", "home"]
        assert item.projects == ["a", "b", "a"]

    def test_malformed_markers_fold_into_subject(self):
        """Test that partial or malformed markers never fail parsing."""
        cases = {
            "(a) lowercase priority": None,
            "(AB) two letters": None,
            "(A)no space": None,
            "xylophone lessons": None,
            "2024-13-45 not a date": None,
        }
        for line in cases:
            item = TodoItem.parse(line)
            assert item.subject == line
            assert item.priority is None
            assert item.finished is False
            assert item.create_date is None

    def test_bare_markers_are_not_tags(self):
        """Test a lone @ or + is not a tag."""
        item = TodoItem.parse("Compare a + b @ noon me@example.com")
        assert item.contexts == []
        assert item.projects == []

    def test_key_value_tags(self):
        """Test key:value tokens are exposed but urls are not."""
        item = TodoItem.parse("Renew passport due:2024-06-01 see https://example.com")
        assert item.tags == {"due": "2024-06-01"}

    def test_whitespace_trimmed(self):
        """Test surrounding whitespace is dropped but inner spacing kept."""
        item = TodoItem.parse("  (C)  Call   mom  \n")
        assert item.priority == "C"
        assert item.subject == "Call   mom"


class TestRender:
    """Test rendering records back to lines."""

    @pytest.mark.parametrize("line", [
        "(A) Buy milk @shopping +home---errands",
        "x Clean desk @home",
        "x 2024-03-02 2024-03-01 Pay bills +home---bills pri:B",
        "(B) 2024-01-15 Write report +work @office",
        "Plain task",
    ])
    def test_canonical_lines_render_unchanged(self, line):
        """Test canonical lines survive a parse/render cycle verbatim."""
        assert TodoItem.parse(line).render() == line

    def test_round_trip_preserves_fields(self):
        """Test structural fields survive render then parse."""
        original = TodoItem.parse("(D) 2024-02-02 Fix @desk +a---b @desk +c")
        again = TodoItem.parse(original.render())
        assert again.finished == original.finished
        assert again.priority == original.priority
        assert again.contexts == original.contexts
        assert again.projects == original.projects
        assert again.subject == original.subject

    def test_str_matches_render(self):
        item = TodoItem.parse("(A) Test")
        assert str(item) == item.render()

    def test_completed_keeps_priority(self):
        """Test completing a prioritized task keeps its priority after a reload."""
        item = TodoItem.parse("(A) Urgent thing")
        item.complete(today=date(2024, 5, 1))
        line = item.render()
        assert line == "x 2024-05-01 Urgent thing pri:A"
        again = TodoItem.parse(line)
        assert again.finished and again.priority == "A"


class TestCompletion:
    """Test complete/uncomplete semantics."""

    def test_complete_is_idempotent(self):
        item = TodoItem.parse("Task @home +proj")
        item.complete(today=date(2024, 1, 1))
        item.complete(today=date(2024, 2, 2))
        assert item.finished
        assert item.finish_date == date(2024, 1, 1)

    def test_uncomplete_is_idempotent(self):
        item = TodoItem.parse("Task")
        item.uncomplete()
        assert item.finished is False
        item.complete()
        item.uncomplete()
        item.uncomplete()
        assert item.finished is False
        assert item.finish_date is None

    def test_complete_without_stamp(self):
        item = TodoItem.parse("Task")
        item.complete(stamp=False)
        assert item.finished
        assert item.finish_date is None
        assert item.render() == "x Task"

    def test_completion_leaves_tags_and_priority(self):
        item = TodoItem.parse("(B) Task @ctx +proj")
        item.complete()
        assert item.contexts == ["ctx"]
        assert item.projects == ["proj"]
        assert item.priority == "B"


class TestMutators:
    """Test subject and priority setters."""

    def test_set_subject_rederives_tags(self):
        """Tags always follow the current subject."""
        item = TodoItem.parse("Old @home +a")
        item.set_subject("New @work +b---c")
        assert item.contexts == ["work"]
        assert item.projects == ["b---c"]
        assert item.render() == "New @work +b---c"

    def test_set_priority_letter_and_rank(self):
        item = TodoItem.parse("Task")
        item.set_priority("C")
        assert item.priority == "C"
        item.set_priority(0)
        assert item.priority == "A"
        item.set_priority(None)
        assert item.priority is None
        assert item.render() == "Task"

    def test_set_priority_invalid(self):
        item = TodoItem.parse("Task")
        with pytest.raises(ValidationError):
            item.set_priority("a")
        with pytest.raises(ValidationError):
            item.set_priority(26)
        assert item.priority is None

    def test_to_response(self):
        item = TodoItem.parse("(A) Buy milk @shopping +home", item_id=3)
        response = item.to_response()
        assert response == TodoResponse(
            id=3, subject="Buy milk @shopping +home", finished=False,
            priority="A", contexts=["shopping"], projects=["home"],
        )

    def test_set_subject_folds_line_breaks(self):
        """A record never spans more than one line."""
        item = TodoItem.parse("Task")
        item.set_subject("buy milk\nx pay rent +home")
        assert item.subject == "buy milk x pay rent +home"
        item.set_subject("a\r\n   b\n")
        assert item.subject == "a b"
        assert "\n" not in TodoItem(subject="one\ntwo").render()


def assert_reads_back(item):
    again = TodoItem.parse(item.render())
    assert again.subject == item.subject
    assert again.finished == item.finished
    assert again.priority == item.priority
    assert again.create_date == item.create_date
    assert again.finish_date == item.finish_date
    return again


class TestRoundTripAfterMutation:
    """Rendered lines parse back to the record that was mutated."""

    def test_dropping_priority_from_x_subject(self):
        item = TodoItem.parse("(A) x ray film")
        item.set_priority(None)
        assert item.render() == "\\x ray film"
        again = assert_reads_back(item)
        assert again.finished is False

    def test_subject_that_looks_like_priority(self):
        item = TodoItem.parse("Task")
        item.set_subject("(B) call dad")
        assert item.render() == "\\(B) call dad"
        assert assert_reads_back(item).priority is None

    def test_uncomplete_subject_that_looks_like_priority(self):
        item = TodoItem.parse("x (A) foo")
        assert item.subject == "(A) foo"
        item.uncomplete()
        assert item.render() == "\\(A) foo"
        assert assert_reads_back(item).priority is None

    def test_subject_starting_with_date(self):
        item = TodoItem.parse("(A) Task")
        item.set_subject("2020-01-01 meeting notes")
        assert item.render() == "(A) \\2020-01-01 meeting notes"
        assert assert_reads_back(item).create_date is None

    def test_completed_subject_ending_in_pri_token(self):
        item = TodoItem.parse("foo pri:B")
        item.complete(today=date(2024, 5, 1))
        assert item.render() == "x 2024-05-01 foo pri:B\\"
        assert assert_reads_back(item).priority is None

        item = TodoItem.parse("(C) foo pri:B")
        item.complete(today=date(2024, 5, 1))
        assert item.render() == "x 2024-05-01 foo pri:B\\ pri:C"
        assert assert_reads_back(item).priority == "C"

        item.set_subject("foo pri:B\\")
        assert item.render() == "x 2024-05-01 foo pri:B\\\\ pri:C"
        assert assert_reads_back(item).subject == "foo pri:B\\"

    def test_backslash_subjects(self):
        """A literal leading backslash is only doubled where it would be eaten."""
        item = TodoItem.parse("\\path to thing")
        assert item.subject == "\\path to thing"
        assert item.render() == "\\path to thing"

        item.set_subject("\\x foo")
        assert item.render() == "\\\\x foo"
        assert_reads_back(item)

    @pytest.mark.parametrize("line", [
        "(A) x ray film",
        "x 2024-05-01 (A) foo pri:B",
        "2020-01-01 2021-01-01 task",
        "(B) 2020-01-01 x y",
    ])
    def test_every_mutation_reads_back(self, line):
        item = TodoItem.parse(line)
        assert_reads_back(item)
        for mutate in (
            lambda i: i.set_priority(None),
            lambda i: i.set_priority("D"),
            lambda i: i.uncomplete(),
            lambda i: i.complete(stamp=False),
            lambda i: i.set_subject("x 2020-01-01 (A) tricky pri:Z"),
        ):
            mutate(item)
            assert_reads_back(item)


class TestCompletionDates:
    """Completion dates when the item has a creation date."""

    def test_complete_without_stamp_keeps_dates_in_order(self):
        item = TodoItem.parse("2020-01-01 foo")
        item.complete(stamp=False, today=date(2024, 5, 1))
        assert item.finish_date == date(2024, 5, 1)
        assert item.render() == "x 2024-05-01 2020-01-01 foo"
        again = assert_reads_back(item)
        assert again.create_date == date(2020, 1, 1)

    def test_finished_without_finish_date_omits_create_date(self):
        """The lone date would be read back as the completion date."""
        item = TodoItem(subject="foo", finished=True, create_date=date(2020, 1, 1))
        assert item.render() == "x foo"
        assert TodoItem.parse(item.render()).finish_date is None


class TestPriority:
    """Test Priority helpers."""

    def test_rank(self):
        assert Priority.rank("A") == 0
        assert Priority.rank("Z") == 25
        assert Priority.rank(None) is None

    def test_badge_only_for_top_three(self):
        assert Priority.badge("A") == "A"
        assert Priority.badge("C") == "C"
        assert Priority.badge("D") is None
        assert Priority.badge(None) is None

    def test_normalize_rejects_bool(self):
        with pytest.raises(ValueError):
            Priority.normalize(True)


class TestProjectPath:
    """Test ProjectPath parsing."""

    def test_segments(self):
        path = ProjectPath("home---errands---groceries")
        assert path.segments == ("home", "errands", "groceries")
        assert path.name == "groceries"
        assert str(path.parent) == "home---errands"
        assert str(path) == "home---errands---groceries"

    def test_empty_segments_dropped(self):
        assert ProjectPath("---home").segments == ("home",)
        assert ProjectPath("home---").segments == ("home",)
        assert ProjectPath("a------b").segments == ("a", "b")
        assert ProjectPath("------").is_empty
        assert ProjectPath("").is_empty

    def test_single_dash_is_not_a_separator(self):
        assert ProjectPath("my-project--x").segments == ("my-project--x",)

    def test_is_within(self):
        assert ProjectPath("home---errands").is_within(ProjectPath("home"))
        assert ProjectPath("home").is_within(ProjectPath("home"))
        assert not ProjectPath("homework").is_within(ProjectPath("home"))
        assert not ProjectPath("home").is_within(ProjectPath("home---errands"))
        assert not ProjectPath("home").is_within(ProjectPath(""))

    def test_from_segments(self):
        assert str(ProjectPath.from_segments(["a", "b"])) == f"a{PROJECT_SEPARATOR}b"
        assert ProjectPath.from_segments(["a", "b"]) == ProjectPath("a---b")


class TestProjectNode:
    """Test ProjectNode helpers."""

    def test_walk_and_total(self):
        node = ProjectNode(
            name="home", full_path="home", direct_count=1,
            children=[ProjectNode(name="bills", full_path="home---bills", direct_count=2)],
        )
        assert [n.full_path for n in node.walk()] == ["home", "home---bills"]
        assert node.total_count() == 3
        assert node.find_child("bills").direct_count == 2
        assert node.find_child("nope") is None
