"""Tests for the task list."""

import pytest

from dgpt.exceptions import DateFormatError, TaskNotFoundError
from dgpt.task import Deadline, Event, Recurring, ToDo
from dgpt.task_list import TaskList


class TestTaskList:
    """Test adding, marking, deleting and finding tasks."""

    def setup_method(self):
        self.tasks = TaskList()
        self.tasks.add_todo("read book")
        self.tasks.add_deadline("return book", "2024-12-01")
        self.tasks.add_event("book fair", "2024-06-03", "2024-06-05")
        self.tasks.add_recurring("water plants", "sunday")

    def test_add_returns_created_task(self):
        """Test add returns the appended task."""
        task = self.tasks.add_todo("buy milk")

        assert isinstance(task, ToDo)
        assert self.tasks[4] is task
        assert self.tasks.size() == 5

    def test_add_variants(self):
        """Test each add method creates its variant."""
        assert [type(t) for t in self.tasks] == [ToDo, Deadline, Event, Recurring]
        assert self.tasks[3].frequency == "sunday"

    def test_add_deadline_bad_date_leaves_list_unchanged(self):
        """Test a bad deadline date adds nothing."""
        with pytest.raises(DateFormatError):
            self.tasks.add_deadline("pay rent", "tomorrow")
        assert len(self.tasks) == 4

    def test_add_event_bad_end_date_leaves_list_unchanged(self):
        """Test a bad event date adds nothing."""
        with pytest.raises(DateFormatError):
            self.tasks.add_event("trip", "2024-06-03", "soon")
        assert len(self.tasks) == 4

    def test_custom_date_format(self):
        """Test the list parses its configured date format."""
        tasks = TaskList(date_format="%d/%m/%Y")
        task = tasks.add_deadline("pay rent", "01/12/2024")
        assert str(task) == "[D][ ] pay rent (by: Dec 1 2024)"

    def test_mark_then_unmark_restores_task(self):
        """Test unmark undoes mark."""
        before = self.tasks[1].to_dict()

        marked = self.tasks.mark(1)
        assert marked.done is True

        self.tasks.unmark(1)
        assert self.tasks[1].to_dict() == before
        assert self.tasks[1].done is False

    def test_delete_compacts_positions(self):
        """Test later tasks move up after a delete."""
        third = self.tasks[2]

        deleted = self.tasks.delete(1)

        assert deleted.description == "return book"
        assert self.tasks.size() == 3
        assert self.tasks[1] is third
        assert [t.description for t in self.tasks] == ["read book", "book fair", "water plants"]

    @pytest.mark.parametrize("index", [-1, 4, 10])
    def test_out_of_range_positions(self, index):
        """Test positions outside the list are refused."""
        with pytest.raises(TaskNotFoundError):
            self.tasks.mark(index)
        with pytest.raises(TaskNotFoundError):
            self.tasks.unmark(index)
        with pytest.raises(TaskNotFoundError):
            self.tasks.delete(index)
        assert self.tasks.size() == 4

    def test_find_preserves_order(self):
        """Test matches keep list order."""
        matches = self.tasks.find("book")
        assert [t.description for t in matches] == ["read book", "return book", "book fair"]

    def test_find_is_case_sensitive(self):
        """Test find matches case exactly."""
        assert self.tasks.find("Book") == []

    def test_find_no_match_does_not_mutate(self):
        """Test find leaves the list alone."""
        assert self.tasks.find("groceries") == []
        assert self.tasks.size() == 4

    def test_equality(self):
        """Test lists compare by their tasks."""
        other = TaskList(list(self.tasks))
        assert other == self.tasks
        other.delete(0)
        assert other != self.tasks
