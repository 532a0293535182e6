"""Tests for the markdown storage layer."""

import frontmatter
import pytest

from dgpt.config import ConfigModel
from dgpt.storage import END_MARKER, Storage, TaskMarkdownFormat
from dgpt.task import Deadline, Event, Recurring, ToDo
from dgpt.task_list import TaskList


def sample_tasks() -> TaskList:
    tasks = TaskList()
    tasks.add_todo("buy milk")
    tasks.add_deadline("submit report", "2024-12-01")
    tasks.add_event("conference", "2024-06-03", "2024-06-05")
    tasks.add_recurring("water plants", "sunday")
    tasks.mark(1)
    tasks.mark(3)
    return tasks


class TestTaskMarkdownFormat:
    def test_to_markdown(self):
        """Test a done deadline becomes one checkbox line."""
        task = Deadline("submit report", "2024-12-01")
        task.mark()
        assert TaskMarkdownFormat.to_markdown(task) == "- [x] D | submit report | 2024-12-01"

    def test_event_line(self):
        """Test an event stores both dates."""
        task = Event("conference", "2024-06-03", "2024-06-05")
        assert TaskMarkdownFormat.to_markdown(task) == "- [ ] E | conference | 2024-06-03 | 2024-06-05"

    def test_pipes_in_text_are_escaped(self):
        """Test pipes inside text do not split fields."""
        task = Recurring("check a | b", "day | night")
        line = TaskMarkdownFormat.to_markdown(task)

        assert line == "- [ ] R | check a \\| b | day \\| night"
        assert TaskMarkdownFormat.from_markdown(line) == task

    def test_line_breaks_and_backslashes_are_escaped(self):
        """Test line breaks and backslashes stay inside one line."""
        task = ToDo("first\nsecond\r\\n")
        line = TaskMarkdownFormat.to_markdown(task)

        assert line == "- [ ] T | first\\nsecond\\r\\\\n"
        assert "\n" not in line
        assert TaskMarkdownFormat.from_markdown(line) == task

    def test_trailing_whitespace_is_kept(self):
        """Test trailing spaces in the last field are not trimmed."""
        task = Recurring("a", "b ")
        assert TaskMarkdownFormat.from_markdown(TaskMarkdownFormat.to_markdown(task)) == task

    def test_carriage_return_line_ending(self):
        """Test a CRLF line ending is not part of the last field."""
        assert TaskMarkdownFormat.from_markdown("- [ ] T | buy milk\r") == ToDo("buy milk")

    def test_non_task_lines_are_ignored(self):
        """Test lines that are not checkboxes give None."""
        assert TaskMarkdownFormat.from_markdown("") is None
        assert TaskMarkdownFormat.from_markdown("# heading") is None
        assert TaskMarkdownFormat.from_markdown(END_MARKER) is None

    def test_unknown_tag(self):
        """Test an unknown tag is an error."""
        with pytest.raises(ValueError):
            TaskMarkdownFormat.from_markdown("- [ ] Q | something")

    def test_wrong_field_count(self):
        """Test a missing field is an error."""
        with pytest.raises(ValueError):
            TaskMarkdownFormat.from_markdown("- [ ] D | submit report")


class TestStorage:
    def test_missing_file_loads_empty_list(self, storage):
        """Test a missing file gives an empty list."""
        assert storage.load().size() == 0

    def test_round_trip(self, storage):
        """Test every variant survives save and load."""
        tasks = sample_tasks()

        storage.save(tasks)
        loaded = storage.load()

        assert loaded == tasks
        assert [type(t) for t in loaded] == [ToDo, Deadline, Event, Recurring]
        assert [t.done for t in loaded] == [False, True, False, True]

    def test_save_returns_path_and_writes_frontmatter(self, storage, config):
        """Test the saved file carries frontmatter and task lines."""
        path = storage.save(sample_tasks())

        assert path == config.get_data_path()
        post = frontmatter.load(str(path))
        assert post.metadata["app"] == "dgpt"
        assert post.metadata["count"] == 4
        assert post.metadata["format_version"] == 1
        assert "- [ ] T | buy milk" in post.content
        assert post.content.split("\n")[-1] == END_MARKER

    def test_empty_list_round_trip(self, storage):
        """Test an empty list saves and loads."""
        storage.save(TaskList())
        assert storage.load().size() == 0

    def test_multiline_description_round_trip(self, storage):
        """Test a description with line breaks cannot add tasks on reload."""
        tasks = TaskList()
        tasks.add_todo("a\n- [ ] T | injected")
        tasks.add_deadline("b\r\nc", "2024-12-01")

        storage.save(tasks)
        loaded = storage.load()

        assert loaded.size() == 2
        assert loaded == tasks
        assert loaded[0].description == "a\n- [ ] T | injected"

    def test_trailing_whitespace_round_trip(self, storage):
        """Test trailing spaces on the last task survive a reload."""
        tasks = TaskList()
        tasks.add_todo("first ")
        tasks.add_recurring("a", "b ")

        storage.save(tasks)
        loaded = storage.load()

        assert loaded[0].description == "first "
        assert loaded[1].frequency == "b "
        assert loaded == tasks

    def test_file_without_end_marker_loads(self, storage):
        """Test a hand-written file without the closing comment still loads."""
        storage.path.parent.mkdir(parents=True, exist_ok=True)
        storage.path.write_text("---\nformat_version: 1\n---\n- [ ] T | buy milk\n", encoding="utf-8")

        assert [t.description for t in storage.load()] == ["buy milk"]

    def test_bad_lines_are_skipped(self, storage):
        """Test undecodable lines are skipped."""
        storage.path.parent.mkdir(parents=True, exist_ok=True)
        storage.path.write_text(
            "---\nformat_version: 1\n---\n"
            "- [ ] T | buy milk\n"
            "- [ ] D | broken | not-a-date\n"
            "- [ ] Z | unknown\n"
            "- [x] R | water plants | sunday\n",
            encoding="utf-8",
        )

        loaded = storage.load()

        assert [t.description for t in loaded] == ["buy milk", "water plants"]
        assert loaded[1].done is True

    def test_corrupt_frontmatter_loads_empty_list(self, storage):
        """Test unreadable frontmatter gives an empty list."""
        storage.path.parent.mkdir(parents=True, exist_ok=True)
        storage.path.write_text("---\n: [unclosed\n---\n- [ ] T | x\n", encoding="utf-8")

        assert storage.load().size() == 0

    def test_loaded_list_uses_configured_date_format(self, tmp_path):
        """Test the loaded list reads dates in the configured format."""
        config = ConfigModel(data_dir=str(tmp_path), date_input_format="%d/%m/%Y")
        tasks = Storage(config).load()

        task = tasks.add_deadline("pay rent", "01/12/2024")
        assert str(task) == "[D][ ] pay rent (by: Dec 1 2024)"

    def test_save_failure_raises_oserror(self, tmp_path, config):
        """Test an unwritable path raises OSError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        storage = Storage(config, path=blocker / "tasks.md")

        with pytest.raises(OSError):
            storage.save(sample_tasks())

    def test_backup_on_save(self, tmp_path):
        """Test the previous file is backed up before saving."""
        config = ConfigModel(data_dir=str(tmp_path / "data"), backup_on_save=True)
        storage = Storage(config)

        storage.save(sample_tasks())
        assert not (tmp_path / "data" / "backups").exists()

        storage.save(TaskList())
        backups = list((tmp_path / "data" / "backups").glob("*/tasks.md"))
        assert len(backups) == 1
        assert "buy milk" in backups[0].read_text(encoding="utf-8")

    def test_backup_without_file(self, storage):
        """Test there is nothing to back up before the first save."""
        assert storage.backup() is None
