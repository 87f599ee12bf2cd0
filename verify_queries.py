from datetime import date
import pytest
import queries
from models import Task, TaskStatus

TODAY = date(2024, 6, 15)


@pytest.fixture
def tasks():
    return [
        Task(id=1, name="Write report", timestamp="2024-06-01T09:00:00", due_date="2024-06-14"),
        Task(id=2, name="Buy MILK", status=TaskStatus.COMPLETED, timestamp="2024-06-03T09:00:00", due_date="2024-06-01"),
        Task(id=3, name="Call mom", timestamp="2024-06-02T09:00:00", due_date="2024-06-15"),
        Task(id=4, name="Milkshake", timestamp="2024-06-02T09:00:00"),
    ]


def test_overdue_is_strictly_before_today_and_not_completed(tasks):
    assert [t.id for t in queries.overdue_tasks(tasks, TODAY)] == [1]
    assert not queries.is_overdue(tasks[2], TODAY)


def test_filter_by_status(tasks):
    assert [t.id for t in queries.filter_by_status(tasks, TaskStatus.PENDING)] == [1, 3, 4]
    assert [t.id for t in queries.filter_by_status(tasks, TaskStatus.COMPLETED)] == [2]


def test_search_is_case_insensitive(tasks):
    assert [t.id for t in queries.search_tasks(tasks, "milk")] == [2, 4]
    assert queries.search_tasks(tasks, "nothing") == []


def test_sort_by_timestamp_is_stable(tasks):
    assert [t.id for t in queries.sort_by_timestamp(tasks)] == [1, 3, 4, 2]
    assert [t.id for t in queries.sort_by_timestamp(tasks, descending=True)] == [2, 3, 4, 1]
    # source order untouched
    assert [t.id for t in tasks] == [1, 2, 3, 4]


def test_summarize(tasks):
    summary = queries.summarize(tasks, TODAY)
    assert (summary.total, summary.completed, summary.overdue) == (4, 1, 1)


if __name__ == "__main__":
    pytest.main([__file__])
