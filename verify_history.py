from unittest.mock import MagicMock
import pytest
from history import TaskHistory, INITIAL_LABEL
from models import Task, TaskStatus


def make_tasks(*ids):
    return [Task(id=i, name=f"Task {i}", timestamp="2024-01-01T09:00:00") for i in ids]


def make_history(initial=None, limit=5):
    save = MagicMock(return_value=True)
    history = TaskHistory(limit=limit, save=save)
    history.initialize(initial or [])
    return history, save


def test_initialize_seeds_single_entry():
    history, _ = make_history(make_tasks(1, 2))

    assert len(history.entries) == 1
    assert history.cursor == 0
    seed = history.entries[0]
    assert seed.label == INITIAL_LABEL
    assert list(seed.before) == list(seed.after) == make_tasks(1, 2)
    assert not history.can_undo()
    assert not history.can_redo()


def test_undo_on_fresh_history_reports_nothing():
    history, save = make_history(make_tasks(1))

    assert history.undo("alice") is None
    assert history.cursor == 0
    save.assert_not_called()


def test_record_then_undo_restores_before_and_persists():
    before = make_tasks(1)
    after = make_tasks(1, 2)
    history, save = make_history(before)
    history.record_state(before, after, "Add task")

    step = history.undo("alice")

    assert step.tasks == before
    assert step.label == "Add task"
    save.assert_called_once_with("alice", before)
    # undo does not add an entry
    assert len(history.entries) == 2
    assert history.cursor == 0


def test_undo_then_redo_round_trip():
    states = [make_tasks(), make_tasks(1), make_tasks(1, 2)]
    history, save = make_history(states[0])
    history.record_state(states[0], states[1], "first")
    history.record_state(states[1], states[2], "second")

    assert history.undo("bob").tasks == states[1]
    step = history.redo("bob")

    assert step.tasks == states[2]
    assert step.label == "second"
    assert save.call_args.args == ("bob", states[2])
    assert history.redo("bob") is None


def test_new_record_after_undo_discards_redo_branch():
    history, _ = make_history([])
    history.record_state(make_tasks(), make_tasks(1), "a")
    history.record_state(make_tasks(1), make_tasks(1, 2), "b")
    history.undo("u")
    history.record_state(make_tasks(1), make_tasks(1, 3), "c")

    assert history.redo("u") is None
    assert [e.label for e in history.entries] == [INITIAL_LABEL, "a", "c"]
    assert history.cursor == len(history.entries) - 1


@pytest.mark.parametrize("count", [1, 2, 3, 4, 5])
def test_n_records_then_n_undos_returns_to_start(count):
    history, _ = make_history([])
    current = []
    for i in range(1, count + 1):
        updated = current + make_tasks(i)
        history.record_state(current, updated, f"add {i}")
        current = updated

    for _ in range(count):
        step = history.undo("u")
        assert step is not None
        current = step.tasks

    assert current == []


def test_history_is_bounded_and_evicts_oldest():
    history, _ = make_history([])
    current = []
    for i in range(1, 8):
        updated = current + make_tasks(i)
        history.record_state(current, updated, f"add {i}")
        current = updated
        assert len(history.entries) <= 5
        assert history.cursor == len(history.entries) - 1

    assert [e.label for e in history.entries] == ["add 3", "add 4", "add 5", "add 6", "add 7"]

    for _ in range(5):
        current = history.undo("u").tasks

    # oldest retained state is the one before "add 3"
    assert current == make_tasks(1, 2)
    assert history.cursor == -1
    assert history.undo("u") is None


def test_record_from_bottom_of_evicted_history():
    history, _ = make_history([])
    current = []
    for i in range(1, 7):
        updated = current + make_tasks(i)
        history.record_state(current, updated, f"add {i}")
        current = updated
    while history.can_undo():
        current = history.undo("u").tasks

    history.record_state(current, current + make_tasks(99), "add 99")

    assert len(history.entries) == 1
    assert history.cursor == 0
    assert history.undo("u").tasks == current


def test_snapshots_are_independent_of_live_state():
    live = make_tasks(1)
    history, _ = make_history(live)
    updated = make_tasks(1, 2)
    history.record_state(live, updated, "add")

    updated[0].name = "mutated"
    updated[0].status = TaskStatus.COMPLETED
    live.clear()

    step = history.undo("u")
    assert step.tasks == make_tasks(1)
    step.tasks[0].name = "also mutated"
    assert history.redo("u").tasks == make_tasks(1, 2)


def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        TaskHistory(limit=0)


if __name__ == "__main__":
    pytest.main([__file__])
