from core.models import CompletionLog, Habit, HabitStatus
from core.store import HabitStore

DAY = "2024-01-01"


def _hydrated_store(habits=None, completions=None, **kwargs):
    store = HabitStore(**kwargs)
    store.replace_all(habits or [], completions or CompletionLog())
    return store


def test_add_habit_trims_and_appends_in_order():
    store = HabitStore()
    first = store.add_habit("  Read ")
    second = store.add_habit("Gym")

    assert first.name == "Read"
    assert [h.name for h in store.habits] == ["Read", "Gym"]
    assert first.id != second.id
    assert store.history_size == 2


def test_blank_name_is_rejected_without_snapshot():
    store = HabitStore()
    assert store.add_habit("   ") is None
    assert store.habits == []
    assert store.history_size == 0


def test_rename_habit():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert store.rename_habit("1", "  Read books ")
    assert store.get_habit("1").name == "Read books"
    assert store.history_size == 1


def test_rename_rejects_unknown_id_and_blank_name():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert not store.rename_habit("missing", "Name")
    assert not store.rename_habit("1", "  ")
    assert store.get_habit("1").name == "Read"
    assert store.history_size == 0


def test_delete_keeps_completion_log():
    completions = CompletionLog.from_dict({DAY: {"1": True, "2": "skipped"}})
    store = HabitStore(habits=[Habit("1", "Read"), Habit("2", "Gym")], completions=completions)

    assert store.delete_habit("1")
    assert [h.id for h in store.habits] == ["2"]
    assert store.completions.to_dict() == {DAY: {"1": True, "2": "skipped"}}


def test_delete_unknown_habit_is_noop():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert not store.delete_habit("nope")
    assert store.history_size == 0


def test_cycle_walks_three_states():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert store.cycle_status(DAY, "1") is HabitStatus.DONE
    assert store.cycle_status(DAY, "1") is HabitStatus.SKIPPED
    assert store.cycle_status(DAY, "1") is HabitStatus.UNSET
    assert store.completions.to_dict() == {}


def test_four_cycles_equal_one():
    store = HabitStore(habits=[Habit("1", "Read")])
    for _ in range(4):
        store.cycle_status(DAY, "1")
    assert store.status(DAY, "1") is HabitStatus.DONE
    assert store.history_size == 4


def test_duplicate_gesture_advances_once():
    store = HabitStore(habits=[Habit("1", "Read")])
    # click и contextmenu от одного нажатия
    assert store.cycle_status(DAY, "1", gesture_id="tap-1") is HabitStatus.DONE
    assert store.cycle_status(DAY, "1", gesture_id="tap-1") is None
    assert store.status(DAY, "1") is HabitStatus.DONE
    assert store.history_size == 1

    assert store.cycle_status(DAY, "1", gesture_id="tap-2") is HabitStatus.SKIPPED


def test_cycle_rejects_bad_input():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert store.cycle_status("2024-13-40", "1") is None
    assert store.cycle_status(DAY, "ghost") is None
    assert store.history_size == 0


def test_undo_restores_previous_state():
    store = HabitStore()
    habit = store.add_habit("Read")
    store.cycle_status(DAY, habit.id)
    store.rename_habit(habit.id, "Books")

    assert store.undo()
    assert store.get_habit(habit.id).name == "Read"
    assert store.undo()
    assert store.status(DAY, habit.id) is HabitStatus.UNSET
    assert store.undo()
    assert store.habits == []
    assert not store.undo()
    assert not store.can_undo


def test_undo_restores_deleted_habit():
    store = HabitStore(habits=[Habit("1", "Read"), Habit("2", "Gym")])
    store.delete_habit("1")
    store.undo()
    assert [h.id for h in store.habits] == ["1", "2"]


def test_undo_history_is_capped():
    store = HabitStore(habits=[Habit("1", "Read")])
    for _ in range(60):
        store.cycle_status(DAY, "1")
    assert store.history_size == 50


def test_listeners_wait_for_hydration():
    store = HabitStore()
    calls = []
    store.add_listener(calls.append)

    store.add_habit("Before load")
    assert calls == []

    assert store.replace_all([Habit("1", "Read")], CompletionLog())
    assert calls == []  # загрузка не считается изменением

    store.cycle_status(DAY, "1")
    assert len(calls) == 1
    assert calls[0].completions.to_dict() == {DAY: {"1": True}}


def test_replace_all_drops_local_history_and_runs_once():
    store = HabitStore()
    store.add_habit("Local")
    assert store.history_size == 1

    assert store.replace_all([Habit("1", "Read")], CompletionLog.from_dict({DAY: {"1": True}}))
    assert store.history_size == 0
    assert store.hydrated

    assert not store.replace_all([], CompletionLog())
    assert [h.id for h in store.habits] == ["1"]
    assert store.status(DAY, "1") is HabitStatus.DONE


def test_undo_right_after_load_keeps_loaded_state():
    store = HabitStore()
    calls = []
    store.add_listener(calls.append)
    store.add_habit("typed before load finished")

    store.replace_all([Habit("1", "Read"), Habit("2", "Gym")], CompletionLog.from_dict({DAY: {"1": True}}))

    assert not store.undo()
    assert calls == []
    assert [h.id for h in store.habits] == ["1", "2"]
    assert store.status(DAY, "1") is HabitStatus.DONE


def test_gesture_before_load_does_not_block_first_cycle_after_load():
    store = HabitStore(habits=[Habit("1", "Read")])
    store.cycle_status(DAY, "1", gesture_id="tap-1")
    store.replace_all([Habit("1", "Read")], CompletionLog())
    assert store.cycle_status(DAY, "1", gesture_id="tap-1") is HabitStatus.DONE


def test_long_names_are_accepted():
    store = HabitStore()
    habit = store.add_habit("x" * 201)
    assert habit is not None
    assert len(habit.name) == 201

    assert store.rename_habit(habit.id, "  " + "y" * 250 + " ")
    assert store.get_habit(habit.id).name == "y" * 250


def test_cycle_rejects_non_canonical_date_key():
    store = HabitStore(habits=[Habit("1", "Read")])
    assert store.cycle_status("2024-01- 1", "1") is None
    assert store.completions.to_dict() == {}


def test_rejected_mutation_does_not_notify():
    store = _hydrated_store([Habit("1", "Read")])
    calls = []
    store.add_listener(calls.append)

    store.add_habit("")
    store.rename_habit("x", "y")
    store.delete_habit("x")
    store.undo()
    assert calls == []


def test_undo_notifies_listeners():
    store = _hydrated_store([Habit("1", "Read")])
    calls = []
    store.add_listener(calls.append)
    store.delete_habit("1")
    store.undo()
    assert len(calls) == 2
    assert [h.id for h in calls[-1].habits] == ["1"]


def test_failing_listener_does_not_break_mutation():
    store = _hydrated_store()

    def broken(state):
        raise RuntimeError("boom")

    store.add_listener(broken)
    assert store.add_habit("Read") is not None
    assert len(store.habits) == 1


def test_read_accessors_return_copies():
    store = HabitStore(habits=[Habit("1", "Read")])
    store.habits.append(Habit("2", "Gym"))
    store.completions.set(DAY, "1", HabitStatus.DONE)
    assert len(store.habits) == 1
    assert store.status(DAY, "1") is HabitStatus.UNSET
