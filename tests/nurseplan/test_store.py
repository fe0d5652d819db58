from datetime import datetime

import pytest

from nurseplan.result_types import SchedulingAlgorithm, ScheduleResult
from nurseplan.store import ScheduleStore

HEURISTIC, ILP = SchedulingAlgorithm.HEURISTIC, SchedulingAlgorithm.ILP


def result(alg: SchedulingAlgorithm) -> ScheduleResult:
    return ScheduleResult(algorithm=alg, shifts=[], status_name="COMPLETE")


def test_save_assigns_increasing_ids():
    store = ScheduleStore()
    first = store.save(result(HEURISTIC))
    second = store.save(result(ILP))
    assert (first.id, second.id) == (1, 2)
    assert len(store) == 2
    assert store.get(2) is second
    assert second.algorithm is ILP


def test_get_missing_schedule():
    with pytest.raises(KeyError, match="Schedule not found"):
        ScheduleStore().get(99)


def test_empty_store_lookups():
    store = ScheduleStore()
    with pytest.raises(LookupError, match="No schedules found"):
        store.list_all()
    with pytest.raises(LookupError, match="No schedules found"):
        store.most_recent()
    assert store.latest(ILP) is None


def test_list_all_newest_first():
    store = ScheduleStore()
    old = store.save(result(HEURISTIC), created=datetime(2024, 1, 1, 9))
    new = store.save(result(HEURISTIC), created=datetime(2024, 1, 2, 9))
    mid = store.save(result(ILP), created=datetime(2024, 1, 1, 12))
    assert [s.id for s in store.list_all()] == [new.id, mid.id, old.id]


def test_latest_and_most_recent():
    store = ScheduleStore()
    store.save(result(ILP), created=datetime(2024, 1, 1))
    h = store.save(result(HEURISTIC), created=datetime(2024, 1, 2))
    i = store.save(result(ILP), created=datetime(2024, 1, 3))

    assert store.latest(HEURISTIC) is h
    assert store.latest(ILP) is i
    assert store.most_recent() == [h, i]


def test_most_recent_with_one_algorithm():
    store = ScheduleStore()
    i = store.save(result(ILP))
    assert store.most_recent() == [i]
