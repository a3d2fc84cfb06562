"""Tests for the reasoning history archive."""

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from agent_reasoner.events import ReasoningCompleted, ReasoningStarted
from agent_reasoner.history import ReasoningHistoryStore
from agent_reasoner.models import SessionStatus

from .helpers import make_engine, make_result


def test_record_and_query(tmp_path: Path):
	"""Record a result and query it back."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	result = make_result(confidence=0.9)
	store.record(result)

	records = store.query()
	assert len(records) == 1
	assert records[0].result_id == result.id
	assert records[0].effort == "medium"
	assert records[0].status == "completed"
	assert records[0].confidence == 0.9
	assert records[0].action_count == 1
	assert records[0].has_errors is False


def test_record_twice_replaces(tmp_path: Path):
	store = ReasoningHistoryStore(tmp_path / "history.db")
	result = make_result()
	store.record(result)
	store.record(result)

	assert len(store.query()) == 1


def test_query_filters(tmp_path: Path):
	"""Query should filter by status and effort."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	store.record(make_result(effort="low"))
	store.record(make_result(effort="high", status=SessionStatus.COMPLETED_WITH_ERRORS))
	store.record(make_result(effort="high"))

	assert len(store.query(effort="high")) == 2
	with_errors = store.query(status="completed_with_errors")
	assert len(with_errors) == 1
	assert with_errors[0].error_count == 1
	assert with_errors[0].has_errors is True


def test_query_since_and_order(tmp_path: Path):
	"""Query should filter by timestamp and return newest first."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	old_ts = (datetime.now() - timedelta(hours=2)).isoformat()
	new_ts = datetime.now().isoformat()

	old = make_result(timestamp=old_ts)
	new = make_result(timestamp=new_ts)
	store.record(old)
	store.record(new)

	assert [r.result_id for r in store.query()] == [new.id, old.id]

	cutoff = (datetime.now() - timedelta(hours=1)).isoformat()
	recent = store.query(since=cutoff)
	assert [r.result_id for r in recent] == [new.id]


def test_query_limit(tmp_path: Path):
	store = ReasoningHistoryStore(tmp_path / "history.db")
	for _ in range(10):
		store.record(make_result())

	assert len(store.query(limit=3)) == 3


def test_get_result_round_trip(tmp_path: Path):
	"""The full result is archived alongside the summary row."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	result = make_result()
	store.record(result)

	loaded = store.get_result(result.id)
	assert loaded.model_dump() == result.model_dump()
	assert store.get_result("missing") is None


def test_get_stats(tmp_path: Path):
	"""Stats should aggregate per effort level."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	store.record(make_result(effort="medium", confidence=0.8, duration=100))
	store.record(make_result(effort="medium", confidence=0.6, duration=300))
	store.record(make_result(effort="medium", status=SessionStatus.COMPLETED_WITH_ERRORS, confidence=0.4, duration=200))
	store.record(make_result(effort="low", confidence=0.9, duration=50))

	stats = store.get_stats()
	assert [s.effort for s in stats] == ["medium", "low"]

	medium = stats[0]
	assert medium.run_count == 3
	assert medium.avg_confidence == pytest.approx(0.6)
	assert medium.avg_duration_ms == pytest.approx(200)
	assert medium.error_rate == pytest.approx(33.33, abs=0.1)

	low = stats[1]
	assert low.run_count == 1
	assert low.error_rate == 0.0


def test_empty_store_stats(tmp_path: Path):
	store = ReasoningHistoryStore(tmp_path / "history.db")
	assert store.get_stats() == []


def test_clear_before(tmp_path: Path):
	"""Clear with before should only remove old records."""
	store = ReasoningHistoryStore(tmp_path / "history.db")
	store.record(make_result(timestamp=(datetime.now() - timedelta(hours=2)).isoformat()))
	newer = make_result()
	store.record(newer)

	cutoff = (datetime.now() - timedelta(hours=1)).isoformat()
	assert store.clear(before=cutoff) == 1
	assert [r.result_id for r in store.query()] == [newer.id]

	assert store.clear() == 1
	assert store.query() == []


def test_listener_archives_completed_only(tmp_path: Path):
	store = ReasoningHistoryStore(tmp_path / "history.db")
	listener = store.listener()

	listener(ReasoningStarted(id="s1", input="x"))
	assert store.query() == []

	result = make_result()
	listener(ReasoningCompleted(result=result))
	assert [r.result_id for r in store.query()] == [result.id]


@pytest.mark.asyncio
async def test_engine_results_archived(tmp_path: Path):
	store = ReasoningHistoryStore(tmp_path / "history.db")
	engine = make_engine()
	engine.add_listener(store.listener())

	result = await engine.process("run the command 'sudo ls'")

	records = store.query()
	assert len(records) == 1
	assert records[0].status == "completed_with_errors"
	assert store.get_result(result.id).errors[0].action == "execute_command"
