"""
Reasoning history archive.

Records finished reasoning results to SQLite so runs can be inspected and
compared after the fact. The store is opt-in: register its listener on an
engine, or call record() directly.
"""

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .events import LifecycleEvent, Listener, ReasoningCompleted
from .models import ReasoningResult, SessionStatus

logger = logging.getLogger(__name__)


@dataclass
class HistoryRecord:
	"""Summary row of one archived result."""
	result_id: str
	input: str
	effort: str
	status: str
	confidence: float
	iterations: int
	action_count: int
	error_count: int
	duration_ms: int
	tokens_used: int
	timestamp: str

	@property
	def has_errors(self) -> bool:
		return self.status == SessionStatus.COMPLETED_WITH_ERRORS.value


@dataclass
class EffortStats:
	"""Aggregate stats for one effort level."""
	effort: str
	run_count: int
	avg_confidence: float
	avg_duration_ms: float
	error_rate: float  # percent of runs completed with errors
	last_run: str


class ReasoningHistoryStore:
	"""SQLite-backed storage for reasoning results."""

	def __init__(self, db_path: str | Path = ""):
		if not db_path:
			from .config import get_config
			db_path = get_config().history_db_path
		self.db_path = Path(db_path)
		self.db_path.parent.mkdir(parents=True, exist_ok=True)
		self._ensure_table()

	def _ensure_table(self) -> None:
		with sqlite3.connect(str(self.db_path)) as conn:
			conn.execute("""
				CREATE TABLE IF NOT EXISTS reasoning_results (
					id INTEGER PRIMARY KEY AUTOINCREMENT,
					result_id TEXT NOT NULL UNIQUE,
					input TEXT NOT NULL,
					effort TEXT NOT NULL,
					status TEXT NOT NULL,
					confidence REAL DEFAULT 0.0,
					iterations INTEGER DEFAULT 0,
					action_count INTEGER DEFAULT 0,
					error_count INTEGER DEFAULT 0,
					duration_ms INTEGER DEFAULT 0,
					tokens_used INTEGER DEFAULT 0,
					timestamp TEXT NOT NULL,
					result_json TEXT NOT NULL
				)
			""")
			conn.execute("""
				CREATE INDEX IF NOT EXISTS idx_reasoning_results_effort ON reasoning_results(effort)
			""")
			conn.execute("""
				CREATE INDEX IF NOT EXISTS idx_reasoning_results_timestamp ON reasoning_results(timestamp)
			""")

	def _connect(self) -> sqlite3.Connection:
		conn = sqlite3.connect(str(self.db_path))
		conn.row_factory = sqlite3.Row
		return conn

	def record(self, result: ReasoningResult) -> None:
		"""Archive a result. Recording the same result twice replaces it."""
		with self._connect() as conn:
			conn.execute(
				"""
				INSERT OR REPLACE INTO reasoning_results
				(result_id, input, effort, status, confidence, iterations, action_count,
				 error_count, duration_ms, tokens_used, timestamp, result_json)
				VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
				""",
				(
					result.id,
					result.input,
					result.effort,
					result.status.value,
					result.confidence,
					result.iterations,
					len(result.actions),
					len(result.errors),
					result.duration,
					result.tokens_used,
					result.metadata.timestamp,
					result.model_dump_json(),
				),
			)
		logger.debug(f"Archived reasoning result {result.id} ({result.status.value})")

	def query(
		self,
		status: Optional[str] = None,
		effort: Optional[str] = None,
		since: Optional[str] = None,
		limit: int = 100,
	) -> list[HistoryRecord]:
		"""Query archived results, newest first, with optional filters."""
		conditions: list[str] = []
		params: list[Any] = []

		if status:
			conditions.append("status = ?")
			params.append(status)
		if effort:
			conditions.append("effort = ?")
			params.append(effort)
		if since:
			conditions.append("timestamp >= ?")
			params.append(since)

		where = " AND ".join(conditions) if conditions else "1=1"

		with self._connect() as conn:
			cursor = conn.execute(
				f"SELECT * FROM reasoning_results WHERE {where} ORDER BY timestamp DESC, id DESC LIMIT ?",
				[*params, limit],
			)
			rows = cursor.fetchall()

		return [
			HistoryRecord(
				result_id=row["result_id"],
				input=row["input"],
				effort=row["effort"],
				status=row["status"],
				confidence=row["confidence"],
				iterations=row["iterations"],
				action_count=row["action_count"],
				error_count=row["error_count"],
				duration_ms=row["duration_ms"],
				tokens_used=row["tokens_used"],
				timestamp=row["timestamp"],
			)
			for row in rows
		]

	def get_result(self, result_id: str) -> Optional[ReasoningResult]:
		"""Load the full archived result, or None if unknown."""
		with self._connect() as conn:
			row = conn.execute(
				"SELECT result_json FROM reasoning_results WHERE result_id = ?",
				(result_id,),
			).fetchone()

		if row is None:
			return None
		return ReasoningResult.model_validate_json(row["result_json"])

	def get_stats(self) -> list[EffortStats]:
		"""Get aggregate stats per effort level."""
		with self._connect() as conn:
			cursor = conn.execute(
				"""
				SELECT
					effort,
					COUNT(*) as run_count,
					AVG(confidence) as avg_confidence,
					AVG(duration_ms) as avg_duration_ms,
					SUM(CASE WHEN status = ? THEN 1 ELSE 0 END) * 100.0 / COUNT(*) as error_rate,
					MAX(timestamp) as last_run
				FROM reasoning_results
				GROUP BY effort
				ORDER BY run_count DESC, effort
				""",
				(SessionStatus.COMPLETED_WITH_ERRORS.value,),
			)
			rows = cursor.fetchall()

		return [
			EffortStats(
				effort=row["effort"],
				run_count=row["run_count"],
				avg_confidence=row["avg_confidence"],
				avg_duration_ms=row["avg_duration_ms"],
				error_rate=row["error_rate"],
				last_run=row["last_run"],
			)
			for row in rows
		]

	def clear(self, before: Optional[str] = None) -> int:
		"""Delete records, optionally only those before a timestamp. Returns count deleted."""
		with self._connect() as conn:
			if before:
				cursor = conn.execute("DELETE FROM reasoning_results WHERE timestamp < ?", (before,))
			else:
				cursor = conn.execute("DELETE FROM reasoning_results")
			return cursor.rowcount

	def listener(self) -> Listener:
		"""A lifecycle listener that archives every completed result."""

		def _on_event(event: LifecycleEvent) -> None:
			if isinstance(event, ReasoningCompleted):
				self.record(event.result)

		return _on_event


# Global store singleton
_store: Optional[ReasoningHistoryStore] = None


def get_history_store(db_path: str | Path = "") -> ReasoningHistoryStore:
	"""Get or create the global history store."""
	global _store
	if _store is None:
		_store = ReasoningHistoryStore(db_path)
	return _store
