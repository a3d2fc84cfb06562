"""Shared test fixtures and helpers for agent-reasoner tests."""

from typing import Any

from agent_reasoner.events import LifecycleEvent
from agent_reasoner.models import (
	Action,
	ComplexityLevel,
	ComplexityResult,
	ReasoningResult,
	ResultMetadata,
	Session,
	SessionStatus,
	ValidationFailure,
	new_id,
)
from agent_reasoner.pacing import no_delay
from agent_reasoner.reasoning import ReasoningEngine


def make_engine(**kwargs: Any) -> ReasoningEngine:
	"""Engine with zero pacing so runs are instant and deterministic."""
	kwargs.setdefault("delay", no_delay)
	return ReasoningEngine(**kwargs)


def make_action(**overrides: Any) -> Action:
	defaults: dict[str, Any] = {
		"type": "create_file",
		"tool": "filesystem",
		"method": "createFile",
		"parameters": ["notes.txt"],
	}
	defaults.update(overrides)
	return Action(**defaults)


def make_failure(action: str = "execute_command") -> ValidationFailure:
	return ValidationFailure(action=action, errors=["dangerous command detected"])


def make_session(
	actions: list[Action] | None = None,
	errors: int = 0,
	level: ComplexityLevel | None = None,
	**overrides: Any,
) -> Session:
	"""Session populated the way the engine leaves it after execution."""
	defaults: dict[str, Any] = {"input": "test instruction", "max_iterations": 7}
	defaults.update(overrides)
	session = Session(**defaults)
	session.actions = list(actions or [])
	session.iteration = len(session.actions)
	session.errors = [make_failure() for _ in range(errors)]
	if level is not None:
		session.complexity = ComplexityResult(score=0, level=level)
	return session


class EventRecorder:
	"""Lifecycle listener that remembers what it saw."""

	def __init__(self) -> None:
		self.events: list[LifecycleEvent] = []

	def __call__(self, event: LifecycleEvent) -> None:
		self.events.append(event)

	@property
	def kinds(self) -> list[str]:
		return [type(e).__name__ for e in self.events]


def make_result(
	effort: str = "medium",
	status: SessionStatus = SessionStatus.COMPLETED,
	confidence: float = 0.8,
	duration: int = 100,
	timestamp: str | None = None,
	**overrides: Any,
) -> ReasoningResult:
	"""Finished result without running the engine."""
	metadata = ResultMetadata(version="test", config={"maxIterations": 7})
	if timestamp is not None:
		metadata.timestamp = timestamp
	errors = [make_failure()] if status == SessionStatus.COMPLETED_WITH_ERRORS else []
	fields: dict[str, Any] = {
		"id": new_id(),
		"input": "create a file called notes.txt",
		"effort": effort,
		"status": status,
		"confidence": confidence,
		"duration": duration,
		"actions": [make_action()],
		"errors": errors,
		"iterations": 1,
		"metadata": metadata,
	}
	fields.update(overrides)
	return ReasoningResult(**fields)
