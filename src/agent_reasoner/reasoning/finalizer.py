"""Result finalization: derived metrics and the terminal result record."""

import math
from typing import Any

from .. import __version__
from ..models import (
	ComplexityLevel,
	ReasoningResult,
	ResultMetadata,
	Session,
	SessionStatus,
)

CHARS_PER_TOKEN = 4
PLAN_TOKENS = 500
REFLECTION_TOKENS = 200
ACTION_TOKENS = 50

BASE_CONFIDENCE = 0.8
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0


class ResultFinalizer:
	"""Computes confidence and token estimates and assembles results."""

	@staticmethod
	def estimate_tokens(session: Session) -> int:
		tokens = len(session.input) / CHARS_PER_TOKEN
		if session.plan is not None:
			tokens += PLAN_TOKENS
		tokens += len(session.reflections) * REFLECTION_TOKENS
		tokens += len(session.actions) * ACTION_TOKENS
		# Halves round up
		return math.floor(tokens + 0.5)

	@staticmethod
	def calculate_confidence(session: Session) -> float:
		confidence = BASE_CONFIDENCE
		confidence -= 0.1 * len(session.errors)

		level = session.complexity.level if session.complexity else None
		if level == ComplexityLevel.HIGH and session.plan is None:
			confidence -= 0.2

		if session.plan is not None and session.actions:
			confidence += 0.1

		if session.reflections:
			confidence += 0.05

		return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, round(confidence, 2)))

	def finalize(
		self,
		session: Session,
		*,
		effort: str,
		config: dict[str, Any],
		duration_ms: int,
	) -> ReasoningResult:
		"""Set the terminal status on the session and build its result."""
		session.status = (
			SessionStatus.COMPLETED_WITH_ERRORS if session.errors else SessionStatus.COMPLETED
		)

		return ReasoningResult(
			id=session.id,
			input=session.input,
			effort=effort,
			complexity=session.complexity,
			plan=session.plan,
			actions=list(session.actions),
			reflections=list(session.reflections),
			errors=list(session.errors),
			warnings=list(session.warnings),
			iterations=session.iteration,
			duration=duration_ms,
			tokens_used=self.estimate_tokens(session),
			confidence=self.calculate_confidence(session),
			status=session.status,
			metadata=ResultMetadata(version=__version__, config=dict(config)),
		)
