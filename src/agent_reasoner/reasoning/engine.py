"""
Reasoning Engine - Drives the plan -> execute -> reflect state machine.

Responsibilities:
- Own one Session per process() call
- Analyze complexity and (optionally) plan
- Validate candidate actions and queue the accepted ones, bounded by max iterations
- Reflect when the session warrants it and apply the proposed adjustments
- Finalize the result and notify lifecycle listeners

States: thinking -> executing -> (reflecting) -> completed | completed_with_errors,
with failed reachable from any state. Failures abort the whole call; no
partial result is returned.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..analyzer import ComplexityAnalyzer
from ..config import EFFORT_CONFIGS, Config, EffortConfig, get_effort_config
from ..errors import ConfigError, ProcessError, ReasoningError
from ..events import (
	Listener,
	ListenerRegistry,
	ReasoningCompleted,
	ReasoningFailed,
	ReasoningStarted,
)
from ..models import (
	Action,
	ActionSource,
	AddAction,
	Adjustment,
	ModifyAction,
	ReasoningContext,
	ReasoningResult,
	RemoveAction,
	Session,
	SessionStatus,
	ValidationFailure,
	new_id,
	utc_now,
)
from ..pacing import CancellationToken, ThinkingDelay, random_delay
from .finalizer import ResultFinalizer
from .planner import PlanGenerator
from .reflection import ReflectionEngine, should_reflect
from .validator import ActionValidator

logger = logging.getLogger(__name__)

# Accepted spellings for runtime configuration keys
_CONFIG_KEYS = {
	"effort": "effort",
	"maxIterations": "max_iterations",
	"max_iterations": "max_iterations",
	"enableReflection": "enable_reflection",
	"enable_reflection": "enable_reflection",
	"enablePlanning": "enable_planning",
	"enable_planning": "enable_planning",
}


def _normalize_keys(partial: Optional[Mapping[str, Any]]) -> dict[str, Any]:
	"""Keep recognised keys only, in snake_case. None values are dropped."""
	if not partial:
		return {}
	return {
		_CONFIG_KEYS[key]: value
		for key, value in partial.items()
		if key in _CONFIG_KEYS and value is not None
	}


def _positive_int(value: Any) -> int:
	if isinstance(value, bool) or not isinstance(value, int) or value < 1:
		raise ConfigError(f"maxIterations must be a positive integer, got {value!r}")
	return value


def _known_effort(value: Any) -> bool:
	return isinstance(value, str) and value in EFFORT_CONFIGS


@dataclass(frozen=True)
class RunSettings:
	"""Configuration snapshot taken when a session starts."""
	effort: str
	config: EffortConfig
	enable_reflection: bool
	enable_planning: bool

	@property
	def reflection_enabled(self) -> bool:
		return self.enable_reflection and self.config.reflection_enabled


class ReasoningEngine:
	"""
	Bounded heuristic planner.

	Collaborators are injectable; by default they share one thinking delay
	bounded by the effort level's ceiling.
	"""

	def __init__(
		self,
		effort: str = "medium",
		max_iterations: Optional[int] = None,
		enable_reflection: bool = True,
		enable_planning: bool = True,
		delay: Optional[ThinkingDelay] = None,
		analyzer: Optional[ComplexityAnalyzer] = None,
		planner: Optional[PlanGenerator] = None,
		validator: Optional[ActionValidator] = None,
		reflector: Optional[ReflectionEngine] = None,
		finalizer: Optional[ResultFinalizer] = None,
	):
		"""
		Initialize the engine.

		Args:
			effort: Effort level name (low, medium, high, maximum)
			max_iterations: Override for the effort's iteration bound
			enable_reflection: Allow the reflection phase
			enable_planning: Run the planning phase (direct actions otherwise)
			delay: Thinking delay; random pacing when omitted
		"""
		self.effort = effort
		self.current_config = get_effort_config(effort)
		if max_iterations is not None:
			self.current_config = self.current_config.with_max_iterations(_positive_int(max_iterations))
		self.max_iterations = self.current_config.max_iterations
		self.enable_reflection = enable_reflection
		self.enable_planning = enable_planning

		delay = delay or random_delay()
		self.analyzer = analyzer or ComplexityAnalyzer()
		self.planner = planner or PlanGenerator(delay=delay)
		self.validator = validator or ActionValidator()
		self.reflector = reflector or ReflectionEngine(delay=delay)
		self.finalizer = finalizer or ResultFinalizer()

		self._listeners = ListenerRegistry()

	@classmethod
	def from_config(cls, config: Config, **kwargs: Any) -> "ReasoningEngine":
		"""Build an engine from loaded configuration."""
		return cls(
			effort=config.effort,
			max_iterations=config.max_iterations,
			enable_reflection=config.enable_reflection,
			enable_planning=config.enable_planning,
			**kwargs,
		)

	# ------------------------------------------------------------------
	# Listeners
	# ------------------------------------------------------------------

	def add_listener(self, listener: Listener) -> None:
		self._listeners.add(listener)

	def remove_listener(self, listener: Listener) -> bool:
		return self._listeners.remove(listener)

	# ------------------------------------------------------------------
	# Configuration
	# ------------------------------------------------------------------

	def update_config(self, partial: Mapping[str, Any]) -> None:
		"""
		Apply recognised keys; unknown keys and unknown effort names are ignored.

		Takes effect for sessions started afterwards.
		"""
		changes = _normalize_keys(partial)

		# Validate everything before assigning anything
		effort = self.effort
		config = self.current_config
		if _known_effort(changes.get("effort")):
			effort = changes["effort"]
			config = EFFORT_CONFIGS[effort]
		if "max_iterations" in changes:
			config = config.with_max_iterations(_positive_int(changes["max_iterations"]))

		self.effort = effort
		self.current_config = config
		self.max_iterations = config.max_iterations

		if "enable_reflection" in changes:
			self.enable_reflection = bool(changes["enable_reflection"])

		if "enable_planning" in changes:
			self.enable_planning = bool(changes["enable_planning"])

		logger.info(f"Reasoning engine configuration updated: {changes}")

	def get_status(self) -> dict[str, Any]:
		"""Point-in-time snapshot of the engine configuration."""
		return {
			"effort": self.effort,
			"maxIterations": self.max_iterations,
			"enableReflection": self.enable_reflection,
			"enablePlanning": self.enable_planning,
			"currentConfig": self.current_config.to_dict(),
		}

	def _snapshot(self, overrides: Optional[Mapping[str, Any]]) -> RunSettings:
		"""Settings for one session: engine state plus per-call overrides."""
		changes = _normalize_keys(overrides)

		effort = self.effort
		config = self.current_config
		if _known_effort(changes.get("effort")) and changes["effort"] != effort:
			effort = changes["effort"]
			config = EFFORT_CONFIGS[effort]
		if "max_iterations" in changes:
			config = config.with_max_iterations(_positive_int(changes["max_iterations"]))

		return RunSettings(
			effort=effort,
			config=config,
			enable_reflection=bool(changes.get("enable_reflection", self.enable_reflection)),
			enable_planning=bool(changes.get("enable_planning", self.enable_planning)),
		)

	# ------------------------------------------------------------------
	# Processing
	# ------------------------------------------------------------------

	async def process(
		self,
		input: str,
		*,
		context: Any = None,
		conversation: Any = None,
		config: Optional[Mapping[str, Any]] = None,
		cancel_token: Optional[CancellationToken] = None,
	) -> ReasoningResult:
		"""
		Run one reasoning session.

		Args:
			input: Instruction text
			context: Files, working directory and conversation (dict or ReasoningContext)
			conversation: Opaque conversation state carried on the session
			config: Per-call overrides (effort, maxIterations, enableReflection, enablePlanning)
			cancel_token: Checked before each iteration and before reflection

		Returns:
			ReasoningResult

		Raises:
			ProcessError: Any unexpected failure; the original is chained
			ReasoningCancelled: The token was cancelled
		"""
		if not isinstance(input, str):
			raise TypeError(f"input must be a string, got {type(input).__name__}")

		settings = self._snapshot(config)
		token = cancel_token or CancellationToken()
		session = Session(
			input=input,
			conversation=conversation,
			max_iterations=settings.config.max_iterations,
		)
		start = time.monotonic()
		phase = "planning"

		self._listeners.emit(ReasoningStarted(id=session.id, input=input))
		logger.info(
			f"Starting reasoning session {session.id} (effort={settings.effort}): {input[:100]!r}"
		)

		try:
			session.context = ReasoningContext.coerce(context)
			await self._thinking_phase(session, settings)

			phase = "executing"
			await self._execution_phase(session, settings, token)

			phase = "reflecting"
			token.raise_if_cancelled(session.id, phase)
			if should_reflect(session, settings.reflection_enabled):
				await self._reflection_phase(session, settings)

			phase = "finalizing"
			result = self.finalizer.finalize(
				session,
				effort=settings.effort,
				config=settings.config.to_dict(),
				duration_ms=_elapsed_ms(start),
			)
		except Exception as exc:
			duration = _elapsed_ms(start)
			session.status = SessionStatus.FAILED
			logger.error(f"Reasoning session {session.id} failed during {phase} after {duration}ms: {exc}")
			self._listeners.emit(ReasoningFailed(id=session.id, error=str(exc), duration=duration))
			if isinstance(exc, ReasoningError):
				raise
			raise ProcessError(
				str(exc) or type(exc).__name__,
				session_id=session.id,
				phase=phase,
				duration_ms=duration,
			) from exc

		self._listeners.emit(ReasoningCompleted(result=result))
		logger.info(
			f"Reasoning session {session.id} {result.status.value}: "
			f"{len(result.actions)} actions, {len(result.errors)} errors, "
			f"{result.iterations} iterations in {result.duration}ms"
		)
		return result

	async def _thinking_phase(self, session: Session, settings: RunSettings) -> None:
		session.status = SessionStatus.THINKING
		session.complexity = self.analyzer.analyze(session.input, session.context)

		if not settings.enable_planning:
			return

		logger.debug(f"Planning session {session.id} (complexity={session.complexity.level.value})")
		session.plan = await self.planner.generate_plan(
			session.input,
			session.context,
			session.complexity,
			thinking_time_ms=settings.config.thinking_time_ms,
		)

	async def _execution_phase(
		self,
		session: Session,
		settings: RunSettings,
		token: CancellationToken,
	) -> None:
		session.status = SessionStatus.EXECUTING

		if session.plan is not None:
			candidates = session.plan.actions
		else:
			candidates = await self.planner.generate_direct_actions(
				session.input,
				session.context,
				thinking_time_ms=settings.config.thinking_time_ms,
			)

		for candidate in candidates:
			token.raise_if_cancelled(session.id, "executing")
			if not session.has_capacity:
				logger.warning(
					f"Max iterations ({session.max_iterations}) reached in session {session.id}; "
					f"{len(candidates)} candidates, {len(session.actions)} accepted"
				)
				break
			self._validate_and_accept(session, candidate, candidate.source)

		logger.debug(
			f"Execution phase for {session.id}: {len(session.actions)} actions, "
			f"{len(session.errors)} errors"
		)

	async def _reflection_phase(self, session: Session, settings: RunSettings) -> None:
		session.status = SessionStatus.REFLECTING

		reflection = await self.reflector.reflect(
			session,
			thinking_time_ms=settings.config.thinking_time_ms,
		)
		session.reflections.append(reflection)

		if not reflection.needs_adjustment:
			return

		adjustments = self.reflector.propose_adjustments(session, reflection)
		for adjustment in adjustments:
			self._apply_adjustment(session, adjustment)

		logger.debug(f"Applied {len(adjustments)} adjustments to session {session.id}")

	def _apply_adjustment(self, session: Session, adjustment: Adjustment) -> None:
		"""Apply one adjustment. Unknown ids are no-ops; adds respect the bound."""
		if isinstance(adjustment, AddAction):
			if not session.has_capacity:
				logger.warning(
					f"Dropping reflection action {adjustment.action.type} in session {session.id}: "
					f"iteration bound {session.max_iterations} reached"
				)
				return
			self._validate_and_accept(session, adjustment.action, ActionSource.REFLECTION)

		elif isinstance(adjustment, ModifyAction):
			index = session.find_action(adjustment.action_id)
			if index != -1:
				session.actions[index] = adjustment.changes.apply(session.actions[index])

		elif isinstance(adjustment, RemoveAction):
			session.actions = [a for a in session.actions if a.id != adjustment.action_id]

	def _validate_and_accept(self, session: Session, candidate: Action, source: ActionSource) -> bool:
		"""Validate a candidate; record it as an error or queue it."""
		validation = self.validator.validate(candidate, session.context)
		if not validation.valid:
			session.errors.append(ValidationFailure(
				action=candidate.type or "unknown",
				errors=validation.errors,
				warnings=validation.warnings,
			))
			return False

		for warning in validation.warnings:
			session.warnings.append(f"{candidate.type}: {warning}")
			logger.warning(f"Session {session.id}: {candidate.type} {candidate.parameters!r}: {warning}")

		session.actions.append(candidate.model_copy(
			update={
				"id": new_id(),
				"timestamp": utc_now(),
				"iteration": session.iteration,
				"status": "planned",
				"source": source,
			},
			deep=True,
		))
		session.iteration += 1
		return True


def _elapsed_ms(start: float) -> int:
	return int((time.monotonic() - start) * 1000)
