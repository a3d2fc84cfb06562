"""
Reflection - Self-assessment of a session and the corrections it proposes.

Heuristics are evaluated independently and their observations accumulate.
Only a reflection that needs adjustment produces adjustments, and those
adjustments are applied (and bounded) by the engine, not here.
"""

import logging
from typing import Optional

from ..models import (
	Action,
	ActionPatch,
	ActionSource,
	AddAction,
	Adjustment,
	Assessment,
	ComplexityLevel,
	ModifyAction,
	Reflection,
	Session,
)
from ..pacing import ThinkingDelay, no_delay

logger = logging.getLogger(__name__)

HIGH_ACTION_COUNT = 10
REFLECT_ACTION_COUNT = 5

# Priority given to filesystem actions that should wait for installs
DEPRIORITIZED_PRIORITY = 10

OBS_HIGH_ACTION_COUNT = "high action count"
OBS_FILE_OPS_WITHOUT_SETUP = "file ops without dependency setup"


def should_reflect(session: Session, reflection_enabled: bool = True) -> bool:
	"""Reflection runs on errors, busy sessions, or hard instructions."""
	if not reflection_enabled:
		return False
	complexity = session.complexity.level if session.complexity else None
	return (
		bool(session.errors)
		or len(session.actions) > REFLECT_ACTION_COUNT
		or complexity in (ComplexityLevel.HIGH, ComplexityLevel.VERY_HIGH)
	)


class ReflectionEngine:
	"""Assesses accumulated session state."""

	def __init__(self, delay: Optional[ThinkingDelay] = None):
		self.delay = delay or no_delay

	async def reflect(self, session: Session, thinking_time_ms: float = 0) -> Reflection:
		await self.delay(thinking_time_ms)

		reflection = Reflection()

		if session.errors:
			reflection.assessment = Assessment.NEEDS_ATTENTION
			reflection.needs_adjustment = True
			reflection.confidence = 0.4
			reflection.observations.append(f"{len(session.errors)} validation errors detected")
			reflection.recommendations.append("Resolve validation errors before proceeding")

		if len(session.actions) > HIGH_ACTION_COUNT:
			reflection.observations.append(OBS_HIGH_ACTION_COUNT)
			reflection.recommendations.append("Consider decomposing into smaller tasks")

		has_file_ops = any(a.tool == "filesystem" for a in session.actions)
		has_installs = any(a.type == "install_package" for a in session.actions)
		if has_file_ops and not has_installs:
			reflection.observations.append(OBS_FILE_OPS_WITHOUT_SETUP)
			reflection.recommendations.append("Check whether dependencies need to be installed first")

		logger.debug(
			f"Reflection for {session.id}: {reflection.assessment.value}, "
			f"{len(reflection.observations)} observations"
		)
		return reflection

	def propose_adjustments(self, session: Session, reflection: Reflection) -> list[Adjustment]:
		"""Corrections for a reflection, in the order they must be applied."""
		if not reflection.needs_adjustment:
			return []

		adjustments: list[Adjustment] = []

		if session.errors:
			adjustments.append(AddAction(action=Action(
				type="validate_environment",
				tool="filesystem",
				method="checkPath",
				parameters=["."],
				expected_outcome="Environment validated",
				source=ActionSource.REFLECTION,
			)))

		adjustments.extend(self._deprioritize_early_file_ops(session))
		return adjustments

	@staticmethod
	def _deprioritize_early_file_ops(session: Session) -> list[ModifyAction]:
		"""
		Tag filesystem actions positioned before the first install.

		Only the priority changes; array positions are left as they are.
		"""
		first_install = next(
			(i for i, a in enumerate(session.actions) if a.type == "install_package"),
			None,
		)
		if first_install is None:
			return []

		return [
			ModifyAction(action_id=action.id, changes=ActionPatch(priority=DEPRIORITIZED_PRIORITY))
			for action in session.actions[:first_install]
			if action.tool == "filesystem"
		]
