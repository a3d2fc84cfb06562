"""
Validator - Structural and safety gate for candidate actions.

Key Principle: validation never raises. Every rule is evaluated so the
result carries all applicable errors, and an invalid action is data the
engine records, not a failure of the session.

Rules:
- type and tool are required
- filesystem paths containing '..' produce a warning
- exec commands containing a denylisted fragment are rejected
"""

import logging
from typing import Any, Iterable, Optional

from ..models import Action, ValidationResult

logger = logging.getLogger(__name__)

DANGEROUS_COMMANDS = ("rm -rf", "sudo", "format", "del")

MISSING_TYPE = "Action type is required"
MISSING_TOOL = "Tool is required"
PATH_TRAVERSAL_WARNING = "path traversal risk: path contains '..'"
DANGEROUS_COMMAND_ERROR = "dangerous command detected"


class ActionValidator:
	"""Checks a single action against structural and safety rules."""

	def __init__(self, dangerous_commands: Optional[Iterable[str]] = None):
		self.dangerous_commands = tuple(
			DANGEROUS_COMMANDS if dangerous_commands is None else dangerous_commands
		)

	def validate(self, action: Action, context: Any = None) -> ValidationResult:
		result = ValidationResult()

		if not action.type:
			result.valid = False
			result.errors.append(MISSING_TYPE)

		if not action.tool:
			result.valid = False
			result.errors.append(MISSING_TOOL)

		target = action.first_parameter

		if action.tool == "filesystem" and target and ".." in target:
			result.warnings.append(PATH_TRAVERSAL_WARNING)

		if action.tool == "exec" and target:
			matched = self._find_dangerous(target)
			if matched:
				result.valid = False
				result.errors.append(DANGEROUS_COMMAND_ERROR)
				logger.warning(f"Rejected {action.type or 'untyped'} action: '{matched}' in {target[:80]!r}")

		return result

	def _find_dangerous(self, command: str) -> Optional[str]:
		for fragment in self.dangerous_commands:
			if fragment in command:
				return fragment
		return None
