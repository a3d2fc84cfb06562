"""
Planner - Turns an instruction into ordered plan steps and candidate actions.

Planning is deterministic apart from the pacing delay:
- Match the instruction against the ordered pattern table
- Sort steps by priority (stable, so table order breaks ties)
- Expand each step through a fixed action template
- Estimate duration and collect risks from the resulting actions

Nothing here understands language; it is keyword and pattern heuristics.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..analyzer import select_strategy
from ..models import (
	Action,
	ActionSource,
	ComplexityResult,
	Plan,
	PlanStep,
	StepType,
)
from ..pacing import ThinkingDelay, no_delay
from .patterns import (
	PLAN_PATTERNS,
	PlanPattern,
	extract_command,
	extract_filename,
	extract_modification,
	extract_package,
)

logger = logging.getLogger(__name__)

GENERAL_TASK_DESCRIPTION = "Execute user request"

# Milliseconds per action type
BASE_DURATIONS: dict[str, int] = {
	"create_file": 2000,
	"install_package": 30000,
	"execute_command": 5000,
	"modify_file": 3000,
}
DEFAULT_DURATION = 2000


@dataclass(frozen=True)
class ActionTemplate:
	"""How one step type becomes an action."""
	type: str
	tool: str
	method: str
	expected_outcome: str
	extract: Optional[Callable[[str], list[str]]] = None
	fixed_parameters: tuple[Any, ...] = ()
	risks: tuple[str, ...] = ()

	def build(self, step: PlanStep) -> Action:
		parameters = self.extract(step.description) if self.extract else list(self.fixed_parameters)
		return Action(
			type=self.type,
			tool=self.tool,
			method=self.method,
			parameters=parameters,
			expected_outcome=self.expected_outcome,
			risks=list(self.risks),
			source=ActionSource.PLAN,
			priority=step.priority,
		)


ACTION_TEMPLATES: dict[StepType, tuple[ActionTemplate, ...]] = {
	StepType.FILE_CREATION: (
		ActionTemplate(
			type="create_file",
			tool="filesystem",
			method="createFile",
			expected_outcome="File created successfully",
			extract=extract_filename,
			risks=("overwrite_existing_file",),
		),
	),
	StepType.PACKAGE_INSTALLATION: (
		ActionTemplate(
			type="install_package",
			tool="exec",
			method="installPackage",
			expected_outcome="Package installed successfully",
			extract=extract_package,
			risks=("network_dependency", "version_conflicts"),
		),
	),
	StepType.COMMAND_EXECUTION: (
		ActionTemplate(
			type="execute_command",
			tool="exec",
			method="executeCommand",
			expected_outcome="Command executed successfully",
			extract=extract_command,
			risks=("command_failure", "permission_issues"),
		),
	),
	StepType.FILE_MODIFICATION: (
		ActionTemplate(
			type="modify_file",
			tool="filesystem",
			method="modifyFile",
			expected_outcome="File modified successfully",
			extract=extract_modification,
			risks=("syntax_errors", "data_loss"),
		),
	),
	# Directory first, then initialization
	StepType.ENVIRONMENT_SETUP: (
		ActionTemplate(
			type="create_directory",
			tool="filesystem",
			method="createDirectory",
			expected_outcome="Project directory created",
			fixed_parameters=("project",),
		),
		ActionTemplate(
			type="initialize_project",
			tool="exec",
			method="executeCommand",
			expected_outcome="Project initialized",
			fixed_parameters=("npm init -y",),
		),
	),
	StepType.GENERAL_TASK: (
		ActionTemplate(
			type="generic_action",
			tool="multiple",
			method="auto_detect",
			expected_outcome="Task completed",
			extract=lambda description: [description],
		),
	),
}


class PlanGenerator:
	"""
	Builds plans from instructions.

	The thinking delay receives the effort level's thinking-time ceiling;
	the engine passes the ceiling in on every call.
	"""

	def __init__(
		self,
		delay: Optional[ThinkingDelay] = None,
		patterns: tuple[PlanPattern, ...] = PLAN_PATTERNS,
	):
		self.delay = delay or no_delay
		self.patterns = patterns

	async def generate_plan(
		self,
		text: str,
		context: Any,
		complexity: ComplexityResult,
		thinking_time_ms: float = 0,
	) -> Plan:
		"""
		Generate a plan for an instruction.

		Args:
			text: The instruction
			context: Caller context (unused by the heuristics)
			complexity: Output of ComplexityAnalyzer for the same instruction
			thinking_time_ms: Pacing ceiling for this call

		Returns:
			Plan with sorted steps, expanded actions, duration and risks
		"""
		await self.delay(thinking_time_ms)

		steps = self.match_steps(text)
		actions: list[Action] = []
		for step in steps:
			actions.extend(self.step_to_actions(step))

		plan = Plan(
			input=text,
			complexity=complexity.level,
			strategy=select_strategy(complexity.level),
			steps=steps,
			actions=actions,
			estimated_duration=estimate_duration(actions),
			risks=identify_risks(actions),
		)
		logger.debug(
			f"Plan {plan.id}: {len(steps)} steps, {len(actions)} actions, "
			f"strategy={plan.strategy.value}"
		)
		return plan

	def match_steps(self, text: str) -> list[PlanStep]:
		"""One step per matching pattern, or a single general_task step."""
		steps = []
		for pattern in self.patterns:
			matched = pattern.search(text or "")
			if matched:
				steps.append(PlanStep(
					type=pattern.step_type,
					tool=pattern.tool,
					priority=pattern.priority,
					description=matched,
				))

		if not steps:
			steps.append(PlanStep(
				type=StepType.GENERAL_TASK,
				tool="multiple",
				priority=1,
				description=GENERAL_TASK_DESCRIPTION,
			))

		# sorted() is stable
		return sorted(steps, key=lambda s: s.priority)

	@staticmethod
	def step_to_actions(step: PlanStep) -> list[Action]:
		templates = ACTION_TEMPLATES.get(step.type, ACTION_TEMPLATES[StepType.GENERAL_TASK])
		return [template.build(step) for template in templates]

	async def generate_direct_actions(
		self,
		text: str,
		context: Any,
		thinking_time_ms: float = 0,
	) -> list[Action]:
		"""Lightweight candidates used when planning is disabled."""
		await self.delay(thinking_time_ms)

		lowered = (text or "").lower()
		actions = []
		if "create" in lowered:
			actions.append(Action(
				type="create_content",
				tool="filesystem",
				method="createFile",
				parameters=extract_filename(text),
				source=ActionSource.DIRECT,
			))
		if "install" in lowered:
			actions.append(Action(
				type="install_package",
				tool="exec",
				method="installPackage",
				parameters=extract_package(text),
				source=ActionSource.DIRECT,
			))
		return actions


def estimate_duration(actions: list[Action]) -> int:
	"""Sum of per-type base durations in milliseconds."""
	return sum(BASE_DURATIONS.get(action.type, DEFAULT_DURATION) for action in actions)


def identify_risks(actions: list[Action]) -> list[str]:
	"""Plan-level risk tags derived from the action mix."""
	risks = []
	if any(a.tool == "filesystem" for a in actions):
		risks.append("potential_file_conflicts")
	if any(a.tool == "exec" for a in actions):
		risks.append("command_execution_failure")
	if any(a.type == "install_package" for a in actions):
		risks.append("network_dependency")
	return risks
