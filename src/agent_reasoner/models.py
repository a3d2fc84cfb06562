"""
Reasoning Models - Pydantic schemas for sessions, plans, actions and results.

Defines the records produced by each phase of a reasoning session: the
complexity estimate, the plan with its steps and candidate actions, the
accepted actions, reflections with their adjustments, and the final
result handed back to the caller.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_id() -> str:
	return str(uuid4())


def utc_now() -> str:
	return datetime.now().isoformat()


class SessionStatus(str, Enum):
	"""Lifecycle state of a reasoning session."""
	THINKING = "thinking"
	EXECUTING = "executing"
	REFLECTING = "reflecting"
	COMPLETED = "completed"
	COMPLETED_WITH_ERRORS = "completed_with_errors"
	FAILED = "failed"


class ComplexityLevel(str, Enum):
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"
	VERY_HIGH = "very_high"


class Strategy(str, Enum):
	"""Execution strategy chosen from the complexity level."""
	DIRECT_EXECUTION = "direct_execution"
	PLANNED_EXECUTION = "planned_execution"
	ITERATIVE_EXECUTION = "iterative_execution"
	CAUTIOUS_EXECUTION = "cautious_execution"


class StepType(str, Enum):
	FILE_CREATION = "file_creation"
	PACKAGE_INSTALLATION = "package_installation"
	COMMAND_EXECUTION = "command_execution"
	FILE_MODIFICATION = "file_modification"
	ENVIRONMENT_SETUP = "environment_setup"
	GENERAL_TASK = "general_task"


class ActionSource(str, Enum):
	"""Where an accepted action came from."""
	PLAN = "plan"
	DIRECT = "direct"
	REFLECTION = "reflection"


class Assessment(str, Enum):
	POSITIVE = "positive"
	NEEDS_ATTENTION = "needs_attention"


class FileRef(BaseModel):
	"""A file known to the caller."""
	model_config = ConfigDict(extra="allow")

	name: Optional[str] = None


class ReasoningContext(BaseModel):
	"""Caller-supplied situational context. Read-only to the engine."""
	model_config = ConfigDict(extra="allow", populate_by_name=True)

	files: list[FileRef] = Field(default_factory=list)
	working_directory: Optional[str] = Field(default=None, alias="workingDirectory")
	conversation: Any = Field(default=None)

	@classmethod
	def coerce(cls, value: Any) -> "ReasoningContext":
		"""Accept None, a dict (camelCase or snake_case keys) or a context."""
		if value is None:
			return cls()
		if isinstance(value, cls):
			return value
		data = dict(value)
		data["files"] = [
			f if isinstance(f, (dict, FileRef)) else {"name": str(f)}
			for f in data.get("files") or []
		]
		return cls.model_validate(data)


class ComplexityResult(BaseModel):
	"""Heuristic difficulty estimate of an instruction."""
	score: int = 0
	level: ComplexityLevel = ComplexityLevel.LOW
	factors: list[str] = Field(default_factory=list)


class PlanStep(BaseModel):
	"""One step matched from the instruction."""
	id: str = Field(default_factory=new_id)
	type: StepType
	tool: str
	priority: int
	description: str


class Action(BaseModel):
	"""
	The atomic unit handed to external executors.

	type and tool default to empty strings so a missing value is caught by
	the validator instead of at construction.
	"""
	id: str = Field(default_factory=new_id)
	type: str = ""
	tool: str = ""
	method: str = ""
	parameters: list[Any] = Field(default_factory=list)
	expected_outcome: str = Field(default="", description="Human readable outcome")
	risks: list[str] = Field(default_factory=list)
	status: str = Field(default="planned")
	iteration: int = 0
	source: ActionSource = ActionSource.PLAN
	priority: int = Field(default=1, description="Lower runs earlier")
	timestamp: Optional[str] = Field(default=None)

	@property
	def first_parameter(self) -> Optional[str]:
		if not self.parameters or self.parameters[0] is None:
			return None
		return str(self.parameters[0])


class Plan(BaseModel):
	"""Output of the planning phase."""
	id: str = Field(default_factory=new_id)
	input: str
	complexity: ComplexityLevel
	strategy: Strategy
	steps: list[PlanStep] = Field(default_factory=list)
	actions: list[Action] = Field(default_factory=list)
	estimated_duration: int = Field(default=0, description="Milliseconds")
	risks: list[str] = Field(default_factory=list)


class Reflection(BaseModel):
	"""Post-execution self-assessment."""
	id: str = Field(default_factory=new_id)
	timestamp: str = Field(default_factory=utc_now)
	assessment: Assessment = Assessment.POSITIVE
	confidence: float = Field(default=0.8, ge=0.0, le=1.0)
	observations: list[str] = Field(default_factory=list)
	recommendations: list[str] = Field(default_factory=list)
	needs_adjustment: bool = False


class ActionPatch(BaseModel):
	"""The mutable subset of Action fields a reflection may change."""
	model_config = ConfigDict(extra="forbid")

	priority: Optional[int] = None
	status: Optional[str] = None
	parameters: Optional[list[Any]] = None

	def apply(self, action: Action) -> Action:
		return action.model_copy(update=self.model_dump(exclude_none=True))


class AddAction(BaseModel):
	kind: Literal["add_action"] = "add_action"
	action: Action


class ModifyAction(BaseModel):
	kind: Literal["modify_action"] = "modify_action"
	action_id: str
	changes: ActionPatch


class RemoveAction(BaseModel):
	kind: Literal["remove_action"] = "remove_action"
	action_id: str


Adjustment = Annotated[
	Union[AddAction, ModifyAction, RemoveAction],
	Field(discriminator="kind"),
]


class ValidationResult(BaseModel):
	valid: bool = True
	errors: list[str] = Field(default_factory=list)
	warnings: list[str] = Field(default_factory=list)


class ValidationFailure(BaseModel):
	"""A rejected action, recorded on the session instead of raised."""
	type: Literal["validation"] = "validation"
	action: str
	errors: list[str] = Field(default_factory=list)
	warnings: list[str] = Field(default_factory=list)


class Session(BaseModel):
	"""
	Mutable state for one process() call.

	Owned by a single engine call; never shared between calls.
	"""
	id: str = Field(default_factory=new_id)
	input: str
	context: ReasoningContext = Field(default_factory=ReasoningContext)
	conversation: Any = None
	max_iterations: int
	iteration: int = 0
	complexity: Optional[ComplexityResult] = None
	plan: Optional[Plan] = None
	actions: list[Action] = Field(default_factory=list)
	reflections: list[Reflection] = Field(default_factory=list)
	errors: list[ValidationFailure] = Field(default_factory=list)
	warnings: list[str] = Field(default_factory=list)
	status: SessionStatus = SessionStatus.THINKING
	started_at: str = Field(default_factory=utc_now)

	@property
	def has_capacity(self) -> bool:
		return self.iteration < self.max_iterations

	def find_action(self, action_id: str) -> int:
		"""Index of the action with this id, or -1."""
		for index, action in enumerate(self.actions):
			if action.id == action_id:
				return index
		return -1


class ResultMetadata(BaseModel):
	timestamp: str = Field(default_factory=utc_now)
	version: str
	config: dict[str, Any] = Field(default_factory=dict)


class ReasoningResult(BaseModel):
	"""Terminal record returned by process()."""
	id: str
	input: str
	effort: str
	complexity: Optional[ComplexityResult] = None
	plan: Optional[Plan] = None
	actions: list[Action] = Field(default_factory=list)
	reflections: list[Reflection] = Field(default_factory=list)
	errors: list[ValidationFailure] = Field(default_factory=list)
	warnings: list[str] = Field(default_factory=list)
	iterations: int = 0
	duration: int = Field(default=0, description="Milliseconds")
	tokens_used: int = 0
	confidence: float = 0.8
	status: SessionStatus
	metadata: ResultMetadata

	def execution_order(self) -> list[Action]:
		"""Actions stably sorted by priority; array order is left untouched."""
		return sorted(self.actions, key=lambda a: a.priority)
