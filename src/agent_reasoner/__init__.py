"""agent-reasoner - Bounded plan, execute and reflect reasoning core for agents."""

__version__ = "1.0.0"

from .config import EFFORT_CONFIGS, Config, EffortConfig, get_config, load_config
from .errors import ConfigError, ProcessError, ReasoningCancelled, ReasoningError
from .events import ReasoningCompleted, ReasoningFailed, ReasoningStarted
from .models import (
	Action,
	ComplexityResult,
	Plan,
	PlanStep,
	ReasoningContext,
	ReasoningResult,
	Reflection,
	SessionStatus,
)
from .pacing import CancellationToken, no_delay, random_delay
from .reasoning import ReasoningEngine

__all__ = [
	"__version__",
	"Action",
	"CancellationToken",
	"ComplexityResult",
	"Config",
	"ConfigError",
	"EFFORT_CONFIGS",
	"EffortConfig",
	"Plan",
	"PlanStep",
	"ProcessError",
	"ReasoningCancelled",
	"ReasoningCompleted",
	"ReasoningContext",
	"ReasoningEngine",
	"ReasoningError",
	"ReasoningFailed",
	"ReasoningResult",
	"ReasoningStarted",
	"Reflection",
	"SessionStatus",
	"get_config",
	"load_config",
	"no_delay",
	"random_delay",
]
