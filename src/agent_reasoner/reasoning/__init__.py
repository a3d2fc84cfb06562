"""Reasoning pipeline: planning, validation, reflection and finalization."""

from .engine import ReasoningEngine, RunSettings
from .finalizer import ResultFinalizer
from .planner import PlanGenerator
from .reflection import ReflectionEngine, should_reflect
from .validator import ActionValidator

__all__ = [
	"ActionValidator",
	"PlanGenerator",
	"ReasoningEngine",
	"ReflectionEngine",
	"ResultFinalizer",
	"RunSettings",
	"should_reflect",
]
