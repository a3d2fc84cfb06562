"""Instruction complexity analyzer - additive keyword heuristics."""

from typing import Any, Optional

from .models import ComplexityLevel, ComplexityResult, ReasoningContext, Strategy


class ComplexityAnalyzer:
    """Scores an instruction plus its context into a complexity level."""

    # Phrases suggesting the instruction chains several steps
    MULTI_STEP_INDICATORS = [
        "then", "after", "next", "also", "and then", "followed by",
        "create and", "build and", "setup and", "install and",
    ]

    # Keywords for filesystem operations
    FILE_OPERATIONS = ["create", "modify", "delete", "move", "copy"]

    LONG_INPUT_CHARS = 500
    MEDIUM_INPUT_CHARS = 200
    MANY_FILES = 10

    def analyze(self, text: str, context: Optional[Any] = None) -> ComplexityResult:
        """
        Score an instruction.

        Pure function: every rule is evaluated independently and contributes
        points plus a factor tag. Empty input scores 0 (level low).
        """
        text = text or ""
        lowered = text.lower()
        score = 0
        factors: list[str] = []

        # Length
        if len(text) > self.LONG_INPUT_CHARS:
            score += 2
            factors.append("long_input")
        elif len(text) > self.MEDIUM_INPUT_CHARS:
            score += 1
            factors.append("medium_input")

        # Multi-step phrasing
        multi_step_count = self._count_present(lowered, self.MULTI_STEP_INDICATORS)
        if multi_step_count > 2:
            score += 3
            factors.append("complex_multi_step")
        elif multi_step_count > 0:
            score += 1
            factors.append("multi_step")

        # File operations
        file_op_count = self._count_present(lowered, self.FILE_OPERATIONS)
        if file_op_count > 3:
            score += 2
            factors.append("complex_file_ops")
        elif file_op_count > 1:
            score += 1
            factors.append("multiple_file_ops")

        # Context size
        if len(ReasoningContext.coerce(context).files) > self.MANY_FILES:
            score += 1
            factors.append("many_files")

        return ComplexityResult(score=score, level=self.level_for(score), factors=factors)

    @staticmethod
    def level_for(score: int) -> ComplexityLevel:
        """Map a score onto a level."""
        if score >= 6:
            return ComplexityLevel.VERY_HIGH
        if score >= 4:
            return ComplexityLevel.HIGH
        if score >= 2:
            return ComplexityLevel.MEDIUM
        return ComplexityLevel.LOW

    @staticmethod
    def _count_present(text: str, keywords: list[str]) -> int:
        """Count keywords that occur at least once (substring match)."""
        return sum(1 for keyword in keywords if keyword in text)


_STRATEGIES = {
    ComplexityLevel.LOW: Strategy.DIRECT_EXECUTION,
    ComplexityLevel.MEDIUM: Strategy.PLANNED_EXECUTION,
    ComplexityLevel.HIGH: Strategy.ITERATIVE_EXECUTION,
    ComplexityLevel.VERY_HIGH: Strategy.CAUTIOUS_EXECUTION,
}


def select_strategy(level: ComplexityLevel) -> Strategy:
    """Pick the execution strategy for a complexity level."""
    return _STRATEGIES.get(level, Strategy.PLANNED_EXECUTION)
