"""Tests for the complexity analyzer."""

import pytest

from agent_reasoner.analyzer import ComplexityAnalyzer, select_strategy
from agent_reasoner.models import ComplexityLevel, ReasoningContext, Strategy


@pytest.fixture
def analyzer():
	return ComplexityAnalyzer()


def test_empty_input_is_low(analyzer):
	"""Empty input scores nothing."""
	result = analyzer.analyze("")
	assert result.score == 0
	assert result.level == ComplexityLevel.LOW
	assert result.factors == []


def test_long_input_without_keywords(analyzer):
	"""600 characters with no keywords is medium on length alone."""
	result = analyzer.analyze("a" * 600)
	assert result.factors == ["long_input"]
	assert result.score == 2
	assert result.level == ComplexityLevel.MEDIUM


def test_medium_input_length(analyzer):
	result = analyzer.analyze("a" * 300)
	assert result.factors == ["medium_input"]
	assert result.score == 1
	assert result.level == ComplexityLevel.LOW


def test_length_boundaries_are_exclusive(analyzer):
	"""Exactly 200 and 500 characters do not cross the thresholds."""
	assert analyzer.analyze("a" * 200).factors == []
	assert analyzer.analyze("a" * 500).factors == ["medium_input"]


def test_more_than_two_indicators_is_complex_multi_step(analyzer):
	"""Three or more distinct indicator phrases add three points."""
	result = analyzer.analyze("build it then test it, after that ship it next")
	assert "complex_multi_step" in result.factors
	assert result.score >= 3


def test_single_indicator_is_multi_step(analyzer):
	result = analyzer.analyze("build it then ship it")
	assert result.factors == ["multi_step"]
	assert result.score == 1


def test_indicators_count_once_each(analyzer):
	"""Repeating one phrase does not add up."""
	result = analyzer.analyze("then then then then")
	assert result.factors == ["multi_step"]


def test_many_file_operations(analyzer):
	"""More than three file operation keywords add two points."""
	result = analyzer.analyze("create x, modify y, delete z, move w")
	assert "complex_file_ops" in result.factors
	assert result.score == 2


def test_two_file_operations(analyzer):
	result = analyzer.analyze("copy x to y, delete z")
	assert result.factors == ["multiple_file_ops"]
	assert result.score == 1


def test_many_files_in_context(analyzer):
	"""More than ten context files add a point."""
	context = {"files": [f"module_{i}.py" for i in range(11)]}
	result = analyzer.analyze("tidy up", context)
	assert result.factors == ["many_files"]
	assert result.score == 1


def test_ten_files_is_not_many(analyzer):
	context = ReasoningContext.coerce({"files": [f"module_{i}.py" for i in range(10)]})
	assert analyzer.analyze("tidy up", context).factors == []


def test_rules_accumulate(analyzer):
	"""Independent rules add up to a very high score."""
	text = "create a, modify b, delete c, move d then test it, after that ship it next " + "a" * 500
	context = {"files": [f"f{i}" for i in range(20)]}
	result = analyzer.analyze(text, context)
	assert result.factors == ["long_input", "complex_multi_step", "complex_file_ops", "many_files"]
	assert result.score == 8
	assert result.level == ComplexityLevel.VERY_HIGH


@pytest.mark.parametrize(
	("score", "level"),
	[
		(0, ComplexityLevel.LOW),
		(1, ComplexityLevel.LOW),
		(2, ComplexityLevel.MEDIUM),
		(3, ComplexityLevel.MEDIUM),
		(4, ComplexityLevel.HIGH),
		(5, ComplexityLevel.HIGH),
		(6, ComplexityLevel.VERY_HIGH),
		(9, ComplexityLevel.VERY_HIGH),
	],
)
def test_level_thresholds(score, level):
	assert ComplexityAnalyzer.level_for(score) == level


def test_strategy_per_level():
	assert select_strategy(ComplexityLevel.LOW) == Strategy.DIRECT_EXECUTION
	assert select_strategy(ComplexityLevel.MEDIUM) == Strategy.PLANNED_EXECUTION
	assert select_strategy(ComplexityLevel.HIGH) == Strategy.ITERATIVE_EXECUTION
	assert select_strategy(ComplexityLevel.VERY_HIGH) == Strategy.CAUTIOUS_EXECUTION
