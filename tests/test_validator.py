"""Tests for the action validator."""

import pytest

from agent_reasoner.reasoning.validator import (
	DANGEROUS_COMMAND_ERROR,
	MISSING_TOOL,
	MISSING_TYPE,
	PATH_TRAVERSAL_WARNING,
	ActionValidator,
)

from .helpers import make_action


@pytest.fixture
def validator():
	return ActionValidator()


def test_valid_file_action(validator):
	result = validator.validate(make_action())
	assert result.valid is True
	assert result.errors == []
	assert result.warnings == []


def test_missing_type_and_tool_both_reported(validator):
	"""All rules run; errors accumulate."""
	result = validator.validate(make_action(type="", tool=""))
	assert result.valid is False
	assert result.errors == [MISSING_TYPE, MISSING_TOOL]


def test_path_traversal_is_a_warning(validator):
	result = validator.validate(make_action(parameters=["../../etc/passwd"]))
	assert result.valid is True
	assert result.warnings == [PATH_TRAVERSAL_WARNING]


def test_traversal_only_checked_for_filesystem(validator):
	result = validator.validate(make_action(tool="exec", type="execute_command", parameters=["cd .."]))
	assert result.warnings == []


@pytest.mark.parametrize(
	"command",
	["sudo apt install curl", "rm -rf /", "format c:", "del *.*", "echo ok && sudo reboot"],
)
def test_dangerous_commands_rejected(validator, command):
	result = validator.validate(make_action(type="execute_command", tool="exec", parameters=[command]))
	assert result.valid is False
	assert result.errors == [DANGEROUS_COMMAND_ERROR]


def test_sudo_rejected_regardless_of_other_parameters(validator):
	"""Only the first parameter is inspected; extra ones cannot rescue it."""
	action = make_action(type="execute_command", tool="exec", parameters=["sudo ls", "--safe", {"dry_run": True}])
	assert validator.validate(action).valid is False
	assert validator.validate(action).valid is False


def test_substring_match_is_literal(validator):
	"""The denylist matches substrings, so 'model' trips 'del'."""
	action = make_action(type="install_package", tool="exec", parameters=["model-utils"])
	assert validator.validate(action).valid is False


def test_safe_exec_command(validator):
	action = make_action(type="execute_command", tool="exec", parameters=["npm test"])
	assert validator.validate(action).valid is True


def test_exec_without_parameters_is_valid(validator):
	action = make_action(type="execute_command", tool="exec", parameters=[])
	assert validator.validate(action).valid is True


def test_non_string_parameter_is_stringified(validator):
	action = make_action(type="execute_command", tool="exec", parameters=[["sudo", "ls"]])
	assert validator.validate(action).valid is False


def test_custom_denylist():
	validator = ActionValidator(dangerous_commands=["shutdown"])
	assert validator.validate(make_action(tool="exec", parameters=["sudo ls"])).valid is True
	assert validator.validate(make_action(tool="exec", parameters=["shutdown -h now"])).valid is False
