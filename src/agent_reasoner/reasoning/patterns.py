"""
Pattern table and parameter extractors for instruction analysis.

The table is ordered: position is precedence, and ties in step priority
keep table order after sorting. Each regex matches the trigger phrase plus
the object that follows it when there is one ("create a file called
notes.txt", "install package lodash"), so the matched text is enough for
the extractors. Extend by appending a PlanPattern.
"""

import re
from dataclasses import dataclass
from typing import Optional

from ..models import StepType

# Words that end an object phrase rather than name something
_STOP = r"(?!(?:and|then|to|for|with|in|into|from|also|next|after)\b)"
_NAME = r"[@\w][\w@\-./]*"
_FILE_TOKEN = re.compile(r"[\w\-./~]*\w\.[A-Za-z0-9]+")
_QUOTED = re.compile(r"\"([^\"]+)\"|'([^']+)'|`([^`]+)`")
_TRAILING_PUNCTUATION = ".,;:!?\"'`)"

DEFAULT_FILENAME = "new_file.txt"
DEFAULT_PACKAGE = "express"
DEFAULT_COMMAND = 'echo "Hello World"'
DEFAULT_MODIFICATION_TARGET = "file.txt"
MODIFIED_CONTENT = "modified content"


@dataclass(frozen=True)
class PlanPattern:
	"""One row of the instruction pattern table."""
	step_type: StepType
	tool: str
	priority: int
	regex: re.Pattern

	def search(self, text: str) -> Optional[str]:
		match = self.regex.search(text)
		return match.group(0).strip() if match else None


PLAN_PATTERNS: tuple[PlanPattern, ...] = (
	PlanPattern(
		step_type=StepType.FILE_CREATION,
		tool="filesystem",
		priority=1,
		regex=re.compile(
			r"\bcreate.*?\b(?:file|directory|folder)s?\b"
			r"(?:\s+(?:called|named)\s+[^\s,;]+|\s+[\w\-./~]*\w\.[A-Za-z0-9]+)?",
			re.IGNORECASE,
		),
	),
	PlanPattern(
		step_type=StepType.PACKAGE_INSTALLATION,
		tool="exec",
		priority=2,
		regex=re.compile(
			rf"\binstall.*?\b(?:package|dependency|module)s?\b(?:\s+{_STOP}{_NAME})?",
			re.IGNORECASE,
		),
	),
	PlanPattern(
		step_type=StepType.COMMAND_EXECUTION,
		tool="exec",
		priority=3,
		regex=re.compile(
			r"\brun.*?\b(?:command|script)s?\b"
			r"(?:\s*:?\s*(?:\"[^\"]*\"|'[^']*'|`[^`]*`))?",
			re.IGNORECASE,
		),
	),
	PlanPattern(
		step_type=StepType.FILE_MODIFICATION,
		tool="filesystem",
		priority=2,
		regex=re.compile(
			r"\bmodify.*?\b(?:file|code)s?\b(?:\s+[\w\-./~]*\w\.[A-Za-z0-9]+)?",
			re.IGNORECASE,
		),
	),
	PlanPattern(
		step_type=StepType.ENVIRONMENT_SETUP,
		tool="multiple",
		priority=1,
		regex=re.compile(r"\bset\s?up.*?\b(?:project|environment)\b", re.IGNORECASE),
	),
)


def _clean(token: str) -> str:
	return token.strip().strip("\"'`").rstrip(_TRAILING_PUNCTUATION)


def _find_file_token(text: str) -> Optional[str]:
	for raw in text.split():
		token = _clean(raw)
		if _FILE_TOKEN.fullmatch(token):
			return token
	return None


def _find_quoted(text: str) -> Optional[str]:
	match = _QUOTED.search(text)
	if not match:
		return None
	return next(group for group in match.groups() if group is not None)


def extract_filename(description: str) -> list[str]:
	"""Target of a create action: 'called/named X', else a file-like token."""
	match = re.search(r"\b(?:called|named)\s+([^\s,;]+)", description, re.IGNORECASE)
	if match and _clean(match.group(1)):
		return [_clean(match.group(1))]
	token = _find_file_token(description)
	return [token] if token else [DEFAULT_FILENAME]


def extract_package(description: str) -> list[str]:
	"""Package name from 'package X', 'install X package' or 'install X'."""
	candidates = (
		rf"\b(?:package|dependency|module)s?\s+{_STOP}({_NAME})",
		rf"\binstall\s+(?:(?:the|a|an)\s+)?(?!(?:the|a|an)\b)({_NAME})\s+(?:package|dependency|module)",
		rf"\binstall\s+{_STOP}(?!(?:the|a|an|package|dependency|module)s?\b)({_NAME})",
	)
	for pattern in candidates:
		match = re.search(pattern, description, re.IGNORECASE)
		if match and _clean(match.group(1)):
			return [_clean(match.group(1))]
	return [DEFAULT_PACKAGE]


def extract_command(description: str) -> list[str]:
	"""Command string: quoted text first, then whatever follows the verb."""
	quoted = _find_quoted(description)
	if quoted:
		return [quoted.strip()]
	for pattern in (r"\b(?:command|script)s?\s*:?\s+(.+)", r"\b(?:run|execute)\s+(.+)"):
		match = re.search(pattern, description, re.IGNORECASE)
		if match and match.group(1).strip():
			return [match.group(1).strip()]
	return [DEFAULT_COMMAND]


def extract_modification(description: str) -> list[str]:
	"""[target, content] for a modify action."""
	target = _find_file_token(description)
	if not target:
		match = re.search(
			r"\bmodify\s+(?!(?:the|a|an|this|that|my|file|code)\b)([^\s,;]+)",
			description,
			re.IGNORECASE,
		)
		target = _clean(match.group(1)) if match else None
	return [target or DEFAULT_MODIFICATION_TARGET, MODIFIED_CONTENT]
