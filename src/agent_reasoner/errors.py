"""Exception hierarchy for the reasoning core."""

from typing import Optional


class ReasoningError(Exception):
	"""Base class for all agent-reasoner errors."""


class ConfigError(ReasoningError, ValueError):
	"""Invalid configuration value (config.toml, environment or update)."""


class ProcessError(ReasoningError):
	"""
	Fatal failure of a single process() call.

	Raised from the original exception; no partial result exists when
	this is raised.
	"""

	def __init__(
		self,
		message: str,
		session_id: str,
		phase: str,
		duration_ms: Optional[int] = None,
	):
		super().__init__(message)
		self.session_id = session_id
		self.phase = phase
		self.duration_ms = duration_ms

	def __str__(self) -> str:
		return f"[{self.phase}] {self.args[0]} (session {self.session_id})"


class ReasoningCancelled(ReasoningError):
	"""A session was cancelled through its CancellationToken."""

	def __init__(self, session_id: str, phase: str):
		super().__init__(f"Session {session_id} cancelled during {phase}")
		self.session_id = session_id
		self.phase = phase
