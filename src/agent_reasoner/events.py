"""Lifecycle events and the listener registry that delivers them."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Union

if TYPE_CHECKING:
	from .models import ReasoningResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReasoningStarted:
	id: str
	input: str


@dataclass(frozen=True)
class ReasoningCompleted:
	result: "ReasoningResult"


@dataclass(frozen=True)
class ReasoningFailed:
	id: str
	error: str
	duration: int  # milliseconds


LifecycleEvent = Union[ReasoningStarted, ReasoningCompleted, ReasoningFailed]
Listener = Callable[[LifecycleEvent], None]


class ListenerRegistry:
	"""Synchronous, ordered delivery of lifecycle events."""

	def __init__(self) -> None:
		self._listeners: list[Listener] = []

	def add(self, listener: Listener) -> None:
		if listener not in self._listeners:
			self._listeners.append(listener)

	def remove(self, listener: Listener) -> bool:
		"""Unregister a listener. Returns False if it was not registered."""
		try:
			self._listeners.remove(listener)
		except ValueError:
			return False
		return True

	def __len__(self) -> int:
		return len(self._listeners)

	def emit(self, event: LifecycleEvent) -> None:
		"""Deliver an event to every listener in registration order."""
		for listener in list(self._listeners):
			try:
				listener(event)
			except Exception:
				logger.exception(f"Listener {listener!r} failed on {type(event).__name__}")
