"""
Pacing and cancellation primitives.

Thinking delays are cooperative yields that pace external-facing behaviour;
they never do real work. The delay is injectable so tests run instantly.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional

from .errors import ReasoningCancelled

# Receives the effort level's thinking-time ceiling in milliseconds
ThinkingDelay = Callable[[float], Awaitable[None]]


def random_delay(rng: Optional[random.Random] = None) -> ThinkingDelay:
	"""Sleep for a uniformly random time in [0, ceiling)."""
	source = rng or random.Random()

	async def _delay(ceiling_ms: float) -> None:
		if ceiling_ms > 0:
			await asyncio.sleep(source.random() * ceiling_ms / 1000)

	return _delay


async def no_delay(ceiling_ms: float) -> None:
	"""Skip pacing entirely."""
	return None


class CancellationToken:
	"""Cooperative cancellation flag checked between phases and iterations."""

	def __init__(self) -> None:
		self._cancelled = False

	def cancel(self) -> None:
		self._cancelled = True

	@property
	def cancelled(self) -> bool:
		return self._cancelled

	def raise_if_cancelled(self, session_id: str, phase: str) -> None:
		if self._cancelled:
			raise ReasoningCancelled(session_id, phase)
