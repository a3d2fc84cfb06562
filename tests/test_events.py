"""Tests for lifecycle events and the listener registry."""

import logging

from agent_reasoner.events import ListenerRegistry, ReasoningFailed, ReasoningStarted

from .helpers import EventRecorder


def test_emit_in_registration_order():
	registry = ListenerRegistry()
	calls = []
	registry.add(lambda e: calls.append("a"))
	registry.add(lambda e: calls.append("b"))

	registry.emit(ReasoningStarted(id="s1", input="x"))

	assert calls == ["a", "b"]


def test_add_is_idempotent():
	registry = ListenerRegistry()
	recorder = EventRecorder()
	registry.add(recorder)
	registry.add(recorder)

	registry.emit(ReasoningStarted(id="s1", input="x"))

	assert len(registry) == 1
	assert len(recorder.events) == 1


def test_remove_unknown_listener():
	assert ListenerRegistry().remove(lambda e: None) is False


def test_listener_errors_are_logged(caplog):
	registry = ListenerRegistry()
	recorder = EventRecorder()

	def broken(event):
		raise ValueError("boom")

	registry.add(broken)
	registry.add(recorder)

	with caplog.at_level(logging.ERROR, logger="agent_reasoner.events"):
		registry.emit(ReasoningFailed(id="s1", error="x", duration=5))

	assert recorder.kinds == ["ReasoningFailed"]
	assert "ReasoningFailed" in caplog.text
