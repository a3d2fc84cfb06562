"""Shared utilities for visualizer views."""

from datetime import datetime

from rich.markup import escape


def format_duration(milliseconds: float) -> str:
	"""Format a duration for display. e.g. '1.2s', '45ms', '2m 3s'."""
	seconds = milliseconds / 1000
	if seconds < 0.001:
		return "<1ms"
	if seconds < 1.0:
		return f"{seconds * 1000:.0f}ms"
	if seconds < 60.0:
		return f"{seconds:.1f}s"
	minutes = int(seconds // 60)
	secs = seconds % 60
	return f"{minutes}m {secs:.0f}s"


def format_timestamp(iso_str: str) -> str:
	"""Format an ISO timestamp as relative time (e.g. '2m ago') or absolute."""
	try:
		dt = datetime.fromisoformat(iso_str)
		total_secs = int((datetime.now() - dt).total_seconds())
	except (ValueError, TypeError):
		return str(iso_str)[:19]

	if total_secs < 0:
		return iso_str[:19]
	if total_secs < 60:
		return f"{total_secs}s ago"
	if total_secs < 3600:
		return f"{total_secs // 60}m ago"
	if total_secs < 86400:
		return f"{total_secs // 3600}h ago"
	return f"{total_secs // 86400}d ago"


def truncate(text: str, max_len: int = 60) -> str:
	"""Shorten user text for display and escape Rich markup in it."""
	if not text:
		return ""
	text = " ".join(str(text).split())
	if len(text) > max_len:
		text = text[:max_len - 3] + "..."
	return escape(text)


def confidence_style(confidence: float) -> str:
	"""Return a Rich style string for a confidence value."""
	if confidence >= 0.8:
		return "green"
	if confidence >= 0.5:
		return "yellow"
	return "red"


def status_style(status: str) -> str:
	"""Return a Rich style string for a session status value."""
	return {
		"completed": "green",
		"completed_with_errors": "yellow",
		"failed": "red",
	}.get(status, "cyan")
