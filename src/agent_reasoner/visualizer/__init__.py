"""Visualizer package - Rich terminal views for reasoning results and history."""

from .history_view import render_history, render_history_stats
from .result_view import render_result, render_result_summary

__all__ = [
	"render_history",
	"render_history_stats",
	"render_result",
	"render_result_summary",
]
