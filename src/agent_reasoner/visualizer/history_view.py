"""Rich views for archived reasoning history."""

from typing import Optional

from rich.console import Console
from rich.table import Table

from ..history import ReasoningHistoryStore
from .utils import confidence_style, format_duration, format_timestamp, status_style, truncate


def render_history(
	store: ReasoningHistoryStore,
	console: Optional[Console] = None,
	status: Optional[str] = None,
	effort: Optional[str] = None,
	since: Optional[str] = None,
	limit: int = 20,
) -> None:
	"""Render a chronological table of archived results."""
	console = console or Console()
	records = store.query(status=status, effort=effort, since=since, limit=limit)

	if not records:
		console.print("[dim]No reasoning history recorded yet.[/dim]")
		return

	table = Table(title=f"Reasoning History (last {len(records)})")
	table.add_column("Time")
	table.add_column("Input")
	table.add_column("Effort", style="cyan")
	table.add_column("Actions", justify="right")
	table.add_column("Errors", justify="right")
	table.add_column("Confidence", justify="right")
	table.add_column("Duration", justify="right")
	table.add_column("Status", justify="center")

	for r in records:
		style = status_style(r.status)
		conf_style = confidence_style(r.confidence)
		table.add_row(
			format_timestamp(r.timestamp),
			truncate(r.input, 40),
			r.effort,
			str(r.action_count),
			str(r.error_count),
			f"[{conf_style}]{r.confidence:.2f}[/{conf_style}]",
			format_duration(r.duration_ms),
			f"[{style}]{r.status}[/{style}]",
		)

	console.print(table)


def render_history_stats(store: ReasoningHistoryStore, console: Optional[Console] = None) -> None:
	"""Render a table of aggregate stats per effort level."""
	console = console or Console()
	stats = store.get_stats()

	if not stats:
		console.print("[dim]No reasoning history recorded yet.[/dim]")
		return

	table = Table(title="Reasoning Statistics")
	table.add_column("Effort", style="cyan")
	table.add_column("Runs", justify="right")
	table.add_column("Avg Confidence", justify="right")
	table.add_column("Avg Duration", justify="right")
	table.add_column("Error %", justify="right")
	table.add_column("Last Run")

	for s in stats:
		error_style = "green" if s.error_rate <= 10 else ("yellow" if s.error_rate <= 30 else "red")
		table.add_row(
			s.effort,
			str(s.run_count),
			f"{s.avg_confidence:.2f}",
			format_duration(s.avg_duration_ms),
			f"[{error_style}]{s.error_rate:.1f}%[/{error_style}]",
			format_timestamp(s.last_run),
		)

	console.print(table)
