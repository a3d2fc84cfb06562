"""Rich views for a single reasoning result."""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.tree import Tree

from ..models import ActionSource, Assessment, ReasoningResult
from .utils import confidence_style, format_duration, status_style, truncate

SOURCE_ICONS = {
	ActionSource.PLAN: "[cyan][P][/cyan]",
	ActionSource.DIRECT: "[blue][D][/blue]",
	ActionSource.REFLECTION: "[magenta][R][/magenta]",
}

ASSESSMENT_ICONS = {
	Assessment.POSITIVE: "[green][ok][/green]",
	Assessment.NEEDS_ATTENTION: "[yellow][!][/yellow]",
}


def render_result_summary(result: ReasoningResult, console: Optional[Console] = None) -> None:
	"""Render a summary panel for a result."""
	console = console or Console()

	style = status_style(result.status.value)
	conf_style = confidence_style(result.confidence)

	lines = []
	lines.append(f"[bold]Input:[/bold] {truncate(result.input, 100)}")
	lines.append(f"[bold]Status:[/bold] [{style}]{result.status.value}[/{style}]")
	lines.append(f"[bold]Effort:[/bold] {result.effort}")
	if result.complexity:
		factors = ", ".join(result.complexity.factors) or "none"
		lines.append(
			f"[bold]Complexity:[/bold] {result.complexity.level.value} "
			f"(score {result.complexity.score}; {factors})"
		)
	lines.append(f"[bold]Confidence:[/bold] [{conf_style}]{result.confidence:.2f}[/{conf_style}]")
	lines.append("")
	lines.append(
		f"[bold]Iterations:[/bold] {result.iterations}/{result.metadata.config.get('maxIterations', '?')}  |  "
		f"[bold]Duration:[/bold] {format_duration(result.duration)}  |  "
		f"[bold]Tokens:[/bold] ~{result.tokens_used}"
	)

	if result.errors:
		lines.append("")
		lines.append(f"[bold red]Errors:[/bold red] {len(result.errors)}")
		for failure in result.errors:
			lines.append(f"  - {failure.action}: {truncate('; '.join(failure.errors), 100)}")

	if result.warnings:
		lines.append("")
		lines.append(f"[bold yellow]Warnings:[/bold yellow] {len(result.warnings)}")
		for warning in result.warnings:
			lines.append(f"  - {truncate(warning, 100)}")

	console.print(Panel("\n".join(lines), title=f"Reasoning: {result.id}", border_style=style))


def render_result(result: ReasoningResult, console: Optional[Console] = None) -> None:
	"""Render the summary panel plus a tree of plan, actions and reflections."""
	console = console or Console()

	render_result_summary(result, console)

	tree = Tree(f"[bold]{truncate(result.input, 80)}[/bold]")

	if result.plan is not None:
		plan = result.plan
		plan_branch = tree.add(
			f"[bold]Plan[/bold] [dim]({plan.strategy.value}, "
			f"~{format_duration(plan.estimated_duration)})[/dim]"
		)
		for step in plan.steps:
			plan_branch.add(f"[dim]p{step.priority}[/dim] {step.type.value} [dim]- {truncate(step.description)}[/dim]")
		if plan.risks:
			plan_branch.add(f"[yellow]risks:[/yellow] {', '.join(plan.risks)}")

	actions_branch = tree.add(f"[bold]Actions[/bold] [dim]({len(result.actions)}, execution order)[/dim]")
	for action in result.execution_order():
		icon = SOURCE_ICONS.get(action.source, "[ ]")
		params = ", ".join(str(p) for p in action.parameters)
		actions_branch.add(
			f"{icon} [dim]#{action.iteration} p{action.priority}[/dim] "
			f"{action.type} [dim]{action.tool}.{action.method}({truncate(params, 40)})[/dim]"
		)

	for reflection in result.reflections:
		icon = ASSESSMENT_ICONS.get(reflection.assessment, "[ ]")
		branch = tree.add(
			f"{icon} [bold]Reflection[/bold] [dim]({reflection.assessment.value}, "
			f"confidence {reflection.confidence:.2f})[/dim]"
		)
		for observation in reflection.observations:
			branch.add(observation)
		for recommendation in reflection.recommendations:
			branch.add(f"[dim]-> {recommendation}[/dim]")

	console.print(tree)
