"""CLI for agent-reasoner: run, status, and history commands."""

import argparse
import asyncio
import json
import os
import re
import sys
from datetime import datetime, timedelta

from .config import EFFORT_CONFIGS, load_config
from .errors import ReasoningError
from .logging_config import setup_logging
from .pacing import no_delay
from .reasoning import ReasoningEngine


def _parse_since(since_str: str) -> str:
	"""Parse a duration string like '1h', '24h', '7d' into an ISO timestamp."""
	match = re.match(r"^(\d+)([hmd])$", since_str)
	if not match:
		print(f"Invalid --since format: {since_str} (use e.g. 1h, 24h, 7d)")
		sys.exit(1)
	amount = int(match.group(1))
	unit = match.group(2)
	if unit == "h":
		delta = timedelta(hours=amount)
	elif unit == "m":
		delta = timedelta(minutes=amount)
	else:
		delta = timedelta(days=amount)
	return (datetime.now() - delta).isoformat()


def _run_overrides(args: argparse.Namespace) -> dict:
	"""Per-call overrides from run flags; unset flags leave the config alone."""
	overrides: dict = {}
	if args.effort:
		overrides["effort"] = args.effort
	if args.max_iterations is not None:
		overrides["maxIterations"] = args.max_iterations
	if args.no_reflection:
		overrides["enableReflection"] = False
	if args.no_planning:
		overrides["enablePlanning"] = False
	return overrides


def cmd_run(args: argparse.Namespace) -> None:
	"""Run one reasoning session and print the result."""
	from .history import ReasoningHistoryStore
	from .visualizer.result_view import render_result

	config = load_config()
	setup_logging(level=args.log_level or config.log_level, log_dir=config.log_dir)

	engine = ReasoningEngine.from_config(config, delay=no_delay if args.fast else None)
	if not args.no_history:
		engine.add_listener(ReasoningHistoryStore(config.history_db_path).listener())

	context = {
		"workingDirectory": args.cwd or os.getcwd(),
		"files": args.file or [],
	}
	result = asyncio.run(engine.process(args.text, context=context, config=_run_overrides(args)))

	if args.json:
		print(result.model_dump_json(indent=2))
	else:
		render_result(result)


def cmd_status(args: argparse.Namespace) -> None:
	"""Print the effective engine configuration and storage paths."""
	config = load_config()
	engine = ReasoningEngine.from_config(config)

	status = engine.get_status()
	status["paths"] = {
		"configDir": str(config.config_dir),
		"dataDir": str(config.data_dir),
		"historyDb": str(config.history_db_path),
		"logDir": str(config.log_dir),
	}
	if args.efforts:
		status["efforts"] = {name: cfg.to_dict() for name, cfg in EFFORT_CONFIGS.items()}
	print(json.dumps(status, indent=2))


def cmd_history(args: argparse.Namespace) -> None:
	"""Show archived reasoning results."""
	from .history import ReasoningHistoryStore
	from .visualizer.history_view import render_history, render_history_stats
	from .visualizer.result_view import render_result

	config = load_config()
	store = ReasoningHistoryStore(config.history_db_path)

	if args.show:
		result = store.get_result(args.show)
		if result is None:
			print(f"No result '{args.show}' found.")
			sys.exit(1)
		render_result(result)
	elif args.clear:
		deleted = store.clear()
		print(f"Deleted {deleted} records.")
	elif args.stats:
		render_history_stats(store)
	else:
		since = _parse_since(args.since) if args.since else None
		render_history(store, status=args.status, effort=args.effort, since=since, limit=args.limit)


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="agent-reasoner",
		description="Bounded plan, execute and reflect reasoning for agent instructions",
	)
	subparsers = parser.add_subparsers(dest="command")

	# run
	run_parser = subparsers.add_parser("run", help="Reason about an instruction")
	run_parser.add_argument("text", help="Instruction text")
	run_parser.add_argument("--effort", choices=list(EFFORT_CONFIGS), default=None, help="Effort level")
	run_parser.add_argument("--max-iterations", type=int, default=None, help="Override the iteration bound")
	run_parser.add_argument("--no-reflection", action="store_true", help="Skip the reflection phase")
	run_parser.add_argument("--no-planning", action="store_true", help="Use direct actions instead of a plan")
	run_parser.add_argument("--cwd", type=str, default=None, help="Working directory for the context")
	run_parser.add_argument("--file", action="append", default=None, help="Known file (repeatable)")
	run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
	run_parser.add_argument("--no-history", action="store_true", help="Don't archive the result")
	run_parser.add_argument("--fast", action="store_true", help="Skip thinking-time pacing")
	run_parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING or ERROR")
	run_parser.set_defaults(func=cmd_run)

	# status
	status_parser = subparsers.add_parser("status", help="Show effective configuration")
	status_parser.add_argument("--efforts", action="store_true", help="Include the effort table")
	status_parser.set_defaults(func=cmd_status)

	# history
	history_parser = subparsers.add_parser("history", help="Show archived results")
	history_parser.add_argument("--status", type=str, default=None, help="Filter by status")
	history_parser.add_argument("--effort", choices=list(EFFORT_CONFIGS), default=None, help="Filter by effort")
	history_parser.add_argument("--since", type=str, default=None, help="Filter by time (e.g. 1h, 24h, 7d)")
	history_parser.add_argument("--limit", type=int, default=20, help="Max results")
	history_parser.add_argument("--stats", action="store_true", help="Show per-effort statistics")
	history_parser.add_argument("--show", type=str, default=None, help="Show one archived result by ID")
	history_parser.add_argument("--clear", action="store_true", help="Delete all archived results")
	history_parser.set_defaults(func=cmd_history)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	try:
		args.func(args)
	except ReasoningError as e:
		print(f"Error: {e}", file=sys.stderr)
		sys.exit(1)
