#!/usr/bin/env python3
import argparse
import json
import os
import random
from datetime import datetime

from postlib import pipeline_settings
from postlib import topic_pool
from postlib import topic_prompt
from postlib import topic_selector
from postlib import usage_store

try:
	import rich.console
except ModuleNotFoundError as error:
	raise RuntimeError(
		"Missing dependency: rich. Install with: pip install -e ."
	) from error


# stdout carries the JSON result, progress goes to stderr
RICH_CONSOLE = rich.console.Console(stderr=True)
MODES = ("smart", "suggestions", "stats", "mark")


#============================================
def log_step(message: str) -> None:
	"""
	Print one timestamped progress line.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	line = f"[select_topic {now_text}] {message}"
	lower = message.lower()
	style = "cyan"
	if ("failed" in lower) or ("error" in lower):
		style = "bold red"
	elif ("warning" in lower) or ("falling back" in lower):
		style = "yellow"
	elif ("selected" in lower) or ("wrote " in lower) or ("marked" in lower):
		style = "green"
	RICH_CONSOLE.print(line, style=style, markup=False, highlight=False)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Pick blog topics from the weighted topic pool and track their usage."
	)
	parser.add_argument(
		"--mode",
		choices=MODES,
		default="smart",
		help="smart: pick one topic; suggestions: pick several; stats: category stats; mark: record a use.",
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for pool and history defaults.",
	)
	parser.add_argument(
		"--pool",
		default=None,
		help="Topic pool JSON path (defaults from settings.yaml).",
	)
	parser.add_argument(
		"--usage-history",
		default=None,
		help="Usage history JSON path (defaults from settings.yaml).",
	)
	parser.add_argument(
		"--category",
		default=topic_selector.ANY,
		help="Restrict smart selection to one category key.",
	)
	parser.add_argument(
		"--difficulty",
		choices=(topic_selector.ANY,) + topic_pool.VALID_DIFFICULTIES,
		default=topic_selector.ANY,
		help="Restrict smart selection to one difficulty.",
	)
	parser.add_argument(
		"--allow-recent",
		dest="avoid_recent",
		action="store_false",
		help="Allow topics used inside the recent-use window.",
	)
	parser.add_argument(
		"--no-balance",
		dest="balance_categories",
		action="store_false",
		help="Skip the weighted category draw.",
	)
	parser.add_argument(
		"--count",
		type=int,
		default=5,
		help="Number of topics for --mode suggestions.",
	)
	parser.add_argument(
		"--topic-id",
		default="",
		help="Topic id for --mode mark.",
	)
	parser.add_argument(
		"--seed",
		type=int,
		default=None,
		help="Random seed for reproducible picks.",
	)
	parser.add_argument(
		"--prompt-output",
		default="",
		help="Write the generation prompt for the smart-selected topic to this path.",
	)
	parser.set_defaults(avoid_recent=True, balance_categories=True)
	args = parser.parse_args(argv)
	return args


#============================================
def build_selector(args: argparse.Namespace, settings: dict) -> topic_selector.TopicSelector:
	"""
	Load the pool and usage store and create a selector.
	"""
	pool_path = args.pool or pipeline_settings.get_topic_pool_path(settings)
	history_path = args.usage_history or pipeline_settings.get_usage_history_path(settings)
	recent_days, top_candidates = pipeline_settings.get_selection_limits(settings)
	log_step(f"Loading topic pool: {os.path.abspath(pool_path)}")
	pool = topic_pool.load_topic_pool(pool_path)
	log_step(
		f"Topic pool has {pool.topic_count()} topic(s) in {len(pool.categories)} category(ies)."
	)
	log_step(f"Using usage history: {os.path.abspath(history_path)}")
	rng = random.Random(args.seed) if args.seed is not None else random.Random()
	return topic_selector.TopicSelector(
		pool,
		store=usage_store.JsonFileUsageStore(history_path),
		rng=rng,
		log_fn=log_step,
		recent_days=recent_days,
		top_candidates=top_candidates,
	)


#============================================
def run_mode(selector: topic_selector.TopicSelector, args: argparse.Namespace) -> dict:
	"""
	Run one CLI mode and return its JSON payload.
	"""
	if args.mode == "suggestions":
		if args.count < 1:
			raise RuntimeError("--count must be >= 1")
		suggestions = selector.get_topic_suggestions(args.count)
		log_step(f"Selected {len(suggestions)} suggestion(s).")
		return {"suggestions": [topic.to_dict() for topic in suggestions]}
	if args.mode == "stats":
		return {"stats": selector.get_category_stats()}
	if args.mode == "mark":
		topic_id = args.topic_id.strip()
		if not topic_id:
			raise RuntimeError("--topic-id is required for --mode mark")
		marked = selector.mark_topic_as_used(topic_id)
		if marked is None:
			log_step(f"Topic id not found, nothing marked: {topic_id}")
			return {"success": False, "topicId": topic_id}
		log_step(f"Marked topic {topic_id} as used (useCount={marked.use_count}).")
		return {"success": True, "topic": marked.to_dict()}

	topic = selector.get_smart_topic(
		difficulty=args.difficulty,
		category=args.category,
		avoid_recent=args.avoid_recent,
		balance_categories=args.balance_categories,
	)
	log_step(f"Selected topic {topic.id}: {topic.title} [{topic.category_name}]")
	return {"topic": topic.to_dict()}


#============================================
def write_prompt(topic_payload: dict, selector: topic_selector.TopicSelector, path: str, settings: dict) -> None:
	"""
	Render and write the generation prompt for one selected topic.
	"""
	topic = selector.get_topic_by_id(topic_payload["id"])
	prompt = topic_prompt.build_topic_prompt(
		topic,
		internal_prefix=pipeline_settings.get_internal_link_prefix(settings),
	)
	output_dir = os.path.dirname(os.path.abspath(path))
	os.makedirs(output_dir, exist_ok=True)
	with open(path, "w", encoding="utf-8") as handle:
		handle.write(prompt + "\n")
	log_step(f"Wrote generation prompt to {os.path.abspath(path)}")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Select topics and print the result as JSON.
	"""
	args = parse_args(argv)
	settings, settings_path = pipeline_settings.load_settings(args.settings)
	log_step(f"Using settings file: {settings_path}")
	if args.prompt_output and args.mode != "smart":
		raise RuntimeError("--prompt-output only applies to --mode smart")
	selector = build_selector(args, settings)
	payload = run_mode(selector, args)
	if args.prompt_output:
		write_prompt(payload["topic"], selector, args.prompt_output, settings)
	print(json.dumps(payload, ensure_ascii=True, indent=2))


if __name__ == "__main__":
	main()
