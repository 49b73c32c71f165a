#!/usr/bin/env python3
import argparse
import json
import os
from datetime import datetime

from postlib import content_quality
from postlib import pipeline_settings
from postlib import pipeline_text_utils
from postlib import post_frontmatter

try:
	import rich.console
	import rich.markup
	import rich.table
except ModuleNotFoundError as error:
	raise RuntimeError(
		"Missing dependency: rich. Install with: pip install -e ."
	) from error


#============================================
def log_step(console: rich.console.Console, message: str, style: str = "cyan") -> None:
	"""
	Print one timestamped progress line with color.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	console.print(f"[check_content_quality {now_text}] {message}", style=style, markup=False)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Grade blog posts for SEO, readability and human-like tone."
	)
	parser.add_argument(
		"posts",
		nargs="*",
		help="Markdown post files to grade (default: every post in the content directory).",
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for quality defaults.",
	)
	parser.add_argument(
		"--content-dir",
		default=None,
		help="Directory of Markdown posts (defaults from settings.yaml).",
	)
	parser.add_argument(
		"--threshold",
		type=int,
		default=None,
		help="Overall score below which a post needs improvement (defaults from settings.yaml).",
	)
	parser.add_argument(
		"--json-output",
		default="",
		help="Optional path for a JSON copy of all reports and the summary.",
	)
	args = parser.parse_args(argv)
	return args


#============================================
def score_style(score: int) -> str:
	"""
	Pick a display color for one 0-100 score.
	"""
	if score >= 80:
		return "green"
	if score >= 60:
		return "yellow"
	return "red"


#============================================
def grade_post(path: str, internal_prefix: str) -> dict:
	"""
	Load one post and grade it.
	"""
	metadata, body = post_frontmatter.load_post(path)
	report = content_quality.validate_content_quality(body, metadata, internal_prefix)
	title = metadata.get("title") if isinstance(metadata.get("title"), str) else ""
	return {
		"file": os.path.basename(path),
		"title": title or "No title",
		"report": report,
	}


#============================================
def render_post_table(console: rich.console.Console, results: list[dict]) -> None:
	"""
	Render per-post score table.
	"""
	table = rich.table.Table(title="Content Quality")
	table.add_column("Post", style="bold cyan")
	table.add_column("SEO", justify="right")
	table.add_column("Readability", justify="right")
	table.add_column("Human-like", justify="right")
	table.add_column("Overall", justify="right")
	for item in results:
		report = item["report"]
		cells = [
			f"[{score_style(score)}]{score}[/]"
			for score in (
				report.seo_score,
				report.readability_score,
				report.human_like_score,
				report.overall_score,
			)
		]
		label = pipeline_text_utils.trim_to_char_limit(item["title"], 48)
		table.add_row(rich.markup.escape(label), *cells)
	console.print(table)


#============================================
def render_issues(console: rich.console.Console, results: list[dict]) -> None:
	for item in results:
		issues = item["report"].issues
		if not issues:
			continue
		console.print(f"{item['file']}:", style="bold yellow", markup=False)
		for issue in issues:
			console.print(f"  - {issue}", style="yellow", markup=False)


#============================================
def render_summary(console: rich.console.Console, summary: dict) -> None:
	"""
	Render averages, top posts and recommendations.
	"""
	table = rich.table.Table(title="Quality Summary")
	table.add_column("Metric", style="bold cyan")
	table.add_column("Average", justify="right")
	for label, key in (
		("SEO", "averageSeoScore"),
		("Readability", "averageReadabilityScore"),
		("Human-like", "averageHumanLikeScore"),
		("Overall", "averageOverallScore"),
	):
		value = summary[key]
		table.add_row(label, f"[{score_style(value)}]{value}[/]")
	console.print(table)

	console.print("Top posts:", style="bold green")
	for index, (label, score) in enumerate(summary["topPosts"], start=1):
		console.print(f"  {index}. {label} ({score}/100)", markup=False)
	if summary["needsImprovement"]:
		console.print("Posts needing improvement:", style="bold red")
		for label, score in summary["needsImprovement"]:
			console.print(f"  - {label} ({score}/100)", markup=False)
	for recommendation in summary["recommendations"]:
		console.print(f"Recommendation: {recommendation}", style="cyan", markup=False)


#============================================
def write_json_report(path: str, results: list[dict], summary: dict) -> None:
	payload = {
		"posts": [
			{"file": item["file"], "title": item["title"], **item["report"].to_dict()}
			for item in results
		],
		"summary": summary,
	}
	output_dir = os.path.dirname(os.path.abspath(path))
	os.makedirs(output_dir, exist_ok=True)
	with open(path, "w", encoding="utf-8") as handle:
		json.dump(payload, handle, ensure_ascii=True, indent=2)
		handle.write("\n")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Grade posts and print a report.
	"""
	args = parse_args(argv)
	console = rich.console.Console()
	settings, settings_path = pipeline_settings.load_settings(args.settings)
	log_step(console, f"Using settings file: {settings_path}")
	internal_prefix = pipeline_settings.get_internal_link_prefix(settings)
	threshold = args.threshold
	if threshold is None:
		threshold = pipeline_settings.get_improvement_threshold(settings)

	if args.posts:
		post_paths = [os.path.abspath(path) for path in args.posts]
	else:
		content_dir = args.content_dir or pipeline_settings.get_content_dir(settings)
		log_step(console, f"Scanning content directory: {os.path.abspath(content_dir)}")
		post_paths = post_frontmatter.list_markdown_posts(content_dir)
	if not post_paths:
		log_step(console, "No Markdown posts found; nothing to grade.", style="yellow")
		return

	log_step(console, f"Grading {len(post_paths)} post(s); internal link prefix={internal_prefix}")
	results = [grade_post(path, internal_prefix) for path in post_paths]
	render_post_table(console, results)
	render_issues(console, results)

	if len(results) == 1:
		suggestions = content_quality.improvement_suggestions(results[0]["report"])
		for suggestion in suggestions:
			console.print(f"Suggestion: {suggestion}", style="cyan", markup=False)

	summary = content_quality.summarize_reports(
		[(item["title"], item["report"]) for item in results],
		improvement_threshold=threshold,
	)
	render_summary(console, summary)
	if args.json_output:
		write_json_report(args.json_output, results, summary)
		log_step(console, f"Wrote JSON report to {os.path.abspath(args.json_output)}", style="green")
	log_step(console, "Quality analysis complete.", style="green")


if __name__ == "__main__":
	main()
