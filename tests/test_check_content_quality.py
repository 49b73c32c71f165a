import json
import os
import sys

import pytest

import git_file_utils


REPO_ROOT = git_file_utils.get_repo_root()
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

import check_content_quality


GOOD_POST = (
	"---\n"
	"title: \"" + ("T" * 55) + "\"\n"
	"metaDescription: \"" + ("M" * 152) + "\"\n"
	"---\n"
	"\n"
	"## One\n\nYou know what? We don't guess.\n\n"
	"## Two\n\nSee [a](/blog/a) and [b](/blog/b).\n\n"
	"## Three\n\nRead [docs](https://example.com/docs).\n"
)

BARE_POST = "Just a line of text without frontmatter.\n"


#============================================
def write_posts(tmp_path) -> str:
	content_dir = tmp_path / "posts"
	content_dir.mkdir()
	(content_dir / "good.md").write_text(GOOD_POST, encoding="utf-8")
	(content_dir / "bare.md").write_text(BARE_POST, encoding="utf-8")
	return str(content_dir)


#============================================
def settings_args(tmp_path) -> list[str]:
	return ["--settings", str(tmp_path / "missing_settings.yaml")]


#============================================
def test_grade_post_uses_frontmatter_title(tmp_path) -> None:
	"""
	Frontmatter title labels the post; missing titles use a placeholder.
	"""
	content_dir = write_posts(tmp_path)
	good = check_content_quality.grade_post(os.path.join(content_dir, "good.md"), "/blog/")
	bare = check_content_quality.grade_post(os.path.join(content_dir, "bare.md"), "/blog/")
	assert good["title"] == "T" * 55
	assert good["report"].seo_score == 100
	assert bare["title"] == "No title"
	assert bare["report"].seo_score == 0


#============================================
def test_directory_run_writes_json_report(tmp_path, capsys) -> None:
	"""
	Grading a directory writes per-post reports and a summary.
	"""
	content_dir = write_posts(tmp_path)
	report_path = tmp_path / "out" / "quality.json"
	check_content_quality.main(
		settings_args(tmp_path)
		+ ["--content-dir", content_dir, "--json-output", str(report_path)]
	)
	output = capsys.readouterr().out
	assert "Quality analysis complete." in output
	payload = json.loads(report_path.read_text(encoding="utf-8"))
	assert [item["file"] for item in payload["posts"]] == ["bare.md", "good.md"]
	assert payload["summary"]["postCount"] == 2
	assert "seoScore" in payload["posts"][0]


#============================================
def test_single_post_prints_suggestions(tmp_path, capsys) -> None:
	"""
	A single graded post also gets improvement suggestions.
	"""
	content_dir = write_posts(tmp_path)
	check_content_quality.main(settings_args(tmp_path) + [os.path.join(content_dir, "bare.md")])
	output = capsys.readouterr().out
	assert "Suggestion:" in output


#============================================
def test_empty_directory_grades_nothing(tmp_path, capsys) -> None:
	"""
	An empty content directory logs and returns.
	"""
	empty_dir = tmp_path / "empty"
	empty_dir.mkdir()
	check_content_quality.main(settings_args(tmp_path) + ["--content-dir", str(empty_dir)])
	output = capsys.readouterr().out
	assert "No Markdown posts found" in output


#============================================
def test_missing_content_directory_raises(tmp_path) -> None:
	"""
	A missing content directory stops the run.
	"""
	with pytest.raises(FileNotFoundError):
		check_content_quality.main(
			settings_args(tmp_path) + ["--content-dir", str(tmp_path / "missing")]
		)


#============================================
@pytest.mark.parametrize("score, style", [(95, "green"), (65, "yellow"), (10, "red")])
def test_score_style(score, style) -> None:
	assert check_content_quality.score_style(score) == style
