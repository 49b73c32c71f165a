import os
import sys

import pytest

import git_file_utils


REPO_ROOT = git_file_utils.get_repo_root()
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import topic_pool
from postlib import topic_prompt


#============================================
def make_topic(read_time: int = 8, extra: dict | None = None) -> topic_pool.Topic:
	return topic_pool.Topic(
		id="web-1",
		title="Static Site Generators Compared",
		category_key="web",
		category_name="Web Development",
		category_weight=0.3,
		difficulty="intermediate",
		estimated_read_time=read_time,
		extra=extra if extra is not None else {"keywords": ["ssg", "jamstack"]},
	)


#============================================
def test_load_prompt_template_returns_string() -> None:
	"""
	The bundled topic prompt exists and has tokens.
	"""
	text = topic_prompt.load_prompt_template(topic_prompt.TOPIC_PROMPT_NAME)
	assert "{{title}}" in text


#============================================
def test_load_prompt_template_missing_file_raises() -> None:
	"""
	Missing prompt files raise FileNotFoundError.
	"""
	with pytest.raises(FileNotFoundError):
		topic_prompt.load_prompt_template("nonexistent_prompt_file.txt")


#============================================
def test_fill_template_leaves_unknown_tokens() -> None:
	"""
	Only supplied tokens are replaced.
	"""
	rendered = topic_prompt.fill_template("{{a}} and {{b}}", {"a": "x"})
	assert rendered == "x and {{b}}"


#============================================
@pytest.mark.parametrize(
	"read_time, expected",
	[(2, 1500), (8, 2000), (20, 3000), (0, 1500)],
)
def test_compute_word_target_clamps(read_time, expected) -> None:
	"""
	Word targets stay inside the 1500-3000 band.
	"""
	assert topic_prompt.compute_word_target(read_time) == expected


#============================================
def test_keyword_hints_fall_back_to_title() -> None:
	"""
	Topics without keywords use their title as the hint.
	"""
	topic = make_topic(extra={})
	assert topic_prompt.keyword_hints(topic) == topic.title
	assert topic_prompt.keyword_hints(make_topic()) == "ssg, jamstack"


#============================================
def test_build_topic_prompt_fills_topic_fields() -> None:
	"""
	The rendered prompt names the topic and ends with the word target.
	"""
	prompt = topic_prompt.build_topic_prompt(make_topic(), internal_prefix="/posts/")
	assert "Static Site Generators Compared" in prompt
	assert "Web Development" in prompt
	assert "ssg, jamstack" in prompt
	assert "/posts/" in prompt
	assert "{{" not in prompt
	assert prompt.endswith("Target 2000 words for this blog post.")


#============================================
def test_build_topic_prompt_rejects_bad_target() -> None:
	"""
	Word targets below one are rejected.
	"""
	with pytest.raises(ValueError):
		topic_prompt.build_topic_prompt(make_topic(), word_target=0)
