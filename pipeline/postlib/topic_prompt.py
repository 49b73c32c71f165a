import os

from postlib import content_quality
from postlib import pipeline_settings
from postlib import topic_pool


TOPIC_PROMPT_NAME = "topic_blog_post.txt"
WORDS_PER_MINUTE = 250

_TEMPLATE_CACHE = {}


#============================================
def load_prompt_template(prompt_name: str) -> str:
	"""
	Load a prompt template from pipeline/prompts/.
	"""
	if not prompt_name:
		raise ValueError("prompt_name is required")
	prompt_root = os.path.join(pipeline_settings.get_repo_root(), "pipeline", "prompts")
	path = os.path.join(prompt_root, prompt_name)
	if path not in _TEMPLATE_CACHE:
		if not os.path.isfile(path):
			raise FileNotFoundError(f"Prompt file not found: {path}")
		with open(path, "r", encoding="utf-8") as handle:
			_TEMPLATE_CACHE[path] = handle.read()
	return _TEMPLATE_CACHE[path]


#============================================
def fill_template(template: str, values: dict[str, str]) -> str:
	"""
	Replace {{token}} placeholders; unknown tokens stay as written.
	"""
	rendered = template or ""
	for key, value in values.items():
		rendered = rendered.replace("{{" + key + "}}", value if value is not None else "")
	return rendered


#============================================
def compute_word_target(read_time_minutes: int) -> int:
	"""
	Convert a reading time into a word target inside the ideal band.
	"""
	low, high = content_quality.IDEAL_WORD_RANGE
	raw_target = int(read_time_minutes or 0) * WORDS_PER_MINUTE
	return max(low, min(high, raw_target))


#============================================
def keyword_hints(topic: topic_pool.Topic) -> str:
	keywords = topic.extra.get("keywords")
	if isinstance(keywords, str):
		keywords = [keywords]
	if not isinstance(keywords, list) or not keywords:
		return topic.title
	return ", ".join(str(item) for item in keywords)


#============================================
def build_topic_prompt(
	topic: topic_pool.Topic,
	word_target: int | None = None,
	internal_prefix: str = pipeline_settings.DEFAULT_INTERNAL_LINK_PREFIX,
) -> str:
	"""
	Render the blog-post generation prompt for one selected topic.
	"""
	if word_target is None:
		word_target = compute_word_target(topic.estimated_read_time)
	if word_target < 1:
		raise ValueError(f"word_target must be >= 1; got {word_target}")
	template = load_prompt_template(TOPIC_PROMPT_NAME)
	rendered = fill_template(
		template,
		{
			"title": topic.title,
			"category": topic.category_name,
			"difficulty": topic.difficulty,
			"keywords": keyword_hints(topic),
			"read_time": str(topic.estimated_read_time),
			"word_target": str(word_target),
			"internal_prefix": internal_prefix,
		},
	)
	return rendered.rstrip() + f"\nTarget {word_target} words for this blog post."
