import glob
import os

import yaml


FRONTMATTER_DELIMITER = "---"


#============================================
def split_frontmatter(text: str) -> tuple[dict, str]:
	"""
	Split Markdown into YAML frontmatter metadata and body text.
	"""
	normalized = (text or "").replace("\r\n", "\n")
	lines = normalized.split("\n")
	if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
		return {}, normalized
	closing_index = -1
	for index in range(1, len(lines)):
		if lines[index].strip() == FRONTMATTER_DELIMITER:
			closing_index = index
			break
	if closing_index < 0:
		return {}, normalized
	header_text = "\n".join(lines[1:closing_index])
	body = "\n".join(lines[closing_index + 1:]).lstrip("\n")
	try:
		metadata = yaml.safe_load(header_text)
	except yaml.YAMLError as error:
		raise RuntimeError(f"Invalid YAML frontmatter: {error}") from error
	if metadata is None:
		return {}, body
	if not isinstance(metadata, dict):
		raise RuntimeError("YAML frontmatter must contain a mapping")
	return metadata, body


#============================================
def load_post(path: str) -> tuple[dict, str]:
	"""
	Load one Markdown post and return (metadata, body).
	"""
	if not os.path.isfile(path):
		raise FileNotFoundError(f"Missing post file: {path}")
	with open(path, "r", encoding="utf-8") as handle:
		text = handle.read()
	try:
		return split_frontmatter(text)
	except RuntimeError as error:
		raise RuntimeError(f"{path}: {error}") from error


#============================================
def list_markdown_posts(content_dir: str) -> list[str]:
	"""
	Return sorted Markdown file paths directly under content_dir.
	"""
	if not os.path.isdir(content_dir):
		raise FileNotFoundError(f"Missing content directory: {content_dir}")
	paths = glob.glob(os.path.join(content_dir, "*.md"))
	return sorted(paths)
