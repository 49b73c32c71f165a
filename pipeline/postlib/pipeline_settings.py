import os

import yaml


DEFAULT_POOL_PATH = "data/topic_pool.json"
DEFAULT_USAGE_HISTORY_PATH = "out/topic_usage_history.json"
DEFAULT_CONTENT_DIR = "content/posts"
DEFAULT_INTERNAL_LINK_PREFIX = "/blog/"
DEFAULT_IMPROVEMENT_THRESHOLD = 70


#============================================
def get_repo_root() -> str:
	"""
	Return repository root based on this module location.
	"""
	module_dir = os.path.dirname(os.path.abspath(__file__))
	pipeline_dir = os.path.dirname(module_dir)
	repo_root = os.path.dirname(pipeline_dir)
	return repo_root


#============================================
def resolve_repo_path(path_text: str) -> str:
	"""
	Resolve a path against cwd first, then repo root.
	"""
	if os.path.isabs(path_text):
		return path_text
	cwd_candidate = os.path.abspath(path_text)
	if os.path.exists(cwd_candidate):
		return cwd_candidate
	repo_root = get_repo_root()
	repo_candidate = os.path.join(repo_root, path_text)
	return os.path.abspath(repo_candidate)


#============================================
def resolve_settings_path(path_text: str) -> str:
	"""
	Resolve settings path against cwd first, then repo root.
	"""
	return resolve_repo_path(path_text)


#============================================
def load_settings(path_text: str) -> tuple[dict, str]:
	"""
	Load the YAML settings mapping.

	A missing file is not an error; every accessor below has a default.
	Returns (settings, resolved_path).
	"""
	resolved_path = resolve_settings_path(path_text)
	if not os.path.isfile(resolved_path):
		return {}, resolved_path
	with open(resolved_path, "r", encoding="utf-8") as handle:
		try:
			data = yaml.safe_load(handle)
		except yaml.YAMLError as error:
			raise RuntimeError(f"Settings file is not valid YAML: {resolved_path}: {error}") from error
	if data is None:
		data = {}
	if not isinstance(data, dict):
		raise RuntimeError(f"Settings file must contain a mapping: {resolved_path}")
	return data, resolved_path


#============================================
def key_path_text(keys: list[str]) -> str:
	return ".".join(keys)


#============================================
def get_nested_value(settings: dict, keys: list[str], default_value):
	"""
	Walk a key path like ["topics", "recent_days"]; missing levels give the default.
	"""
	current = settings
	for key in keys:
		if not isinstance(current, dict) or key not in current:
			return default_value
		current = current[key]
	return current


#============================================
def get_setting_str(settings: dict, keys: list[str], default_value: str) -> str:
	value = get_nested_value(settings, keys, None)
	if value is None:
		return default_value
	return str(value).strip()


#============================================
def get_setting_int(settings: dict, keys: list[str], default_value: int) -> int:
	"""
	Read an integer setting; booleans and non-numeric text are rejected.
	"""
	value = get_nested_value(settings, keys, None)
	if value is None:
		return default_value
	if isinstance(value, bool):
		raise RuntimeError(f"Invalid integer for setting path {key_path_text(keys)}: {value}")
	try:
		return int(value)
	except (TypeError, ValueError) as error:
		raise RuntimeError(
			f"Invalid integer for setting path {key_path_text(keys)}: {value}"
		) from error


#============================================
def get_topic_pool_path(settings: dict) -> str:
	"""
	Resolve the topic pool JSON path from settings.
	"""
	path_text = get_setting_str(settings, ["topics", "pool_path"], DEFAULT_POOL_PATH)
	return resolve_repo_path(path_text or DEFAULT_POOL_PATH)


#============================================
def get_usage_history_path(settings: dict) -> str:
	"""
	Resolve the topic usage history JSON path from settings.
	"""
	path_text = get_setting_str(
		settings,
		["topics", "usage_history_path"],
		DEFAULT_USAGE_HISTORY_PATH,
	)
	return resolve_repo_path(path_text or DEFAULT_USAGE_HISTORY_PATH)


#============================================
def get_selection_limits(settings: dict) -> tuple[int, int]:
	"""
	Read recent-use window days and top-candidate count.
	"""
	recent_days = get_setting_int(settings, ["topics", "recent_days"], 7)
	top_candidates = get_setting_int(settings, ["topics", "top_candidates"], 5)
	if recent_days < 0:
		raise RuntimeError(f"topics.recent_days must be >= 0; got {recent_days}")
	if top_candidates < 1:
		raise RuntimeError(f"topics.top_candidates must be >= 1; got {top_candidates}")
	return recent_days, top_candidates


#============================================
def get_content_dir(settings: dict) -> str:
	"""
	Resolve the blog content directory from settings.
	"""
	path_text = get_setting_str(settings, ["quality", "content_dir"], DEFAULT_CONTENT_DIR)
	return resolve_repo_path(path_text or DEFAULT_CONTENT_DIR)


#============================================
def get_internal_link_prefix(settings: dict) -> str:
	"""
	Read the URL prefix that marks a Markdown link as internal.
	"""
	prefix = get_setting_str(
		settings,
		["quality", "internal_link_prefix"],
		DEFAULT_INTERNAL_LINK_PREFIX,
	)
	if not prefix:
		return DEFAULT_INTERNAL_LINK_PREFIX
	return prefix


#============================================
def get_improvement_threshold(settings: dict) -> int:
	"""
	Read the overall score below which a post is flagged for rework.
	"""
	threshold = get_setting_int(
		settings,
		["quality", "improvement_threshold"],
		DEFAULT_IMPROVEMENT_THRESHOLD,
	)
	if threshold < 0 or threshold > 100:
		raise RuntimeError(f"quality.improvement_threshold must be 0-100; got {threshold}")
	return threshold
