import os
import sys

import pytest

import git_file_utils


REPO_ROOT = git_file_utils.get_repo_root()
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import pipeline_settings


#============================================
def test_load_settings_missing_file(tmp_path) -> None:
	"""
	Missing settings file should return empty settings.
	"""
	settings, resolved_path = pipeline_settings.load_settings(str(tmp_path / "missing.yaml"))
	assert settings == {}
	assert resolved_path.endswith("missing.yaml")


#============================================
def test_load_settings_reads_yaml(tmp_path) -> None:
	"""
	YAML settings should be parsed into nested mapping values.
	"""
	settings_path = tmp_path / "settings.yaml"
	settings_path.write_text(
		"topics:\n"
		"  recent_days: 14\n"
		"quality:\n"
		"  internal_link_prefix: /posts/\n",
		encoding="utf-8",
	)
	settings, _ = pipeline_settings.load_settings(str(settings_path))
	assert pipeline_settings.get_setting_int(settings, ["topics", "recent_days"], 7) == 14
	assert pipeline_settings.get_internal_link_prefix(settings) == "/posts/"


#============================================
def test_load_settings_non_mapping_raises(tmp_path) -> None:
	"""
	A settings file holding a list should raise RuntimeError.
	"""
	settings_path = tmp_path / "settings.yaml"
	settings_path.write_text("- one\n- two\n", encoding="utf-8")
	with pytest.raises(RuntimeError):
		pipeline_settings.load_settings(str(settings_path))


#============================================
@pytest.mark.parametrize("value", ["abc", True, [3]])
def test_get_setting_int_invalid_value_raises(value) -> None:
	"""
	Invalid integer setting should raise RuntimeError.
	"""
	settings = {"topics": {"top_candidates": value}}
	with pytest.raises(RuntimeError):
		pipeline_settings.get_setting_int(settings, ["topics", "top_candidates"], 5)


#============================================
def test_improvement_threshold_default_and_range() -> None:
	"""
	Threshold defaults to 70 and must stay within 0-100.
	"""
	assert pipeline_settings.get_improvement_threshold({}) == 70
	assert pipeline_settings.get_improvement_threshold({"quality": {"improvement_threshold": "85"}}) == 85
	with pytest.raises(RuntimeError):
		pipeline_settings.get_improvement_threshold({"quality": {"improvement_threshold": 150}})


#============================================
def test_load_settings_invalid_yaml_raises(tmp_path) -> None:
	"""
	Broken YAML should raise RuntimeError.
	"""
	settings_path = tmp_path / "settings.yaml"
	settings_path.write_text("topics: [unclosed\n", encoding="utf-8")
	with pytest.raises(RuntimeError):
		pipeline_settings.load_settings(str(settings_path))


#============================================
def test_selection_limits_defaults() -> None:
	"""
	Empty settings give a seven-day window and five candidates.
	"""
	assert pipeline_settings.get_selection_limits({}) == (7, 5)


#============================================
def test_selection_limits_reject_bad_values() -> None:
	"""
	Negative windows and zero candidates are configuration errors.
	"""
	with pytest.raises(RuntimeError):
		pipeline_settings.get_selection_limits({"topics": {"recent_days": -1}})
	with pytest.raises(RuntimeError):
		pipeline_settings.get_selection_limits({"topics": {"top_candidates": 0}})


#============================================
def test_default_paths_resolve_under_repo_root(tmp_path, monkeypatch) -> None:
	"""
	Relative defaults fall back to the repo root when cwd lacks them.
	"""
	monkeypatch.chdir(tmp_path)
	pool_path = pipeline_settings.get_topic_pool_path({})
	assert pool_path == os.path.join(pipeline_settings.get_repo_root(), "data", "topic_pool.json")
	history_path = pipeline_settings.get_usage_history_path({})
	assert history_path.endswith(os.path.join("out", "topic_usage_history.json"))


#============================================
def test_absolute_paths_are_kept(tmp_path) -> None:
	"""
	Absolute configured paths are returned unchanged.
	"""
	content_dir = str(tmp_path / "posts")
	settings = {"quality": {"content_dir": content_dir}}
	assert pipeline_settings.get_content_dir(settings) == content_dir


#============================================
def test_blank_internal_prefix_uses_default() -> None:
	"""
	An empty prefix falls back to /blog/.
	"""
	settings = {"quality": {"internal_link_prefix": "  "}}
	assert pipeline_settings.get_internal_link_prefix(settings) == "/blog/"
