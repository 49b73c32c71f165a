import json
import os
import sys

import pytest

import git_file_utils


REPO_ROOT = git_file_utils.get_repo_root()
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import usage_store


#============================================
def test_json_store_missing_file_loads_empty(tmp_path) -> None:
	"""
	A history file that does not exist yet reads as empty.
	"""
	store = usage_store.JsonFileUsageStore(str(tmp_path / "history.json"))
	assert store.load_all() == {}
	assert store.get("t1") is None


#============================================
def test_json_store_writes_nested_path(tmp_path) -> None:
	"""
	Saving creates parent directories and sorted, indented JSON.
	"""
	path = tmp_path / "out" / "nested" / "history.json"
	store = usage_store.JsonFileUsageStore(str(path))
	store.save_all(
		{
			"b": {"lastUsed": None, "useCount": 0},
			"a": {"lastUsed": "2026-01-01T00:00:00.000Z", "useCount": 2},
		}
	)
	text = path.read_text(encoding="utf-8")
	assert text.index('"a"') < text.index('"b"')
	assert json.loads(text)["a"]["useCount"] == 2
	assert store.get("a") == {"lastUsed": "2026-01-01T00:00:00.000Z", "useCount": 2}


#============================================
def test_json_store_set_usage_keeps_other_records(tmp_path) -> None:
	"""
	set_usage updates one record in place.
	"""
	store = usage_store.JsonFileUsageStore(str(tmp_path / "history.json"))
	store.save_all({"a": {"lastUsed": None, "useCount": 1}})
	store.set_usage("b", {"lastUsed": "2026-02-02T00:00:00.000Z", "useCount": 5})
	history = store.load_all()
	assert history["a"]["useCount"] == 1
	assert history["b"]["useCount"] == 5


#============================================
def test_json_store_rejects_non_mapping(tmp_path) -> None:
	"""
	A history file holding a list is an error.
	"""
	path = tmp_path / "history.json"
	path.write_text("[1, 2]", encoding="utf-8")
	with pytest.raises(usage_store.UsageStoreError):
		usage_store.JsonFileUsageStore(str(path)).load_all()


#============================================
def test_json_store_rejects_broken_json(tmp_path) -> None:
	"""
	Unparseable history raises UsageStoreError.
	"""
	path = tmp_path / "history.json"
	path.write_text("{oops", encoding="utf-8")
	with pytest.raises(usage_store.UsageStoreError):
		usage_store.JsonFileUsageStore(str(path)).load_all()


#============================================
def test_memory_store_returns_copies() -> None:
	"""
	Callers cannot mutate memory store state through returned records.
	"""
	store = usage_store.MemoryUsageStore({"a": {"lastUsed": None, "useCount": 1}})
	history = store.load_all()
	history["a"]["useCount"] = 99
	assert store.get("a")["useCount"] == 1
	store.set_usage("a", {"lastUsed": None, "useCount": 2})
	assert store.get("a")["useCount"] == 2
	assert store.save_count == 1


#============================================
def test_json_store_rejects_non_utf8_bytes(tmp_path) -> None:
	"""
	Invalid UTF-8 in the history file raises UsageStoreError.
	"""
	path = tmp_path / "history.json"
	path.write_bytes(b'{"t1": {"lastUsed": "\xff\xfe", "useCount": 1}}')
	with pytest.raises(usage_store.UsageStoreError):
		usage_store.JsonFileUsageStore(str(path)).load_all()
