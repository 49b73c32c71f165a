"""Persisted per-topic usage history.

Records map a topic id to {"lastUsed": ISO-8601 or null, "useCount": int}.
The JSON file store is last-writer-wins with no locking.
"""

import json
import os


#============================================
class UsageStoreError(RuntimeError):
	"""
	Raised when the usage history store cannot be read.
	"""


#============================================
class UsageStore:
	"""
	Key-value interface for per-topic usage records.

	Records are {"lastUsed": str | None, "useCount": int}.
	"""

	#============================================
	def load_all(self) -> dict:
		raise NotImplementedError

	#============================================
	def save_all(self, history: dict) -> None:
		raise NotImplementedError

	#============================================
	def get(self, topic_id: str) -> dict | None:
		record = self.load_all().get(topic_id)
		if not isinstance(record, dict):
			return None
		return dict(record)

	#============================================
	def set_usage(self, topic_id: str, record: dict) -> None:
		history = self.load_all()
		history[topic_id] = {
			"lastUsed": record.get("lastUsed"),
			"useCount": record.get("useCount", 0),
		}
		self.save_all(history)


#============================================
class MemoryUsageStore(UsageStore):
	"""
	Dict-backed usage store with no persistence.
	"""

	def __init__(self, history: dict | None = None):
		self.history = {key: dict(value) for key, value in (history or {}).items()}
		self.save_count = 0

	#============================================
	def load_all(self) -> dict:
		return {key: dict(value) for key, value in self.history.items()}

	#============================================
	def save_all(self, history: dict) -> None:
		self.history = {key: dict(value) for key, value in history.items()}
		self.save_count += 1


#============================================
class JsonFileUsageStore(UsageStore):
	"""
	Filesystem-backed usage history, last writer wins.
	"""

	def __init__(self, path: str):
		self.path = os.path.abspath(path)

	#============================================
	def load_all(self) -> dict:
		if not os.path.isfile(self.path):
			return {}
		# ValueError covers both bad JSON and bad UTF-8
		try:
			with open(self.path, "r", encoding="utf-8") as handle:
				payload = json.load(handle)
		except (OSError, ValueError) as error:
			raise UsageStoreError(f"Could not read usage history {self.path}: {error}") from error
		if not isinstance(payload, dict):
			raise UsageStoreError(f"Usage history must be a JSON object: {self.path}")
		return payload

	#============================================
	def save_all(self, history: dict) -> None:
		history_dir = os.path.dirname(self.path)
		if history_dir:
			os.makedirs(history_dir, exist_ok=True)
		with open(self.path, "w", encoding="utf-8") as handle:
			json.dump(history, handle, ensure_ascii=True, indent=2, sort_keys=True)
			handle.write("\n")
