"""Static topic catalog grouped into weighted categories.

The pool JSON is authored by hand and read-only at runtime. Usage
metadata (lastUsed, useCount) lives in a separate history store and is
overlaid onto the pool after loading.
"""

# Standard Library
import dataclasses
import json
import os


VALID_DIFFICULTIES = ("beginner", "intermediate", "advanced")
DEFAULT_READ_TIME = 5
# keys consumed by Topic fields; everything else passes through in extra
TOPIC_FIELD_KEYS = {
	"id",
	"title",
	"difficulty",
	"estimatedReadTime",
	"lastUsed",
	"useCount",
	"categoryKey",
	"categoryName",
	"categoryWeight",
}


#============================================
class TopicPoolError(RuntimeError):
	"""
	Raised when the topic pool JSON is missing or malformed.
	"""


#============================================
@dataclasses.dataclass
class Topic:
	id: str
	title: str
	category_key: str
	category_name: str
	category_weight: float
	difficulty: str
	estimated_read_time: int = DEFAULT_READ_TIME
	last_used: str | None = None
	use_count: int = 0
	extra: dict = dataclasses.field(default_factory=dict)

	#============================================
	def snapshot(self) -> "Topic":
		"""
		Return a detached copy safe to hand out to callers.
		"""
		return dataclasses.replace(self, extra=dict(self.extra))

	#============================================
	def to_dict(self) -> dict:
		"""
		Return the camelCase JSON view of this topic.
		"""
		payload = dict(self.extra)
		payload.update(
			{
				"id": self.id,
				"title": self.title,
				"difficulty": self.difficulty,
				"estimatedReadTime": self.estimated_read_time,
				"lastUsed": self.last_used,
				"useCount": self.use_count,
				"categoryKey": self.category_key,
				"categoryName": self.category_name,
				"categoryWeight": self.category_weight,
			}
		)
		return payload


#============================================
@dataclasses.dataclass
class Category:
	key: str
	name: str
	weight: float
	topics: list[Topic] = dataclasses.field(default_factory=list)


#============================================
@dataclasses.dataclass
class TopicPool:
	categories: dict[str, Category] = dataclasses.field(default_factory=dict)

	#============================================
	def iter_topics(self):
		"""
		Yield every live topic in category then authoring order.
		"""
		for category in self.categories.values():
			for topic in category.topics:
				yield topic

	#============================================
	def find_topic(self, topic_id: str) -> Topic | None:
		"""
		Return the live topic with this id, or None.
		"""
		for topic in self.iter_topics():
			if topic.id == topic_id:
				return topic
		return None

	#============================================
	def topic_count(self) -> int:
		return sum(len(category.topics) for category in self.categories.values())

	#============================================
	def usage_history(self) -> dict:
		"""
		Build {topicId: {lastUsed, useCount}} for every topic.
		"""
		history = {}
		for topic in self.iter_topics():
			history[topic.id] = {
				"lastUsed": topic.last_used,
				"useCount": topic.use_count,
			}
		return history

	#============================================
	def apply_usage_history(self, history: dict) -> int:
		"""
		Overlay persisted usage records onto pool topics.

		Unknown ids are ignored. Returns the number of topics updated.
		"""
		updated = 0
		for topic in self.iter_topics():
			record = history.get(topic.id)
			if not isinstance(record, dict):
				continue
			last_used = record.get("lastUsed")
			topic.last_used = str(last_used) if last_used else None
			topic.use_count = coerce_use_count(record.get("useCount"))
			updated += 1
		return updated


#============================================
def coerce_use_count(value) -> int:
	"""
	Normalize a stored use count to a non-negative integer.
	"""
	if isinstance(value, bool):
		return 0
	try:
		count = int(value)
	except (TypeError, ValueError):
		return 0
	return max(0, count)


#============================================
def parse_weight(category_key: str, value) -> float:
	"""
	Validate one category weight as a positive float.
	"""
	if isinstance(value, bool):
		raise TopicPoolError(f"Category {category_key}: weight must be a number")
	try:
		weight = float(value)
	except (TypeError, ValueError) as error:
		raise TopicPoolError(f"Category {category_key}: weight must be a number") from error
	if weight <= 0:
		raise TopicPoolError(f"Category {category_key}: weight must be > 0; got {weight}")
	return weight


#============================================
def parse_topic(category: Category, entry: dict, index: int) -> Topic:
	"""
	Build one Topic from a pool JSON entry.
	"""
	if not isinstance(entry, dict):
		raise TopicPoolError(f"Category {category.key}: topic #{index} must be a mapping")
	topic_id = str(entry.get("id", "")).strip()
	if not topic_id:
		raise TopicPoolError(f"Category {category.key}: topic #{index} is missing an id")
	difficulty = str(entry.get("difficulty", "")).strip().lower()
	if difficulty not in VALID_DIFFICULTIES:
		raise TopicPoolError(
			f"Topic {topic_id}: difficulty must be one of "
			+ f"{', '.join(VALID_DIFFICULTIES)}; got {entry.get('difficulty')!r}"
		)
	read_time = entry.get("estimatedReadTime", DEFAULT_READ_TIME)
	try:
		read_time = int(read_time) if read_time is not None else DEFAULT_READ_TIME
	except (TypeError, ValueError) as error:
		raise TopicPoolError(f"Topic {topic_id}: estimatedReadTime must be an integer") from error
	last_used = entry.get("lastUsed")
	extra = {key: value for key, value in entry.items() if key not in TOPIC_FIELD_KEYS}
	return Topic(
		id=topic_id,
		title=str(entry.get("title", "")).strip(),
		category_key=category.key,
		category_name=category.name,
		category_weight=category.weight,
		difficulty=difficulty,
		estimated_read_time=read_time,
		last_used=str(last_used) if last_used else None,
		use_count=coerce_use_count(entry.get("useCount", 0)),
		extra=extra,
	)


#============================================
def topic_pool_from_dict(payload: dict) -> TopicPool:
	"""
	Validate a pool payload and build a TopicPool.
	"""
	if not isinstance(payload, dict):
		raise TopicPoolError("Topic pool must be a JSON object")
	raw_categories = payload.get("categories")
	if not isinstance(raw_categories, dict):
		raise TopicPoolError("Topic pool must contain a 'categories' mapping")

	pool = TopicPool()
	seen_ids: dict[str, str] = {}
	for category_key, raw_category in raw_categories.items():
		if not isinstance(raw_category, dict):
			raise TopicPoolError(f"Category {category_key} must be a mapping")
		category = Category(
			key=str(category_key),
			name=str(raw_category.get("name", category_key)),
			weight=parse_weight(category_key, raw_category.get("weight")),
		)
		raw_topics = raw_category.get("topics", [])
		if not isinstance(raw_topics, list):
			raise TopicPoolError(f"Category {category_key}: topics must be a list")
		for index, entry in enumerate(raw_topics, start=1):
			topic = parse_topic(category, entry, index)
			if topic.id in seen_ids:
				raise TopicPoolError(
					f"Duplicate topic id {topic.id} in categories "
					+ f"{seen_ids[topic.id]} and {category.key}"
				)
			seen_ids[topic.id] = category.key
			category.topics.append(topic)
		pool.categories[category.key] = category
	return pool


#============================================
def load_topic_pool(path: str) -> TopicPool:
	"""
	Load and validate the topic pool JSON file.
	"""
	if not os.path.isfile(path):
		raise FileNotFoundError(f"Missing topic pool: {path}")
	try:
		with open(path, "r", encoding="utf-8") as handle:
			payload = json.load(handle)
	except ValueError as error:
		raise TopicPoolError(f"Topic pool is not valid UTF-8 JSON: {path}: {error}") from error
	return topic_pool_from_dict(payload)
