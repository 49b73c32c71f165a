"""Freshness-biased topic selection over a weighted topic pool.

Selection flattens the pool, filters it, draws one category by weight,
scores the remaining candidates and picks uniformly among the top few.
Scoring is a pure function of a topic snapshot and a reference time; the
only side effect is mark_topic_as_used(), which updates the live pool and
writes the full usage history to the injected store.
"""

# Standard Library
import random
from datetime import datetime
from datetime import timedelta
from datetime import timezone

from postlib import topic_pool
from postlib import usage_store


ANY = "any"
NEVER_USED_BONUS = 50
MAX_FRESHNESS_BONUS = 50
DIFFICULTY_BONUS = {
	"beginner": 20,
	"intermediate": 15,
	"advanced": 5,
}
IDEAL_READ_TIME_RANGE = (5, 8)


#============================================
class EmptyPoolError(RuntimeError):
	"""
	Raised when selection is requested from a pool with no topics.
	"""


#============================================
def utc_now() -> datetime:
	return datetime.now(timezone.utc)


#============================================
def parse_timestamp(value) -> datetime | None:
	"""
	Parse an ISO-8601 timestamp into aware UTC, or None when unusable.
	"""
	text = str(value or "").strip()
	if not text:
		return None
	try:
		parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
	except ValueError:
		return None
	if parsed.tzinfo is None:
		return parsed.replace(tzinfo=timezone.utc)
	return parsed.astimezone(timezone.utc)


#============================================
def format_timestamp(value: datetime) -> str:
	"""
	Format an aware datetime as ISO-8601 UTC with a Z suffix.
	"""
	utc_value = value.astimezone(timezone.utc)
	return utc_value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


#============================================
def days_since(last_used: datetime, now: datetime) -> float:
	elapsed = (now - last_used).total_seconds() / 86400.0
	return max(0.0, elapsed)


#============================================
def calculate_topic_score(topic: topic_pool.Topic, now: datetime | None = None) -> float:
	"""
	Score one topic; higher is more desirable.

	Relative ranking signal only, never normalized.
	"""
	if now is None:
		now = utc_now()
	score = 100.0
	score -= topic.use_count * 10

	last_used = parse_timestamp(topic.last_used)
	if last_used is None:
		score += NEVER_USED_BONUS
	else:
		score += min(days_since(last_used, now) * 2, MAX_FRESHNESS_BONUS)

	score += (topic.category_weight or 0) * 100
	score += DIFFICULTY_BONUS.get(topic.difficulty, 0)

	read_time = topic.estimated_read_time or topic_pool.DEFAULT_READ_TIME
	low, high = IDEAL_READ_TIME_RANGE
	if low <= read_time <= high:
		score += 10
	return score


#============================================
class TopicSelector:
	"""
	Pick topics from a pool and record their usage.
	"""

	def __init__(
		self,
		pool: topic_pool.TopicPool,
		store: usage_store.UsageStore | None = None,
		rng: random.Random | None = None,
		now_fn=None,
		log_fn=None,
		recent_days: int = 7,
		top_candidates: int = 5,
	):
		if top_candidates < 1:
			raise ValueError(f"top_candidates must be >= 1; got {top_candidates}")
		self.pool = pool
		self.store = store if store is not None else usage_store.MemoryUsageStore()
		self.rng = rng if rng is not None else random.Random()
		self.now_fn = now_fn if now_fn is not None else utc_now
		self.log_fn = log_fn
		self.recent_days = int(recent_days)
		self.top_candidates = int(top_candidates)
		self.load_usage_history()

	#============================================
	def log(self, message: str) -> None:
		"""
		Emit one log line when logger is configured.
		"""
		if self.log_fn is not None:
			self.log_fn(message)

	#============================================
	def load_usage_history(self) -> None:
		"""
		Overlay stored usage history onto the pool.
		"""
		try:
			history = self.store.load_all()
		except usage_store.UsageStoreError as error:
			self.log(f"Warning: could not load topic usage history: {error}")
			return
		updated = self.pool.apply_usage_history(history)
		if updated:
			self.log(f"Loaded usage history for {updated} topic(s).")

	#============================================
	def save_usage_history(self) -> None:
		"""
		Persist usage for every topic; failures are logged, not raised.
		"""
		try:
			self.store.save_all(self.pool.usage_history())
		except (OSError, usage_store.UsageStoreError) as error:
			self.log(f"Warning: could not save topic usage history: {error}")

	#============================================
	def get_all_topics(self) -> list[topic_pool.Topic]:
		"""
		Return snapshot copies of every topic in the pool.
		"""
		return [topic.snapshot() for topic in self.pool.iter_topics()]

	#============================================
	def get_topic_by_id(self, topic_id: str) -> topic_pool.Topic | None:
		topic = self.pool.find_topic(topic_id)
		if topic is None:
			return None
		return topic.snapshot()

	#============================================
	def filter_recent_topics(self, topics: list[topic_pool.Topic]) -> list[topic_pool.Topic]:
		"""
		Drop topics used within the recent-use window.
		"""
		cutoff = self.now_fn() - timedelta(days=self.recent_days)
		kept = []
		for topic in topics:
			last_used = parse_timestamp(topic.last_used)
			if last_used is None or last_used < cutoff:
				kept.append(topic)
		return kept

	#============================================
	def weighted_random_selection(self, items: list, weights: list[float]):
		"""
		Draw one item with probability proportional to its weight.
		"""
		if not items:
			raise ValueError("weighted_random_selection needs at least one item")
		total_weight = sum(weights)
		remaining = self.rng.random() * total_weight
		for item, weight in zip(items, weights):
			remaining -= weight
			if remaining <= 0:
				return item
		return items[-1]

	#============================================
	def apply_weighted_selection(self, topics: list[topic_pool.Topic]) -> list[topic_pool.Topic]:
		"""
		Draw one category present in topics and keep only its topics.
		"""
		groups: dict[str, list[topic_pool.Topic]] = {}
		for topic in topics:
			groups.setdefault(topic.category_key, []).append(topic)
		category_keys = list(groups)
		weights = [self.pool.categories[key].weight for key in category_keys]
		selected_key = self.weighted_random_selection(category_keys, weights)
		return groups[selected_key]

	#============================================
	def select_topic_by_score(self, topics: list[topic_pool.Topic]) -> topic_pool.Topic:
		"""
		Pick uniformly among the top-scoring candidates.
		"""
		now = self.now_fn()
		scored = [(calculate_topic_score(topic, now), topic) for topic in topics]
		scored.sort(key=lambda item: item[0], reverse=True)
		top = scored[: min(self.top_candidates, len(scored))]
		_, chosen = self.rng.choice(top)
		return chosen

	#============================================
	def get_smart_topic(
		self,
		difficulty: str = ANY,
		category: str = ANY,
		avoid_recent: bool = True,
		balance_categories: bool = True,
	) -> topic_pool.Topic:
		"""
		Select one topic, mark it used, and return its updated snapshot.
		"""
		all_topics = self.get_all_topics()
		if not all_topics:
			raise EmptyPoolError("Topic pool has no topics to select from")

		candidates = all_topics
		if difficulty and difficulty != ANY:
			candidates = [topic for topic in candidates if topic.difficulty == difficulty]
		if category and category != ANY:
			candidates = [topic for topic in candidates if topic.category_key == category]
		if avoid_recent:
			candidates = self.filter_recent_topics(candidates)
		if not candidates:
			self.log(
				"No topics match filters "
				+ f"(difficulty={difficulty}, category={category}, avoid_recent={avoid_recent}); "
				+ "falling back to the full pool."
			)
			candidates = all_topics
		if balance_categories:
			candidates = self.apply_weighted_selection(candidates)

		chosen = self.select_topic_by_score(candidates)
		marked = self.mark_topic_as_used(chosen.id)
		return marked if marked is not None else chosen

	#============================================
	def mark_topic_as_used(self, topic_id: str) -> topic_pool.Topic | None:
		"""
		Record one use of a topic and persist usage history.

		Unknown ids are a no-op and return None.
		"""
		topic = self.pool.find_topic(topic_id)
		if topic is None:
			return None
		now = self.now_fn()
		previous = parse_timestamp(topic.last_used)
		# lastUsed never moves backwards
		if previous is not None and previous > now:
			now = previous
		topic.last_used = format_timestamp(now)
		topic.use_count += 1
		self.save_usage_history()
		return topic.snapshot()

	#============================================
	def get_topic_suggestions(self, count: int = 5) -> list[topic_pool.Topic]:
		"""
		Draw count topics, spreading across categories first.
		"""
		if count <= 0 or self.pool.topic_count() == 0:
			return []
		suggestions = []
		used_categories = set()
		for _ in range(count):
			available = [
				key for key, category in self.pool.categories.items()
				if key not in used_categories and category.topics
			]
			category_key = self.rng.choice(available) if available else ANY
			topic = self.get_smart_topic(category=category_key, avoid_recent=False)
			suggestions.append(topic)
			used_categories.add(topic.category_key)
		return suggestions

	#============================================
	def get_category_stats(self) -> dict:
		"""
		Aggregate per-category topic counts, uses and latest use.
		"""
		stats = {}
		for key, category in self.pool.categories.items():
			total_uses = sum(topic.use_count for topic in category.topics)
			used_values = [topic.last_used for topic in category.topics if topic.last_used]
			last_used = None
			if used_values:
				last_used = max(used_values, key=timestamp_sort_key)
			stats[key] = {
				"name": category.name,
				"topicCount": len(category.topics),
				"totalUses": total_uses,
				"lastUsed": last_used,
				"weight": category.weight,
			}
		return stats


#============================================
def timestamp_sort_key(value: str) -> datetime:
	parsed = parse_timestamp(value)
	if parsed is None:
		return datetime.min.replace(tzinfo=timezone.utc)
	return parsed
