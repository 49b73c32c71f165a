"""Advisory quality grading for drafted blog posts.

Three independent sub-scores, each built from surface checks:

- SEO: title and meta description lengths, section headers, links.
- Readability: word count band, paragraph length, list usage.
- Human-likeness: contractions, questions, pronouns, stock AI phrases,
  transitions.

Grading is deterministic and never raises; missing metadata fails the
checks that need it.
"""

# Standard Library
import dataclasses
import re

from postlib import pipeline_settings
from postlib import pipeline_text_utils


TITLE_LENGTH_RANGE = (50, 60)
META_DESCRIPTION_LENGTH_RANGE = (150, 155)
IDEAL_WORD_RANGE = (1500, 3000)
PARTIAL_WORD_MINIMUM = 1000
MAX_PERIODS_PER_PARAGRAPH = 4

# subheadings (###, ####) count as sections too
SECTION_HEADER_RE = re.compile(r"^#{2,}[ \t]", re.MULTILINE)
EXTERNAL_LINK_RE = re.compile(r"\[[^\]]*\]\(https?://")
BULLET_LINE_RE = re.compile(r"^[ \t]*[-*+][ \t]", re.MULTILINE)
NUMBERED_LINE_RE = re.compile(r"^\d+\.", re.MULTILINE)
CONTRACTION_RE = re.compile(
	r"\b(?:don|won|can|isn|aren)['’]t\b|\bit['’]s\b|\b(?:we|you|they)['’]re\b",
	re.IGNORECASE,
)
QUESTION_RE = re.compile(r"\?")
PRONOUN_RE = re.compile(r"\b(?:you|your|we|our|I)\b", re.IGNORECASE)
TRANSITION_RE = re.compile(
	r"\b(?:however|meanwhile|furthermore|additionally|on the other hand"
	r"|let['’]s be honest|here['’]s the thing)\b",
	re.IGNORECASE,
)
AI_TELL_PHRASES = (
	"in today's digital landscape",
	"as we delve into",
	"in conclusion, it's important to note",
)


#============================================
@dataclasses.dataclass
class QualityReport:
	seo_score: int = 0
	readability_score: int = 0
	human_like_score: int = 0
	overall_score: int = 0
	issues: list[str] = dataclasses.field(default_factory=list)

	#============================================
	def to_dict(self) -> dict:
		return {
			"seoScore": self.seo_score,
			"readabilityScore": self.readability_score,
			"humanLikeScore": self.human_like_score,
			"overallScore": self.overall_score,
			"issues": list(self.issues),
		}


#============================================
def text_field(metadata, key: str) -> str:
	"""
	Return a metadata string field, or empty text when absent.
	"""
	if not isinstance(metadata, dict):
		return ""
	value = metadata.get(key)
	if not isinstance(value, str):
		return ""
	return value


#============================================
def in_range(value: int, bounds: tuple[int, int]) -> bool:
	low, high = bounds
	return low <= value <= high


#============================================
def round_half_up(value: float) -> int:
	# halves round up, unlike round()
	return int(value + 0.5)


#============================================
def count_internal_links(content: str, internal_prefix: str) -> int:
	pattern = re.compile(r"\[[^\]]*\]\(" + re.escape(internal_prefix))
	return pipeline_text_utils.count_matches(pattern, content)


#============================================
def score_seo(
	content: str,
	metadata,
	internal_prefix: str = pipeline_settings.DEFAULT_INTERNAL_LINK_PREFIX,
) -> tuple[int, list[str]]:
	"""
	Score SEO surface signals; 20 points per satisfied check.
	"""
	score = 0
	issues = []

	title = text_field(metadata, "title")
	if title and in_range(len(title), TITLE_LENGTH_RANGE):
		score += 20
	else:
		issues.append("Title length should be 50-60 characters")

	description = text_field(metadata, "metaDescription")
	if description and in_range(len(description), META_DESCRIPTION_LENGTH_RANGE):
		score += 20
	else:
		issues.append("Meta description should be 150-155 characters")

	if pipeline_text_utils.count_matches(SECTION_HEADER_RE, content) >= 3:
		score += 20
	else:
		issues.append("Content should have at least 3 H2 headings")

	if count_internal_links(content, internal_prefix) >= 2:
		score += 20
	else:
		issues.append("Include at least 2 internal links")

	if pipeline_text_utils.count_matches(EXTERNAL_LINK_RE, content) >= 1:
		score += 20
	else:
		issues.append("Include at least 1 external authoritative link")
	return score, issues


#============================================
def score_readability(content: str) -> tuple[int, list[str]]:
	"""
	Score readability surface signals; 25 points per satisfied check.

	Word counts of at least 1000 outside the ideal band earn 15 points.
	"""
	score = 0
	issues = []

	word_count = pipeline_text_utils.count_words(content)
	if in_range(word_count, IDEAL_WORD_RANGE):
		score += 25
	elif word_count >= PARTIAL_WORD_MINIMUM:
		score += 15
		issues.append(f"Word count {word_count} is outside the ideal 1500-3000 range")
	else:
		issues.append(f"Word count {word_count} is below 1000; aim for 1500-3000 words")

	paragraphs = pipeline_text_utils.split_paragraphs(content)
	long_paragraphs = [p for p in paragraphs if p.count(".") > MAX_PERIODS_PER_PARAGRAPH]
	if not long_paragraphs:
		score += 25
	else:
		issues.append(
			f"{len(long_paragraphs)} paragraph(s) exceed 4 sentences; break them up"
		)

	if pipeline_text_utils.count_matches(BULLET_LINE_RE, content) >= 5:
		score += 25
	else:
		issues.append("Use at least 5 bullet points")

	if pipeline_text_utils.count_matches(NUMBERED_LINE_RE, content) >= 3:
		score += 25
	else:
		issues.append("Use at least 3 numbered list items")
	return score, issues


#============================================
def score_human_likeness(content: str) -> tuple[int, list[str]]:
	"""
	Score conversational tone signals; 20 points per satisfied check.
	"""
	score = 0
	issues = []

	if pipeline_text_utils.count_matches(CONTRACTION_RE, content) >= 3:
		score += 20
	else:
		issues.append("Use at least 3 contractions (don't, it's, you're)")

	if pipeline_text_utils.count_matches(QUESTION_RE, content) >= 2:
		score += 20
	else:
		issues.append("Ask at least 2 questions to engage readers")

	if pipeline_text_utils.count_matches(PRONOUN_RE, content) >= 10:
		score += 20
	else:
		issues.append("Address readers directly with personal pronouns (you, we, I)")

	lower = content.lower().replace("’", "'")
	found_tells = [phrase for phrase in AI_TELL_PHRASES if phrase in lower]
	if not found_tells:
		score += 20
	else:
		issues.append(f"Remove AI-sounding phrases: {', '.join(found_tells)}")

	if pipeline_text_utils.count_matches(TRANSITION_RE, content) >= 3:
		score += 20
	else:
		issues.append("Use at least 3 natural transitions (however, furthermore, here's the thing)")
	return score, issues


#============================================
def validate_content_quality(
	content,
	metadata=None,
	internal_prefix: str = pipeline_settings.DEFAULT_INTERNAL_LINK_PREFIX,
) -> QualityReport:
	"""
	Grade one article body and its metadata.
	"""
	text = content if isinstance(content, str) else ""
	seo_score, seo_issues = score_seo(text, metadata, internal_prefix)
	readability_score, readability_issues = score_readability(text)
	human_score, human_issues = score_human_likeness(text)
	overall = round_half_up((seo_score + readability_score + human_score) / 3)
	return QualityReport(
		seo_score=seo_score,
		readability_score=readability_score,
		human_like_score=human_score,
		overall_score=overall,
		issues=seo_issues + readability_issues + human_issues,
	)


#============================================
def improvement_suggestions(report: QualityReport, threshold: int = 80) -> list[str]:
	"""
	Return remediation hints for each sub-score below threshold.
	"""
	suggestions = []
	if report.seo_score < threshold:
		suggestions.extend(
			[
				"Add more internal links to related posts",
				"Include at least one external authoritative source",
				"Optimize meta description length (150-155 characters)",
			]
		)
	if report.readability_score < threshold:
		suggestions.extend(
			[
				"Break long paragraphs into shorter ones",
				"Add more bullet points and numbered lists",
				"Use subheadings to improve structure",
			]
		)
	if report.human_like_score < threshold:
		suggestions.extend(
			[
				"Use more contractions (don't, won't, it's)",
				"Ask engaging questions",
				"Add personal anecdotes or industry stories",
			]
		)
	return suggestions


#============================================
def summarize_reports(
	named_reports: list[tuple[str, QualityReport]],
	improvement_threshold: int = 70,
) -> dict:
	"""
	Aggregate reports for many posts into one summary mapping.

	named_reports holds (label, report) pairs, usually post titles.
	"""
	summary = {
		"postCount": len(named_reports),
		"averageSeoScore": 0,
		"averageReadabilityScore": 0,
		"averageHumanLikeScore": 0,
		"averageOverallScore": 0,
		"topPosts": [],
		"needsImprovement": [],
		"recommendations": [],
	}
	if not named_reports:
		return summary

	count = len(named_reports)
	avg_seo = round_half_up(sum(r.seo_score for _, r in named_reports) / count)
	avg_read = round_half_up(sum(r.readability_score for _, r in named_reports) / count)
	avg_human = round_half_up(sum(r.human_like_score for _, r in named_reports) / count)
	avg_overall = round_half_up(sum(r.overall_score for _, r in named_reports) / count)
	summary["averageSeoScore"] = avg_seo
	summary["averageReadabilityScore"] = avg_read
	summary["averageHumanLikeScore"] = avg_human
	summary["averageOverallScore"] = avg_overall

	ranked = sorted(named_reports, key=lambda item: item[1].overall_score, reverse=True)
	summary["topPosts"] = [(label, report.overall_score) for label, report in ranked[:3]]
	summary["needsImprovement"] = [
		(label, report.overall_score)
		for label, report in named_reports
		if report.overall_score < improvement_threshold
	]

	recommendations = []
	if avg_seo < improvement_threshold:
		recommendations.append(
			"Focus on SEO optimization: add more internal/external links, improve meta descriptions"
		)
	if avg_read < improvement_threshold:
		recommendations.append(
			"Improve readability: use shorter paragraphs, add bullet points, break up long sentences"
		)
	if avg_human < improvement_threshold:
		recommendations.append(
			"Make content more human-like: use contractions, ask questions, add personal touch"
		)
	summary["recommendations"] = recommendations
	return summary
