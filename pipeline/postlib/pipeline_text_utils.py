import re


WORD_RE = re.compile(r"[A-Za-z0-9'’]+")
PARAGRAPH_SPLIT_RE = re.compile(r"\n[ \t]*\n")


#============================================
def extract_words(text: str) -> list[str]:
	"""
	Return tokenized words for stable word-count checks.
	"""
	words = WORD_RE.findall(text)
	return words


#============================================
def count_words(text: str) -> int:
	"""
	Count words using a stable regex-based tokenizer.
	"""
	words = extract_words(text)
	count = len(words)
	return count


#============================================
def split_paragraphs(text: str) -> list[str]:
	"""
	Split text into non-empty blocks separated by blank lines.
	"""
	normalized = (text or "").replace("\r\n", "\n")
	blocks = PARAGRAPH_SPLIT_RE.split(normalized)
	paragraphs = [block.strip() for block in blocks if block.strip()]
	return paragraphs


#============================================
def count_matches(pattern: re.Pattern, text: str) -> int:
	"""
	Count non-overlapping regex matches in text.
	"""
	if not text:
		return 0
	return len(pattern.findall(text))


#============================================
def trim_to_char_limit(text: str, char_limit: int) -> str:
	"""
	Trim text to a maximum character count.
	"""
	clean = text.strip()
	if char_limit <= 0:
		return ""
	if len(clean) <= char_limit:
		return clean
	if char_limit <= 3:
		return clean[:char_limit]
	result = clean[:char_limit - 3].rstrip() + "..."
	return result
