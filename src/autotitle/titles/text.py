"""Local title heuristics: keyword extraction, intent and fallback titles.

Nothing here talks to the host; these functions are what the plugin shows
while (or instead of) a model-generated title.
"""

import re

MAX_KEYWORDS = 6

STOP_WORDS = frozenset(
    [
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
        "have", "has", "had", "do", "does", "did", "will", "would", "could",
        "should", "may", "might", "must", "shall", "can", "need", "dare",
        "to", "of", "in", "for", "on", "with", "at", "by", "from", "as",
        "into", "through", "during", "before", "after", "above", "below",
        "between", "under", "again", "further", "then", "once", "here",
        "there", "when", "where", "why", "how", "all", "each", "few",
        "more", "most", "other", "some", "such", "no", "nor", "not",
        "only", "own", "same", "so", "than", "too", "very", "just",
        "and", "but", "if", "or", "because", "until", "while", "this",
        "that", "these", "those", "i", "me", "my", "myself", "we", "our",
        "you", "your", "he", "him", "his", "she", "her", "it", "its",
        "they", "them", "their", "what", "which", "who", "whom", "please",
        "help", "want", "like", "make", "create", "write", "add", "get",
        # Common verbs that carry no topic
        "came", "come", "goes", "going", "went", "give", "gave", "take", "took",
        "put", "see", "saw", "know", "knew", "think", "thought", "tell", "told",
        "ask", "asked", "use", "used", "find", "found", "let", "try", "tried",
        "look", "looking", "needed", "seem", "seemed", "work", "working",
    ]
)

# First match wins; the order is the tie-break between categories.
INTENT_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\b(test|pytest|jest|spec|vitest|testing)\b"), "testing"),
    (re.compile(r"\b(debug|trace|breakpoint|stack|error|issue)\b"), "debugging"),
    (re.compile(r"\b(fix|bug|broken|patch|resolve)\b"), "fix"),
    (re.compile(r"\b(refactor|cleanup|reorganize|restructure|clean)\b"), "refactor"),
    (re.compile(r"\b(doc|readme|documentation|comment)\b"), "docs"),
    (re.compile(r"\b(review|pr|pull[- ]request)\b"), "review"),
    (re.compile(r"\b(deploy|docker|k8s|terraform|ci|cd|pipeline)\b"), "devops"),
    (re.compile(r"\b(api|endpoint|route|controller)\b"), "api"),
    (re.compile(r"\b(ui|frontend|component|style|css)\b"), "ui"),
    (re.compile(r"\b(database|db|sql|query|migration)\b"), "database"),
    (re.compile(r"\b(auth|login|password|session|token)\b"), "auth"),
    (re.compile(r"\b(config|setup|install|configure)\b"), "setup"),
]

_NON_WORD = re.compile(r"[^\w\s]")
_TITLE_UNSAFE = re.compile(r"[^\w\s.-]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_title(title: str, max_length: int) -> str:
    """Keep word characters, whitespace, dots and hyphens; bound the length."""
    cleaned = _TITLE_UNSAFE.sub("", title)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    return cleaned[: max(max_length, 0)]


def extract_keywords(text: str) -> list[str]:
    """Salient lower-cased tokens in order of first appearance, at most six."""
    words = _NON_WORD.sub(" ", text.lower()).split()

    keywords: list[str] = []
    for word in words:
        if len(word) <= 2 or word in STOP_WORDS or word in keywords:
            continue
        keywords.append(word)
        if len(keywords) == MAX_KEYWORDS:
            break
    return keywords


def infer_intent(text: str) -> str:
    """Label of the first intent category matching the text, or ""."""
    lowered = text.lower()
    for pattern, label in INTENT_PATTERNS:
        if pattern.search(lowered):
            return label
    return ""


def generate_fallback_title(text: str, max_length: int) -> str:
    """Build a title from the message alone.

    Short messages are title-cased as they are. Longer ones are reduced to
    their keywords, joined in order until the next one would not fit.
    Returns "" when nothing usable is left.
    """
    if max_length <= 0:
        return ""

    cleaned = _WHITESPACE.sub(" ", _NON_WORD.sub(" ", text)).strip()
    if 3 < len(cleaned) <= max_length:
        title = " ".join(word.capitalize() for word in cleaned.split(" "))
        # Case mapping can lengthen a word ("ß" becomes "Ss")
        return title[:max_length].rstrip()

    keywords = extract_keywords(text)
    if not keywords:
        return ""

    title = ""
    for keyword in keywords:
        capitalized = keyword.capitalize()
        candidate = f"{title} {capitalized}" if title else capitalized
        if len(candidate) > max_length:
            if not title:
                # A single keyword longer than the budget is cut rather than lost
                title = capitalized[:max_length]
            break
        title = candidate

    return sanitize_title(title, max_length)
