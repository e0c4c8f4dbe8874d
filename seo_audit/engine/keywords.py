from __future__ import annotations

import re
from collections import Counter

from seo_audit.engine.models import Keyword

PUNCTUATION_PATTERN = re.compile(r"[^\w\s]|_")

STOP_WORDS = frozenset(
    {
        "about", "above", "after", "again", "against", "also", "because", "been",
        "before", "being", "below", "between", "both", "could", "does", "doing",
        "down", "during", "each", "every", "from", "further", "have", "having",
        "here", "hers", "herself", "himself", "into", "itself", "just", "more",
        "most", "much", "myself", "once", "only", "other", "ours", "ourselves",
        "over", "same", "should", "some", "such", "than", "that", "their",
        "theirs", "them", "themselves", "then", "there", "these", "they", "this",
        "those", "through", "under", "until", "very", "were", "what", "when",
        "where", "which", "while", "whom", "will", "with", "would", "your",
        "yours", "yourself", "yourselves", "shall", "might", "must", "many",
        "like", "make", "made", "well", "even", "back", "still", "cannot",
    }
)

MIN_WORD_LENGTH = 4


def extract_keywords(text: str, limit: int = 20) -> tuple[Keyword, ...]:
    """Rank the words of *text* by frequency.

    Tokens of three characters or fewer and stop words are ignored. Density is
    the share (in percent) of all whitespace-separated tokens of the cleaned
    text, so filtered-out tokens still count towards the total.
    """
    cleaned = PUNCTUATION_PATTERN.sub("", (text or "").lower())
    tokens = cleaned.split()
    if not tokens:
        return ()

    counts: Counter[str] = Counter(
        token for token in tokens if len(token) >= MIN_WORD_LENGTH and token not in STOP_WORDS
    )
    total = len(tokens)
    return tuple(
        Keyword(word=word, count=count, density=round(count / total * 100, 2))
        for word, count in counts.most_common(limit)
    )
