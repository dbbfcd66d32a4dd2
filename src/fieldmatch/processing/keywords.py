"""Frequency-ranked keyword extraction."""

from __future__ import annotations

from collections import Counter

# Portuguese function words never worth highlighting.
STOP_WORDS = frozenset(
    {
        "de", "da", "do", "das", "dos", "a", "o", "e", "é", "ou", "para", "por", "sem", "com",
        "em", "no", "na", "nos", "nas", "um", "uma", "ao", "às", "as", "os", "que", "se",
    },
)
MIN_KEYWORD_LENGTH = 3
DEFAULT_KEYWORD_COUNT = 6

_ASCII_DIGITS = frozenset("0123456789")


def pick_keywords(text: str, n: int = DEFAULT_KEYWORD_COUNT) -> list[str]:
    """Return the `n` most frequent salient tokens of `text`.

    Tokens are lowercased and stripped of every character other than letters,
    ASCII digits and spaces, so newlines and tabs glue neighbouring words. Stop
    words and tokens shorter than three characters are dropped. Ties keep first-seen order.

    Args:
        text (str): Source text.
        n (int): Maximum number of keywords.

    Returns:
        list[str]: Keywords by descending frequency.
    """
    if n <= 0:
        return []
    cleaned = "".join(char for char in text.lower() if char == " " or char.isalpha() or char in _ASCII_DIGITS)
    counts = Counter(
        token for token in cleaned.split() if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS
    )
    return [token for token, _ in counts.most_common(n)]
