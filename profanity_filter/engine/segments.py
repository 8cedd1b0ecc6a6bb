# profanity_filter/engine/segments.py

"""Candidate segment generation for classifier scoring."""

from typing import Iterator

MAX_SEGMENT_TOKENS = 3


def extract_segments(text: str, max_tokens: int = MAX_SEGMENT_TOKENS) -> Iterator[str]:
    """Yields 1..max_tokens token windows in token order.

    For each token index the unigram comes first, followed by the longer
    windows starting at that index. Duplicates are not removed; callers
    deduplicate after scoring.

    Args:
        text: Input text, split on runs of whitespace
        max_tokens: Longest window to emit
    """
    tokens = text.split()

    for i in range(len(tokens)):
        for size in range(1, max_tokens + 1):
            if i + size > len(tokens):
                break
            yield " ".join(tokens[i : i + size])
