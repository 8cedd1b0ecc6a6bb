# profanity_filter/core/domain.py

"""Domain models for filtering results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from profanity_filter.core.definitions import MatchSource


@dataclass(frozen=True)
class Match:
    """A single masked occurrence.

    Attributes:
        term: Lexicon term (stored form) or classifier segment text
        start: Starting code point offset in the text
        length: Number of code points masked
        source: Detector that produced the match (see MatchSource)
    """

    term: str
    start: int
    length: int
    source: str = MatchSource.DICTIONARY

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class CategoryScore:
    """Score for one classifier category."""

    label: str
    match: bool
    probability: float


@dataclass
class AIDetection:
    """Whole-text classifier verdict."""

    is_profane: bool = False
    categories: List[CategoryScore] = field(default_factory=list)


@dataclass
class FilterResult:
    """Result object returned by the matcher, fusion engine and service.

    Attributes:
        filtered_text: Input text with every match masked (same length)
        was_filtered: True iff matches is non-empty or the classifier
            flagged the text
        matches: Unique matched terms and masked classifier segments
        ai_detection: Classifier verdict, None when the classifier did not run
        spans: Every masked occurrence
        metadata: Additional processing information
    """

    filtered_text: str
    was_filtered: bool = False
    matches: List[str] = field(default_factory=list)
    ai_detection: Optional[AIDetection] = None
    spans: List[Match] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class HighlightResult:
    """Text with matches wrapped for display rather than masked."""

    highlighted_text: str
    has_matches: bool = False
    matches: List[str] = field(default_factory=list)
