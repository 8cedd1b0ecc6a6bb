# profanity_filter/engine/fusion.py

"""Fusion of dictionary matches and classifier verdicts into one result."""

import asyncio
import logging
import re
from dataclasses import replace
from typing import Dict, List, NamedTuple, Optional, Pattern

from profanity_filter.core.definitions import MatchSource
from profanity_filter.core.domain import AIDetection, FilterResult, Match
from profanity_filter.engine.classifier import ClassifierAdapter
from profanity_filter.engine.matcher import DictionaryMatcher
from profanity_filter.engine.segments import extract_segments

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


class ScoredSegment(NamedTuple):
    text: str
    score: float
    index: int


def _segment_pattern(segment: str) -> Pattern:
    """Matches segment as whole whitespace-delimited tokens."""
    body = r"\s+".join(re.escape(token) for token in segment.split())
    return re.compile(r"(?<!\S)" + body + r"(?!\S)")


class FusionEngine:
    """Runs the dictionary pass, then refines it with the classifier.

    The dictionary result is always computed first and is returned as-is
    whenever the classifier path is unavailable, fails, or finds nothing.
    """

    def __init__(
        self,
        matcher: DictionaryMatcher,
        adapter: ClassifierAdapter,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.matcher = matcher
        self.adapter = adapter
        self.max_concurrency = max_concurrency

    async def enhanced_filter(self, text: str) -> FilterResult:
        """Filters text with both detectors.

        Args:
            text: Raw input text

        Returns:
            FilterResult combining dictionary matches and masked segments
        """
        wordlist = self.matcher.scan(text)

        if not text:
            return wordlist

        try:
            ai = await self.adapter.detect(text)

            if not ai.is_profane:
                return self._dictionary_only(wordlist, ai if ai.categories else None)

            return await self._mask_segments(wordlist, ai)

        except Exception:
            logger.error(
                "Enhanced filtering failed, returning dictionary result",
                exc_info=True,
                extra={"text_length": len(text)},
            )
            return self._dictionary_only(wordlist, None)

    def _dictionary_only(
        self, wordlist: FilterResult, ai: Optional[AIDetection]
    ) -> FilterResult:
        return replace(
            wordlist,
            ai_detection=ai,
            metadata={**wordlist.metadata, "classifier": self.adapter.status},
        )

    async def _score_segments(self, text: str) -> List[ScoredSegment]:
        mask_char = self.matcher.mask_char
        candidates = [
            segment
            for segment in extract_segments(text)
            if segment.replace(" ", "").strip(mask_char)
        ]

        # At most max_concurrency segments are in flight per call
        slots = asyncio.Semaphore(self.max_concurrency)

        async def _bounded_score(segment: str) -> float:
            async with slots:
                return await self.adapter.score(segment)

        scores = await asyncio.gather(*(_bounded_score(s) for s in candidates))

        # Deduplicate after scoring; first occurrence keeps its position
        unique: Dict[str, ScoredSegment] = {}
        for index, (segment, score) in enumerate(zip(candidates, scores)):
            if segment not in unique:
                unique[segment] = ScoredSegment(segment, score, index)

        flagged = [s for s in unique.values() if s.score > self.adapter.threshold]
        flagged.sort(key=lambda s: (-s.score, s.index))
        return flagged

    async def _mask_segments(self, wordlist: FilterResult, ai: AIDetection) -> FilterResult:
        flagged = await self._score_segments(wordlist.filtered_text)

        filtered = wordlist.filtered_text
        spans = list(wordlist.spans)
        masked = set()

        # Longest first so a shorter overlapping segment never splits a mask
        for segment in sorted(flagged, key=lambda s: (-len(s.text), -s.score, s.index)):
            pattern = _segment_pattern(segment.text)

            def _substitute(m: "re.Match[str]", term: str = segment.text) -> str:
                spans.append(
                    Match(
                        term=term,
                        start=m.start(),
                        length=len(m.group()),
                        source=MatchSource.CLASSIFIER,
                    )
                )
                return self.matcher.mask(m.group())

            filtered, count = pattern.subn(_substitute, filtered)
            if count:
                masked.add(segment.text)

        ai_terms = [s.text for s in flagged if s.text in masked]
        matches = list(dict.fromkeys(wordlist.matches + ai_terms))

        logger.info(
            "Enhanced filtering completed",
            extra={
                "text_length": len(filtered),
                "dictionary_matches": len(wordlist.matches),
                "segments_flagged": len(flagged),
                "segments_masked": len(ai_terms),
            },
        )

        return FilterResult(
            filtered_text=filtered,
            was_filtered=wordlist.was_filtered or ai.is_profane,
            matches=matches,
            ai_detection=ai,
            spans=sorted(spans, key=lambda m: m.start),
            metadata={**wordlist.metadata, "classifier": self.adapter.status},
        )
