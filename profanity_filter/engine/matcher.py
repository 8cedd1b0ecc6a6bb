# profanity_filter/engine/matcher.py

"""Dictionary matcher: deterministic lexicon scan with same-length masking."""

import logging
import re
from typing import Callable, List, Optional, Pattern, Sequence, Tuple

from profanity_filter.core.definitions import MatchSource
from profanity_filter.core.domain import FilterResult, HighlightResult, Match
from profanity_filter.core.loader import Lexicon

logger = logging.getLogger(__name__)

_CompiledTerms = Sequence[Tuple[str, Pattern]]


def _compile_word(term: str) -> Pattern:
    return re.compile(r"\b" + re.escape(term) + r"\b", re.IGNORECASE)


def _compile_phrase(term: str) -> Pattern:
    return re.compile(re.escape(term), re.IGNORECASE)


def validate_mask_char(mask_char: str) -> str:
    """Ensures the mask is one character that can never form part of a word.

    Raises:
        ValueError: If mask_char is not a single punctuation or symbol character.
    """
    if not isinstance(mask_char, str) or len(mask_char) != 1:
        raise ValueError("mask_char must be exactly one character")
    if re.match(r"[\w\s]", mask_char):
        raise ValueError("mask_char must be a punctuation or symbol character")
    return mask_char


class DictionaryMatcher:
    """Scans text against a lexicon in two sequential stages.

    Stage 1 applies every single-word entry with word boundaries. Stage 2
    applies every phrase entry, unanchored, to the text produced by stage 1.
    A term is reported when it occurs in the input text; it is masked only
    where it still occurs in the text of its stage, so a phrase whose words
    were masked in stage 1 is reported but not masked twice.
    """

    def __init__(self, lexicon: Lexicon, mask_char: str = "*") -> None:
        self.lexicon = lexicon
        self.mask_char = validate_mask_char(mask_char)
        self._word_patterns: _CompiledTerms = [
            (term, _compile_word(term)) for term in lexicon.words
        ]
        self._phrase_patterns: _CompiledTerms = [
            (term, _compile_phrase(term)) for term in lexicon.phrases
        ]

        logger.debug(
            "DictionaryMatcher compiled",
            extra={
                "word_patterns": len(self._word_patterns),
                "phrase_patterns": len(self._phrase_patterns),
            },
        )

    def mask(self, fragment: str) -> str:
        """Returns a mask run with the same code point length as fragment."""
        return self.mask_char * len(fragment)

    def scan(self, text: str) -> FilterResult:
        """Masks every lexicon occurrence in text.

        Args:
            text: Arbitrary input, may be empty

        Returns:
            FilterResult with same-length filtered text and unique matches
        """
        if not text:
            return FilterResult(filtered_text="", was_filtered=False, matches=[])

        filtered, matches, spans = self._run_stages(text, self.mask)

        return FilterResult(
            filtered_text=filtered,
            was_filtered=bool(matches),
            matches=matches,
            spans=spans,
        )

    def highlight(
        self,
        text: str,
        template: str = "**{0}**",
        escape: Optional[Callable[[str], str]] = None,
    ) -> HighlightResult:
        """Wraps every lexicon occurrence with template instead of masking.

        Args:
            text: Arbitrary input, may be empty
            template: Format string receiving the matched text as {0}
            escape: Optional function applied to all input text before it is
                placed in the output, matched or not. Highlighting is then
                rebuilt from the masked spans so escaping never shifts them.
        """
        if not text:
            return HighlightResult(highlighted_text="", has_matches=False, matches=[])

        if escape is None:
            highlighted, matches, _ = self._run_stages(text, template.format)
        else:
            _, matches, spans = self._run_stages(text, self.mask)
            highlighted = self._wrap_spans(text, spans, template, escape)

        return HighlightResult(
            highlighted_text=highlighted,
            has_matches=bool(matches),
            matches=matches,
        )

    @staticmethod
    def _wrap_spans(
        text: str,
        spans: List[Match],
        template: str,
        escape: Callable[[str], str],
    ) -> str:
        parts: List[str] = []
        cursor = 0
        for span in sorted(spans, key=lambda s: (s.start, -s.length)):
            if span.start < cursor:
                continue
            parts.append(escape(text[cursor : span.start]))
            parts.append(template.format(escape(text[span.start : span.end])))
            cursor = span.end
        parts.append(escape(text[cursor:]))
        return "".join(parts)

    def _run_stages(
        self, text: str, replace: Callable[[str], str]
    ) -> Tuple[str, List[str], List[Match]]:
        matches: List[str] = []
        spans: List[Match] = []

        # Stage 1 output is stage 2 input; do not reorder or parallelize.
        stage_one = self._apply(self._word_patterns, text, text, replace, matches, spans)
        stage_two = self._apply(
            self._phrase_patterns, text, stage_one, replace, matches, spans
        )

        return stage_two, list(dict.fromkeys(matches)), spans

    @staticmethod
    def _apply(
        patterns: _CompiledTerms,
        source_text: str,
        working_text: str,
        replace: Callable[[str], str],
        matches: List[str],
        spans: List[Match],
    ) -> str:
        for term, pattern in patterns:
            if not pattern.search(source_text):
                continue

            matches.append(term)

            def _substitute(m: "re.Match[str]", term: str = term) -> str:
                spans.append(
                    Match(
                        term=term,
                        start=m.start(),
                        length=len(m.group()),
                        source=MatchSource.DICTIONARY,
                    )
                )
                return replace(m.group())

            working_text = pattern.sub(_substitute, working_text)

        return working_text
