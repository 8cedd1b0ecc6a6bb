# profanity_filter/engine/classifier.py

"""Adapter between the filter and an external toxicity classifier."""

import asyncio
import logging
from dataclasses import dataclass
from typing import (
    Callable,
    Iterable,
    List,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from profanity_filter.core.definitions import CategoryLabel, ClassifierStatus
from profanity_filter.core.domain import AIDetection, CategoryScore
from profanity_filter.core.exceptions import ClassificationFailure, ModelUnavailable

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.8


@dataclass(frozen=True)
class Prediction:
    """Raw classifier output for one category.

    Attributes:
        label: Category name
        probabilities: [P(negative), P(positive)]
    """

    label: str
    probabilities: Sequence[float]

    @property
    def positive(self) -> float:
        return float(self.probabilities[1])


@runtime_checkable
class ClassifierBackend(Protocol):
    """Scoring capability consumed by the adapter."""

    def classify(self, text: str) -> List[Prediction]: ...


BackendFactory = Callable[[], ClassifierBackend]


class ClassifierAdapter:
    """Owns a lazily acquired classifier backend.

    The backend is acquired once by load() and reused read-only afterwards.
    Concurrent first loads are not serialized: each may run the factory and
    the first to finish decides the outcome. A success is kept and every
    caller receives that instance; a failure is remembered, never retried,
    and later successes from racing loads are discarded.

    detect() and score() never raise; failures degrade to empty results.
    """

    def __init__(
        self,
        factory: BackendFactory,
        threshold: float = DEFAULT_THRESHOLD,
        masking_labels: Iterable[str] = CategoryLabel.MASKING,
    ) -> None:
        if not 0.0 <= threshold <= 1.0:
            raise ValueError("threshold must be between 0.0 and 1.0")

        self._factory = factory
        self.threshold = threshold
        self.masking_labels = frozenset(masking_labels)
        self._backend: Optional[ClassifierBackend] = None
        self._failure: Optional[str] = None

    @property
    def status(self) -> str:
        if self._failure is not None:
            return ClassifierStatus.UNAVAILABLE
        if self._backend is not None:
            return ClassifierStatus.READY
        return ClassifierStatus.NOT_LOADED

    @property
    def available(self) -> bool:
        return self._failure is None

    async def load(self) -> ClassifierBackend:
        """Returns the cached backend, acquiring it on first use.

        Raises:
            ModelUnavailable: If acquisition fails now or failed before.
        """
        if self._backend is not None:
            return self._backend
        if self._failure is not None:
            raise ModelUnavailable(self._failure)

        logger.info("Loading classifier backend")

        try:
            backend = await asyncio.to_thread(self._factory)
        except Exception as e:
            if self._backend is not None:
                return self._backend
            logger.error("Classifier backend failed to load", exc_info=True)
            self._failure = f"Classifier unavailable: {e}"
            raise ModelUnavailable(self._failure) from e

        # A racing load already failed; that outcome is final
        if self._failure is not None:
            raise ModelUnavailable(self._failure)

        if self._backend is None:
            self._backend = backend
            logger.info("Classifier backend loaded")
        return self._backend

    def close(self) -> None:
        """Releases the backend and forgets any acquisition failure."""
        self._backend = None
        self._failure = None
        logger.debug("Classifier adapter closed")

    async def _classify(self, text: str) -> List[Prediction]:
        backend = await self.load()
        try:
            return list(await asyncio.to_thread(backend.classify, text))
        except Exception as e:
            raise ClassificationFailure(f"Classification failed: {e}") from e

    async def detect(self, text: str) -> AIDetection:
        """Classifies the whole text against every category."""
        if not text or not text.strip():
            return AIDetection(is_profane=False, categories=[])

        try:
            predictions = await self._classify(text)
            categories = [
                CategoryScore(
                    label=p.label,
                    match=p.positive > self.threshold,
                    probability=p.positive,
                )
                for p in predictions
            ]
        except (ModelUnavailable, ClassificationFailure) as e:
            logger.warning(
                f"Classifier detection skipped: {type(e).__name__}",
                extra={"text_length": len(text), "status": self.status},
            )
            return AIDetection(is_profane=False, categories=[])
        except Exception:
            logger.error(
                "Unexpected error mapping classifier output",
                exc_info=True,
                extra={"text_length": len(text)},
            )
            return AIDetection(is_profane=False, categories=[])

        is_profane = any(c.match for c in categories)

        logger.debug(
            "Classifier detection completed",
            extra={
                "text_length": len(text),
                "is_profane": is_profane,
                "flagged": [c.label for c in categories if c.match],
            },
        )
        return AIDetection(is_profane=is_profane, categories=categories)

    async def score(self, segment: str) -> float:
        """Returns the highest masking-worthy probability for segment."""
        if not segment or not segment.strip():
            return 0.0

        try:
            predictions = await self._classify(segment)
            scores = [
                p.positive for p in predictions if p.label in self.masking_labels
            ]
        except (ModelUnavailable, ClassificationFailure) as e:
            logger.debug(f"Segment scoring skipped: {type(e).__name__}")
            return 0.0
        except Exception:
            logger.error("Unexpected error scoring segment", exc_info=True)
            return 0.0

        return max(scores, default=0.0)
