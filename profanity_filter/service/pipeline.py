# profanity_filter/service/pipeline.py

"""Main filtering service."""

import logging
import threading
from functools import partial
from typing import Any, Callable, Optional

from profanity_filter.service.config import Settings, settings
from profanity_filter.core.domain import FilterResult, HighlightResult
from profanity_filter.core.exceptions import (
    InitializationError,
    ModelUnavailable,
    ValidationError,
)
from profanity_filter.core.loader import Lexicon, LexiconLoader
from profanity_filter.engine.classifier import ClassifierAdapter, ClassifierBackend
from profanity_filter.engine.fusion import FusionEngine
from profanity_filter.engine.matcher import DictionaryMatcher
from profanity_filter.engine.transformers_backend import load_transformers_backend

logger = logging.getLogger(__name__)


def _disabled_backend() -> ClassifierBackend:
    raise ModelUnavailable("Classifier disabled by configuration")


class FilterService:
    """Owns the matcher, classifier adapter and fusion engine.

    One instance serves the whole process. The classifier model itself is
    acquired lazily on the first enhanced request.
    """

    _instance: Optional["FilterService"] = None
    _lock = threading.Lock()

    def __init__(
        self,
        config: Settings,
        lexicon: Optional[Lexicon] = None,
        adapter: Optional[ClassifierAdapter] = None,
    ) -> None:
        self.config = config
        if lexicon is None:
            lexicon = LexiconLoader.get_lexicon(config.lexicon_path)
        self.lexicon = lexicon
        self.matcher = DictionaryMatcher(self.lexicon, mask_char=config.mask_char)

        if adapter is None:
            factory = (
                partial(
                    load_transformers_backend,
                    config.model_name,
                    config.classifier_labels,
                )
                if config.classifier_enabled
                else _disabled_backend
            )
            adapter = ClassifierAdapter(
                factory,
                threshold=config.confidence_threshold,
                masking_labels=config.masking_labels,
            )

        self.adapter = adapter
        self.fusion = FusionEngine(
            self.matcher, self.adapter, max_concurrency=config.max_concurrency
        )

    @classmethod
    def get_instance(cls) -> "FilterService":
        """Returns singleton filter service instance.

        Raises:
            InitializationError: If the lexicon or components fail to load
        """
        if cls._instance is None:
            with cls._lock:
                # Double-checked locking pattern
                if cls._instance is None:
                    try:
                        logger.info("Initializing filter service")
                        cls._instance = cls(settings)
                        logger.info(
                            "Filter service initialized successfully",
                            extra={"lexicon_size": len(cls._instance.lexicon)},
                        )

                    except Exception as e:
                        logger.error(
                            "Failed to initialize filter service", exc_info=True
                        )
                        if isinstance(e, InitializationError):
                            raise
                        raise InitializationError(
                            "Filter service initialization failed"
                        ) from e

        return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """Tears down the singleton and releases the classifier."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.adapter.close()
                cls._instance = None
                logger.info("Filter service shut down")


def _require_text(text: Any) -> str:
    if not isinstance(text, str):
        logger.error(f"Invalid input type received: {type(text)}")
        raise ValidationError("Input text must be a string")
    return text


def filter_profanity(text: str) -> FilterResult:
    """Masks lexicon terms in text using the dictionary matcher only.

    Raises:
        ValidationError: If text is not a string
        InitializationError: If the service cannot be built
    """
    text = _require_text(text)
    result = FilterService.get_instance().matcher.scan(text)

    logger.info(
        "Dictionary filtering completed",
        extra={"text_length": len(text), "match_count": len(result.matches)},
    )
    return result


async def enhanced_filter_profanity(text: str) -> FilterResult:
    """Masks lexicon terms and classifier-flagged segments in text.

    Classifier problems never raise; they leave the dictionary result in
    place and set metadata["classifier"].

    Raises:
        ValidationError: If text is not a string
        InitializationError: If the service cannot be built
    """
    text = _require_text(text)
    return await FilterService.get_instance().fusion.enhanced_filter(text)


def highlight_profanity(
    text: str,
    template: str = "**{0}**",
    escape: Optional[Callable[[str], str]] = None,
) -> HighlightResult:
    """Wraps lexicon terms in text with template for display.

    Pass escape to neutralize markup in the user text around and inside
    the highlighted terms.
    """
    text = _require_text(text)
    return FilterService.get_instance().matcher.highlight(text, template, escape)

