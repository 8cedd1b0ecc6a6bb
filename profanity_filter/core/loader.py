# profanity_filter/core/loader.py

"""Lexicon loader for the dictionary matcher."""

import yaml
import logging
import threading
from pathlib import Path
from typing import Any, Iterable, Optional, Tuple, Union

from profanity_filter.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LEXICON_PATH = Path(__file__).parent / "lexicon.yaml"


class Lexicon:
    """Immutable ordered collection of disallowed terms and phrases.

    Terms are stored case-folded and stripped; duplicates keep their first
    position. Order only determines scan order.
    """

    __slots__ = ("_terms",)

    def __init__(self, terms: Iterable[str]) -> None:
        seen = set()
        ordered = []
        for raw in terms:
            if not isinstance(raw, str):
                raise ConfigurationError(
                    f"Lexicon entries must be strings, got {type(raw).__name__}"
                )
            term = " ".join(raw.split()).lower()
            if not term or term in seen:
                continue
            seen.add(term)
            ordered.append(term)
        self._terms: Tuple[str, ...] = tuple(ordered)

    @property
    def terms(self) -> Tuple[str, ...]:
        return self._terms

    @property
    def words(self) -> Tuple[str, ...]:
        """Entries without internal whitespace."""
        return tuple(t for t in self._terms if " " not in t)

    @property
    def phrases(self) -> Tuple[str, ...]:
        """Entries with internal whitespace."""
        return tuple(t for t in self._terms if " " in t)

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and term.lower() in self._terms

    def __repr__(self) -> str:
        return (
            f"<Lexicon words={len(self.words)} phrases={len(self.phrases)}>"
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Lexicon":
        """Loads a lexicon from a YAML file with a top-level ``terms`` list.

        Raises:
            ConfigurationError: If file is missing, invalid, or empty.
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            error_msg = f"Lexicon file not found: {config_path}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg)

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}", exc_info=True)
            raise ConfigurationError(f"Failed to parse {config_path.name}: {e}") from e

        if not data or not isinstance(data, dict):
            raise ConfigurationError("Lexicon file is empty or invalid")

        terms = data.get("terms")
        if not isinstance(terms, list):
            raise ConfigurationError("Lexicon file must define a 'terms' list")

        lexicon = cls(terms)
        if not len(lexicon):
            raise ConfigurationError("Lexicon file contains no usable terms")

        logger.info(
            "Lexicon loaded successfully",
            extra={
                "lexicon_path": str(config_path),
                "word_count": len(lexicon.words),
                "phrase_count": len(lexicon.phrases),
            },
        )
        return lexicon


class LexiconLoader:
    """Process-wide holder for the lexicon.

    Loads the lexicon once and caches it for the application lifecycle.
    """

    _lexicon: Optional[Lexicon] = None
    _lock = threading.Lock()

    @classmethod
    def get_lexicon(cls, path: Optional[Union[str, Path]] = None) -> Lexicon:
        """Returns the cached lexicon, loading it on first use.

        Args:
            path: Lexicon file, defaults to the packaged lexicon.yaml

        Raises:
            ConfigurationError: If the lexicon cannot be loaded.
        """
        if cls._lexicon is None:
            with cls._lock:
                if cls._lexicon is None:
                    cls._lexicon = Lexicon.from_yaml(path or DEFAULT_LEXICON_PATH)
        return cls._lexicon

    @classmethod
    def reset(cls) -> None:
        """Drops the cached lexicon so the next call reloads it."""
        with cls._lock:
            cls._lexicon = None
