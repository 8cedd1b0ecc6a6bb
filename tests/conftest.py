"""
Shared pytest fixtures.

The classifier is always replaced by FakeBackend: an in-memory scorer that
looks up each classified string in a table, so no model is ever loaded.
"""

from __future__ import annotations

import threading
from typing import Dict, List

import pytest

from profanity_filter.core.loader import Lexicon, LexiconLoader
from profanity_filter.engine.classifier import ClassifierAdapter, Prediction
from profanity_filter.engine.fusion import FusionEngine
from profanity_filter.engine.matcher import DictionaryMatcher
from profanity_filter.service.pipeline import FilterService

LOW = 0.05


class FakeBackend:
    """Scores text by exact lookup; unknown text scores LOW on every label."""

    def __init__(self, table: Dict[str, Dict[str, float]] | None = None,
                 labels=("toxicity", "identity_attack", "insult", "obscene")):
        self.table = table or {}
        self.labels = labels
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def classify(self, text: str) -> List[Prediction]:
        with self._lock:
            self.calls.append(text)
        scores = self.table.get(text, {})
        return [
            Prediction(label, (1.0 - scores.get(label, LOW), scores.get(label, LOW)))
            for label in self.labels
        ]


class FailingBackend:
    def classify(self, text: str) -> List[Prediction]:
        raise RuntimeError("backend exploded")


class CountingFactory:
    """Backend factory that records how often it was invoked."""

    def __init__(self, backend=None, error: Exception | None = None):
        self.backend = backend if backend is not None else FakeBackend()
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.backend


@pytest.fixture
def lexicon():
    return Lexicon(["badword", "ass", "bad phrase"])


@pytest.fixture
def matcher(lexicon):
    return DictionaryMatcher(lexicon)


@pytest.fixture
def make_fusion(matcher):
    """Builds a FusionEngine around a FakeBackend scoring table."""

    def _make(table=None, factory=None, threshold=0.8):
        factory = factory or CountingFactory(FakeBackend(table))
        adapter = ClassifierAdapter(factory, threshold=threshold)
        return FusionEngine(matcher, adapter), factory

    return _make


@pytest.fixture
def clean_service():
    """Resets process-wide singletons around a test."""
    FilterService.shutdown()
    LexiconLoader.reset()
    yield
    FilterService.shutdown()
    LexiconLoader.reset()
