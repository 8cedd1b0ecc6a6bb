"""Tests for the transformers backend, using a stand-in pipeline."""

import sys

import pytest

from profanity_filter.core.exceptions import ModelUnavailable
from profanity_filter.engine.classifier import ClassifierBackend
from profanity_filter.engine.transformers_backend import (
    TransformersToxicityBackend,
    load_transformers_backend,
)


class StubPipeline:
    def __init__(self, scores):
        self.scores = scores
        self.kwargs = None

    def __call__(self, texts, **kwargs):
        self.kwargs = kwargs
        return [[{"label": k, "score": v} for k, v in self.scores.items()] for _ in texts]


def test_labels_are_renamed_and_ordered():
    stub = StubPipeline(
        {"obscene": 0.7, "toxic": 0.9, "identity_hate": 0.1, "threat": 0.2}
    )
    backend = TransformersToxicityBackend(
        stub, labels=["toxicity", "identity_attack", "obscene", "sexual_explicit"]
    )

    predictions = backend.classify("text")

    assert [p.label for p in predictions] == ["toxicity", "identity_attack", "obscene"]
    assert predictions[0].probabilities[1] == pytest.approx(0.9)
    assert predictions[0].probabilities[0] == pytest.approx(0.1)
    assert stub.kwargs["top_k"] is None


def test_backend_satisfies_protocol():
    assert isinstance(TransformersToxicityBackend(StubPipeline({})), ClassifierBackend)


def test_missing_transformers_is_model_unavailable(monkeypatch):
    monkeypatch.setitem(sys.modules, "transformers", None)
    with pytest.raises(ModelUnavailable):
        load_transformers_backend()
