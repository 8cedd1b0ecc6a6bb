"""Tests for the classifier adapter."""

import asyncio
import threading
import time

import pytest

from conftest import CountingFactory, FailingBackend, FakeBackend
from profanity_filter.core.definitions import ClassifierStatus
from profanity_filter.core.exceptions import ModelUnavailable
from profanity_filter.engine.classifier import ClassifierAdapter, Prediction
from profanity_filter.engine.fusion import FusionEngine
from profanity_filter.engine.matcher import DictionaryMatcher


def test_prediction_positive_probability():
    assert Prediction("toxicity", [0.3, 0.7]).positive == 0.7


def test_detect_maps_categories_with_strict_threshold():
    backend = FakeBackend({"you jerk": {"toxicity": 0.95, "insult": 0.8}})
    adapter = ClassifierAdapter(CountingFactory(backend))

    detection = asyncio.run(adapter.detect("you jerk"))

    assert detection.is_profane is True
    by_label = {c.label: c for c in detection.categories}
    assert [c.label for c in detection.categories] == list(backend.labels)
    assert by_label["toxicity"].match is True
    assert by_label["toxicity"].probability == pytest.approx(0.95)
    # Equal to the threshold is not above it
    assert by_label["insult"].match is False


def test_detect_not_profane_below_threshold():
    adapter = ClassifierAdapter(CountingFactory(FakeBackend()))
    detection = asyncio.run(adapter.detect("have a nice day"))
    assert detection.is_profane is False
    assert len(detection.categories) == 4


def test_custom_threshold():
    backend = FakeBackend({"meh": {"toxicity": 0.6}})
    adapter = ClassifierAdapter(CountingFactory(backend), threshold=0.5)
    assert asyncio.run(adapter.detect("meh")).is_profane is True


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_blank_text_never_touches_the_model(text):
    factory = CountingFactory()
    adapter = ClassifierAdapter(factory)

    detection = asyncio.run(adapter.detect(text))

    assert detection.is_profane is False
    assert detection.categories == []
    assert factory.calls == 0
    assert asyncio.run(adapter.score(text)) == 0.0
    assert factory.calls == 0


def test_load_is_memoized():
    factory = CountingFactory()
    adapter = ClassifierAdapter(factory)
    assert adapter.status == ClassifierStatus.NOT_LOADED

    async def _load_twice():
        return await adapter.load(), await adapter.load()

    first, second = asyncio.run(_load_twice())

    assert first is second is factory.backend
    assert factory.calls == 1
    assert adapter.status == ClassifierStatus.READY


def test_concurrent_loads_share_one_instance():
    adapter = ClassifierAdapter(lambda: FakeBackend())

    async def _race():
        return await asyncio.gather(*(adapter.load() for _ in range(5)))

    results = asyncio.run(_race())
    assert all(r is results[0] for r in results)


def test_failed_load_is_not_retried():
    factory = CountingFactory(error=OSError("no weights"))
    adapter = ClassifierAdapter(factory)

    with pytest.raises(ModelUnavailable):
        asyncio.run(adapter.load())
    with pytest.raises(ModelUnavailable):
        asyncio.run(adapter.load())

    assert factory.calls == 1
    assert adapter.status == ClassifierStatus.UNAVAILABLE
    assert adapter.available is False


def test_failure_racing_a_slow_success_stays_final(lexicon):
    lock = threading.Lock()
    calls = []

    def factory():
        with lock:
            calls.append(None)
            attempt = len(calls)
        if attempt == 1:
            raise OSError("no weights")
        time.sleep(0.2)
        return FakeBackend({"you jerk": {"toxicity": 0.9}})

    adapter = ClassifierAdapter(factory)

    async def _race():
        return await asyncio.gather(adapter.load(), adapter.load(), return_exceptions=True)

    results = asyncio.run(_race())

    assert len(calls) == 2
    assert all(isinstance(r, ModelUnavailable) for r in results)
    assert adapter.status == ClassifierStatus.UNAVAILABLE

    fusion = FusionEngine(DictionaryMatcher(lexicon), adapter)
    result = asyncio.run(fusion.enhanced_filter("you jerk"))

    assert result.filtered_text == "you jerk"
    assert result.ai_detection is None
    assert result.metadata["classifier"] == ClassifierStatus.UNAVAILABLE
    assert len(calls) == 2


def test_detect_and_score_swallow_unavailable_model():
    adapter = ClassifierAdapter(CountingFactory(error=OSError("offline")))

    detection = asyncio.run(adapter.detect("some text"))

    assert detection.is_profane is False
    assert detection.categories == []
    assert asyncio.run(adapter.score("some text")) == 0.0


def test_detect_and_score_swallow_backend_errors():
    adapter = ClassifierAdapter(CountingFactory(FailingBackend()))

    detection = asyncio.run(adapter.detect("some text"))

    assert detection.is_profane is False
    assert detection.categories == []
    assert asyncio.run(adapter.score("some text")) == 0.0
    # A runtime failure does not disable the model
    assert adapter.status == ClassifierStatus.READY


def test_score_uses_masking_labels_only():
    backend = FakeBackend(
        {"word": {"identity_attack": 0.99, "toxicity": 0.3, "obscene": 0.6}}
    )
    adapter = ClassifierAdapter(CountingFactory(backend))
    assert asyncio.run(adapter.score("word")) == pytest.approx(0.6)


def test_score_without_masking_labels_is_zero():
    backend = FakeBackend({"word": {"insult": 0.99}}, labels=("insult",))
    adapter = ClassifierAdapter(CountingFactory(backend))
    assert asyncio.run(adapter.score("word")) == 0.0


def test_close_releases_backend_and_failure():
    factory = CountingFactory(error=OSError("offline"))
    adapter = ClassifierAdapter(factory)
    with pytest.raises(ModelUnavailable):
        asyncio.run(adapter.load())

    adapter.close()

    assert adapter.status == ClassifierStatus.NOT_LOADED
    factory.error = None
    assert asyncio.run(adapter.load()) is factory.backend
    assert factory.calls == 2


@pytest.mark.parametrize("threshold", [-0.1, 1.5])
def test_threshold_out_of_range(threshold):
    with pytest.raises(ValueError):
        ClassifierAdapter(CountingFactory(), threshold=threshold)
