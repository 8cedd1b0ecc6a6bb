# profanity_filter/engine/transformers_backend.py

"""Hugging Face transformers backend for the classifier adapter."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from profanity_filter.core.definitions import CategoryLabel
from profanity_filter.core.exceptions import ModelUnavailable
from profanity_filter.engine.classifier import Prediction

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "unitary/toxic-bert"

# Jigsaw label names used by toxic-bert style models
LABEL_ALIASES: Dict[str, str] = {
    "toxic": CategoryLabel.TOXICITY,
    "severe_toxic": CategoryLabel.SEVERE_TOXICITY,
    "identity_hate": CategoryLabel.IDENTITY_ATTACK,
    "sexually_explicit": CategoryLabel.SEXUAL_EXPLICIT,
}


class TransformersToxicityBackend:
    """Multi-label toxicity scorer over a text-classification pipeline.

    Native model labels are renamed to CategoryLabel names and filtered to
    the requested label set, keeping the order of ``labels``.
    """

    def __init__(self, pipeline: Any, labels: Optional[Iterable[str]] = None) -> None:
        self._pipeline = pipeline
        self.labels = list(labels or CategoryLabel.ALL)

    def classify(self, text: str) -> List[Prediction]:
        outputs = self._pipeline([text], top_k=None, truncation=True)
        raw = outputs[0] if outputs else []

        scores: Dict[str, float] = {}
        for item in raw:
            label = str(item["label"]).lower()
            scores[LABEL_ALIASES.get(label, label)] = float(item["score"])

        return [
            Prediction(label=label, probabilities=(1.0 - scores[label], scores[label]))
            for label in self.labels
            if label in scores
        ]


def load_transformers_backend(
    model_name: str = DEFAULT_MODEL, labels: Optional[Iterable[str]] = None
) -> TransformersToxicityBackend:
    """Builds the default backend. Slow: downloads and loads model weights.

    Raises:
        ModelUnavailable: If transformers is missing or the model fails to load.
    """
    try:
        from transformers import pipeline as hf_pipeline
    except ImportError as e:
        raise ModelUnavailable(
            "transformers is not installed; install the 'classifier' extra"
        ) from e

    logger.info(f"Loading toxicity model: {model_name}")

    try:
        clf = hf_pipeline(
            "text-classification",
            model=model_name,
            function_to_apply="sigmoid",
        )
    except Exception as e:
        raise ModelUnavailable(f"Could not load model '{model_name}': {e}") from e

    logger.info(f"Toxicity model loaded: {model_name}")
    return TransformersToxicityBackend(clf, labels)
