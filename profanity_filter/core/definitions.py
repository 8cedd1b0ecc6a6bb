# profanity_filter/core/definitions.py

"""Category label and match source constants."""


class CategoryLabel:
    """Classifier categories, named after the toxicity model vocabulary."""

    TOXICITY = "toxicity"
    SEVERE_TOXICITY = "severe_toxicity"
    IDENTITY_ATTACK = "identity_attack"
    INSULT = "insult"
    OBSCENE = "obscene"
    SEXUAL_EXPLICIT = "sexual_explicit"
    THREAT = "threat"

    ALL = (
        TOXICITY,
        IDENTITY_ATTACK,
        INSULT,
        OBSCENE,
        SEVERE_TOXICITY,
        SEXUAL_EXPLICIT,
        THREAT,
    )

    # Only these drive masking of individual segments
    MASKING = (TOXICITY, OBSCENE)


class MatchSource:
    """Detector that produced a match."""

    DICTIONARY = "dictionary"
    CLASSIFIER = "classifier"


class ClassifierStatus:
    """Lifecycle state of a classifier adapter."""

    NOT_LOADED = "not_loaded"
    READY = "ready"
    UNAVAILABLE = "unavailable"
