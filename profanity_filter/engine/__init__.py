# profanity_filter/engine/__init__.py

"""Engine package providing the detectors and their fusion.

This package contains the dictionary matcher, segment extraction, the
classifier adapter with its default backend, and the fusion engine.
"""
