# profanity_filter/core/__init__.py

"""Core domain models and utilities used across the filter.

This package provides domain types, exceptions, and the lexicon loader
shared by the rest of the application.
"""
