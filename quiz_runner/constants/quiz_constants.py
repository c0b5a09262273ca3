"""Scoring defaults shared by the compiler and the scoring engine."""

DEFAULT_MIN_ENTRIES: int = 0
DEFAULT_MIN_CORRECT_ENTRIES: int = 0
