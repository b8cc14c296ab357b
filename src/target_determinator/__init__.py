# target_determinator/__init__.py
"""
Bazel target patterns and affected target determination.
"""

from .label import Label, parse_label
from .pattern import Pattern, NO_PATTERN, parse_pattern

__all__ = ['Label', 'parse_label', 'Pattern', 'NO_PATTERN', 'parse_pattern']
