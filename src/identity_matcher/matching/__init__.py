"""
Motor de matching.

Combina filtros hard y similitud semántica por eje para rankear
usuarios compatibles.
"""

from identity_matcher.matching.engine import MatchingEngine
from identity_matcher.matching.scoring import DEFAULT_WEIGHTS, normalize_weights

__all__ = [
    "MatchingEngine",
    "DEFAULT_WEIGHTS",
    "normalize_weights",
]
