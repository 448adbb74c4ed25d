"""
Algorithm for finding a maximum weight matching in general graphs.
"""

__all__ = ["maximum_weight_matching",
           "maximum_cardinality_matching",
           "iter_pairs",
           "MatchedPairs",
           "add_default_weight",
           "MatchingError"]

from .algorithm import (maximum_weight_matching,
                        maximum_cardinality_matching,
                        iter_pairs,
                        MatchedPairs)
from .graph import add_default_weight
from .verify import MatchingError
