"""
Request understanding services.

Turns one line of free-form text into a TaskPlan:

    normalized = Normalizer().normalize(text)
    clauses = Segmenter().segment(normalized)
    actions = ActionExtractor().extract_all(clauses)
    plan = PlanAggregator().aggregate(actions)
"""

from studybuddy.services.understanding.aggregator import PlanAggregator
from studybuddy.services.understanding.extractor import ActionExtractor, ClauseFeatures
from studybuddy.services.understanding.normalizer import Normalizer
from studybuddy.services.understanding.segmenter import Segmenter
from studybuddy.services.understanding.similarity import (
    SimilarityMatcher,
    create_matcher,
)

__all__ = [
    "Normalizer",
    "Segmenter",
    "ActionExtractor",
    "ClauseFeatures",
    "PlanAggregator",
    "SimilarityMatcher",
    "create_matcher",
]
