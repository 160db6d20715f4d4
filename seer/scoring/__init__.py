"""Rule-based opportunity scoring and first-sighting deduplication.

Usage:
    from seer.scoring import Scorer

    scorer = Scorer.from_config()
    result = scorer.score(item)
    result.score, result.signals
"""

from seer.scoring.config import ScoringConfig
from seer.scoring.deduplicator import DedupStats, Deduplicator
from seer.scoring.rules import DEFAULT_RULES, SignalRule, load_rules
from seer.scoring.scorer import KeywordFilter, Scorer, ScoreResult

__all__ = [
    "DEFAULT_RULES",
    "DedupStats",
    "Deduplicator",
    "KeywordFilter",
    "ScoreResult",
    "Scorer",
    "ScoringConfig",
    "SignalRule",
    "load_rules",
]
