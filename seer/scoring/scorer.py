"""
Deterministic opportunity scoring.

score = min(100, round(100 * matched_weight / total_weight, 1) + boost)

where ``boost`` adds a fixed amount per matching boost keyword, capped. A
boosted item also carries the ``keyword_boost`` signal, so a score above
the matched rule weights always shows up in the signals.

Nothing here reads the clock or any mutable state, so identical items
always get identical scores and signals.
"""

from dataclasses import dataclass

from seer.ingestion.schemas import RawItem
from seer.scoring.config import ScoringConfig
from seer.scoring.rules import DEFAULT_RULES, SignalRule, load_rules

MAX_SCORE = 100.0
BOOST_SIGNAL = "keyword_boost"


@dataclass(frozen=True)
class ScoreResult:
    score: float
    signals: tuple[str, ...]


@dataclass(frozen=True)
class KeywordFilter:
    """Include/exclude filters and boost keywords (all lowercase)."""

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    boost: tuple[str, ...] = ()
    boost_per_keyword: float = 5.0
    max_boost: float = 20.0

    def accepts(self, text_lower: str) -> bool:
        if any(k in text_lower for k in self.exclude):
            return False
        if self.include and not any(k in text_lower for k in self.include):
            return False
        return True

    def boost_for(self, text_lower: str) -> float:
        hits = sum(1 for k in self.boost if k in text_lower)
        return min(hits * self.boost_per_keyword, self.max_boost)

    @classmethod
    def from_config(cls, config: ScoringConfig) -> "KeywordFilter":
        return cls(
            include=config.include,
            exclude=config.exclude,
            boost=config.boost,
            boost_per_keyword=config.boost_per_keyword,
            max_boost=config.max_boost,
        )


class Scorer:
    """Matches items against signal rules and keyword filters."""

    def __init__(
        self,
        rules: tuple[SignalRule, ...] = DEFAULT_RULES,
        keywords: KeywordFilter | None = None,
    ) -> None:
        self._rules = rules
        self._keywords = keywords or KeywordFilter()
        self._total_weight = sum(rule.weight for rule in rules)

    @classmethod
    def from_config(cls, config: ScoringConfig | None = None) -> "Scorer":
        config = config or ScoringConfig()
        return cls(
            rules=load_rules(config.rules_file),
            keywords=KeywordFilter.from_config(config),
        )

    @property
    def rules(self) -> tuple[SignalRule, ...]:
        return self._rules

    def accepts(self, item: RawItem) -> bool:
        """False when the keyword filters drop the item."""
        return self._keywords.accepts(item.text.lower())

    def score(self, item: RawItem) -> ScoreResult:
        text_lower = item.text.lower()
        signals = tuple(
            rule.name for rule in self._rules if rule.matches(text_lower, item.metadata)
        )

        matched = sum(rule.weight for rule in self._rules if rule.name in signals)
        base = round(MAX_SCORE * matched / self._total_weight, 1) if self._total_weight else 0.0
        boost = self._keywords.boost_for(text_lower)
        score = min(MAX_SCORE, base + boost)
        if boost > 0:
            signals += (BOOST_SIGNAL,)

        return ScoreResult(score=score, signals=signals)
