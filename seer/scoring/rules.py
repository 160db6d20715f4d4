"""
Signal rules for opportunity scoring.

A rule matches when any of its keywords occurs in the item text
(case-insensitive substring) or any of its metadata thresholds is exceeded.
The default set below can be replaced with a JSON file of the form:

    [
        {"name": "problem_mention", "weight": 15,
         "keywords": ["frustrated", "annoying"]},
        {"name": "high_engagement", "weight": 10,
         "thresholds": {"points": 50, "stars": 100}}
    ]
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from seer.errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignalRule:
    """A named heuristic contributing ``weight`` points when matched."""

    name: str
    weight: float
    keywords: tuple[str, ...] = ()
    thresholds: dict[str, float] = field(default_factory=dict)
    description: str = ""

    def matches(self, text_lower: str, metadata: dict[str, Any]) -> bool:
        if any(keyword in text_lower for keyword in self.keywords):
            return True
        for key, minimum in self.thresholds.items():
            value = metadata.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > minimum:
                return True
        return False


DEFAULT_RULES: tuple[SignalRule, ...] = (
    SignalRule(
        name="problem_mention",
        weight=15,
        description="Describes a pain point",
        keywords=(
            "problem", "issue", "frustrated", "annoying", "hate",
            "wish", "need", "struggling",
        ),
    ),
    SignalRule(
        name="solution_seeking",
        weight=20,
        description="Actively asks for a tool or approach",
        keywords=(
            "how do i", "how to", "best way", "recommend", "alternative",
            "looking for", "need help", "any suggestions",
        ),
    ),
    SignalRule(
        name="show_project",
        weight=10,
        description="Someone shipped something",
        keywords=(
            "show hn", "showhn", "i built", "i made", "my project",
            "side project", "launching", "just launched",
        ),
    ),
    SignalRule(
        name="technical",
        weight=10,
        description="Developer tooling context",
        keywords=(
            "api", "sdk", "library", "framework", "tool", "cli",
            "developer", "devtool", "open source",
        ),
    ),
    SignalRule(
        name="business_opportunity",
        weight=15,
        description="Commercial intent",
        keywords=(
            "saas", "startup", "business", "revenue", "customers",
            "subscription", "pricing", "monetize",
        ),
    ),
    SignalRule(
        name="high_engagement",
        weight=10,
        description="Strong community response",
        thresholds={
            "points": 50,
            "num_comments": 20,
            "stars": 100,
            "reactions": 20,
            "score": 50,
        },
    ),
    SignalRule(
        name="indie_focus",
        weight=10,
        description="Solo founders and small makers",
        keywords=(
            "indie", "solo", "bootstrapped", "self-funded", "maker",
            "indiehacker", "solopreneur",
        ),
    ),
)


def _rule_from_dict(entry: dict[str, Any]) -> SignalRule:
    try:
        return SignalRule(
            name=str(entry["name"]),
            weight=float(entry["weight"]),
            keywords=tuple(str(k).lower() for k in entry.get("keywords", [])),
            thresholds={str(k): float(v) for k, v in entry.get("thresholds", {}).items()},
            description=str(entry.get("description", "")),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"Invalid signal rule {entry!r}: {e}") from e


def load_rules(path: Path | None) -> tuple[SignalRule, ...]:
    """Load rules from a JSON file, or return the defaults when path is None."""
    if path is None:
        return DEFAULT_RULES

    with open(path) as f:
        entries = json.load(f)

    rules = tuple(_rule_from_dict(e) for e in entries)
    if not rules or sum(r.weight for r in rules) <= 0:
        raise ValidationError(f"Rules file {path} defines no positive weights")

    logger.info("Loaded %d signal rules from %s", len(rules), path)
    return rules
