"""
Report rendering: a Markdown digest for people and a prompt for an LLM.

Both renderers are pure functions of the opportunity list and the window.
Callers pass opportunities already ordered by score (highest first).
"""

from collections import defaultdict
from datetime import datetime

from seer.opportunities.schemas import Opportunity

HUMAN_TOP_N = 20
HUMAN_DESCRIPTION_LIMIT = 300
PROMPT_TOP_N = 30
PROMPT_DESCRIPTION_LIMIT = 500

ANALYST_INSTRUCTIONS = """\
You are a market analyst who looks for product opportunities for independent \
developers and small bootstrapped teams.

Review the opportunities below and write:
1. A short summary of the most promising opportunities (first paragraph)
2. Recurring themes and patterns
3. Concrete product ideas a solo developer could start on
4. Emerging trends worth following"""


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def _score(opp: Opportunity) -> str:
    return f"{opp.score:g}/100"


def render_human(
    opportunities: list[Opportunity],
    start: datetime,
    end: datetime,
) -> str:
    lines = [
        "# Seer Opportunity Report",
        "",
        f"**Period:** {start:%b %d, %Y} to {end:%b %d, %Y}",
        f"**Total Opportunities:** {len(opportunities)}",
        "",
    ]

    if not opportunities:
        lines.append("No opportunities found in this period.")
        return "\n".join(lines) + "\n"

    lines += ["---", "", "## Top Opportunities", ""]

    for rank, opp in enumerate(opportunities[:HUMAN_TOP_N], start=1):
        lines += [
            f"### {rank}. {opp.title}",
            "",
            f"**Score:** {_score(opp)} | **Source:** {opp.source_type}",
            "",
        ]
        if opp.description:
            lines += [_clip(opp.description, HUMAN_DESCRIPTION_LIMIT), ""]
        if opp.signals:
            lines += [f"**Signals:** {', '.join(opp.signals)}", ""]
        if opp.source_url:
            lines += [f"**Link:** {opp.source_url}", ""]
        lines += ["---", ""]

    by_source: dict[str, list[float]] = defaultdict(list)
    for opp in opportunities:
        by_source[opp.source_type].append(opp.score)

    lines += ["## Summary by Source", ""]
    for source_type in sorted(by_source):
        scores = by_source[source_type]
        average = sum(scores) / len(scores)
        lines.append(
            f"- **{source_type}:** {len(scores)} opportunities (avg score: {average:.1f})"
        )

    return "\n".join(lines) + "\n"


def render_prompt(
    opportunities: list[Opportunity],
    start: datetime,
    end: datetime,
) -> str:
    lines = [
        ANALYST_INSTRUCTIONS,
        "",
        f"Report Period: {start:%Y-%m-%d} to {end:%Y-%m-%d}",
        f"Total Opportunities: {len(opportunities)}",
        "",
        "=== OPPORTUNITIES ===",
        "",
    ]

    for rank, opp in enumerate(opportunities[:PROMPT_TOP_N], start=1):
        lines += [
            f"[{rank}] {opp.title}",
            f"Source: {opp.source_type} | Score: {_score(opp)}",
        ]
        if opp.description:
            lines.append(f"Description: {_clip(opp.description, PROMPT_DESCRIPTION_LIMIT)}")
        if opp.signals:
            lines.append(f"Signals: {', '.join(opp.signals)}")
        if opp.source_url:
            lines.append(f"URL: {opp.source_url}")
        lines.append("")

    lines += [
        "=== END OPPORTUNITIES ===",
        "",
        "Please structure the analysis so it is easy to act on.",
    ]
    return "\n".join(lines)
