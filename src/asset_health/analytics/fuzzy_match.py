"""Scoring for asset-code autocomplete and suggestions.

Code bonuses are exclusive (exact > prefix > contains); the name bonus is
added on top of whichever code bonus applied.
"""

from __future__ import annotations

from asset_health.analytics.models import Asset

EXACT_CODE_SCORE = 100
PREFIX_CODE_SCORE = 80
CONTAINS_CODE_SCORE = 60
NAME_MATCH_SCORE = 20

DEFAULT_SUGGESTION_LIMIT = 10


def normalize_code(raw: str | None) -> str | None:
    """Trim user input; None when nothing is left."""
    if raw is None:
        return None
    trimmed = raw.strip()
    return trimmed or None


def match_score(asset: Asset, needle: str) -> int:
    """Case-insensitive match score of ``asset`` against ``needle``."""
    term = needle.lower()
    code = asset.code.lower()

    score = 0
    if code == term:
        score += EXACT_CODE_SCORE
    elif code.startswith(term):
        score += PREFIX_CODE_SCORE
    elif term in code:
        score += CONTAINS_CODE_SCORE

    if term in (asset.name or "").lower():
        score += NAME_MATCH_SCORE

    return score


def rank_suggestions(candidates: list[Asset], needle: str) -> list[Asset]:
    """Order candidates by match score, highest first.

    Ties keep the candidate order (code asc, name asc from the prefilter).
    """
    scored = [(match_score(asset, needle), asset) for asset in candidates]
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [asset for _, asset in scored]
