"""Summarize reviewer votes as a compact tally string."""

from typing import Sequence

from models.data_models import Reviewer


def summarize_votes(reviewers: Sequence[Reviewer]) -> str:
    """Summarize reviewer votes.

    Rejections dominate approvals, which dominate waiting reviewers:
    "-{down}/{total}", "+{up}/{total}" or "~{waiting}/{total}".
    No reviewers gives "0".

    Examples:
        votes [5, -10, 0] -> "-1/3"
        votes [10, 0] -> "+1/2"
        votes [0, 0] -> "~2/2"
    """
    total = len(reviewers)
    if total == 0:
        return "0"

    up = sum(1 for r in reviewers if r.vote > 0)
    down = sum(1 for r in reviewers if r.vote < 0)
    waiting = total - up - down

    if down > 0:
        return f"-{down}/{total}"
    if up > 0:
        return f"+{up}/{total}"
    if waiting > 0:
        return f"~{waiting}/{total}"
    return f"{total}"
