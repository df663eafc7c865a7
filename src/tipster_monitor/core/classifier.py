"""Classification of candidate posts against already seen links."""

from collections.abc import Collection, Iterable

from tipster_monitor.core.entities import CandidateItem


def classify(
    candidates: Iterable[CandidateItem], seen: Collection[str]
) -> list[CandidateItem]:
    """Return candidates whose link is not in seen, keeping input order.

    Links are compared exactly as extracted: no trailing slash, query string
    or case normalization.
    """
    return [item for item in candidates if item.link not in seen]
