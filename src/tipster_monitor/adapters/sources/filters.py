"""Shared filtering utilities for sources."""

from collections.abc import Iterable


def is_by_author(author: str, title: str, categories: Iterable[str]) -> bool:
    """
    Check if a feed entry belongs to the given author.

    Args:
        author: Author name to look for
        title: Title of the entry
        categories: Category/tag texts of the entry

    Returns:
        True if the author name appears in any category or in the title
        (case-insensitive substring match)
    """
    needle = author.strip().lower()
    if not needle:
        return True  # No filtering if no author provided

    if any(needle in category.lower() for category in categories):
        return True
    return needle in title.lower()
