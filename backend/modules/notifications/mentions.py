"""
@email mention extraction.
"""

import re

MENTION_PATTERN = re.compile(r"@([\w.+-]+@[\w.-]+\.[A-Za-z]{2,})")


def extract_mentions(body: str) -> list[str]:
    """
    Return the mentioned emails in a comment body.

    Emails are lowercased and deduplicated, keeping first-seen order.
    Code spans get no special treatment.

    Example:
        >>> extract_mentions("ping @Bob@Example.com and @bob@example.com")
        ['bob@example.com']
    """
    seen: dict[str, None] = {}
    for match in MENTION_PATTERN.finditer(body or ""):
        seen.setdefault(match.group(1).lower(), None)
    return list(seen)
