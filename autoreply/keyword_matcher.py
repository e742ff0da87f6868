"""
Trigger phrase matching for email bodies
"""
from typing import Iterable, Tuple


class KeywordMatcher:
    """Decide whether an email body contains any configured trigger phrase"""

    def __init__(self, keywords: Iterable[str]):
        """
        Initialize the matcher.

        Args:
            keywords: Trigger phrases; matched case-insensitively as substrings.
                      Blank phrases are ignored since they would match anything.
        """
        self.keywords: Tuple[str, ...] = tuple(
            keyword.lower() for keyword in keywords if keyword and keyword.strip()
        )

    def matches(self, body: str) -> bool:
        """
        Check a plain-text body for trigger phrases.

        Args:
            body: Decoded plain-text email body

        Returns:
            True if any keyword occurs in the body, False otherwise
        """
        if not body:
            return False

        lowered = body.lower()
        return any(keyword in lowered for keyword in self.keywords)
