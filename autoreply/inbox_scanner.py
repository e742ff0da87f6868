"""
Inbox scanning: find unread inbox messages that contain trigger phrases
"""
import asyncio
import logging
from typing import List

from .gmail_client import GmailClient, parse_message
from .keyword_matcher import KeywordMatcher
from .models import MatchResult

logger = logging.getLogger(__name__)


class InboxScanner:
    """Lists a bounded batch of unread inbox messages and filters by keyword"""

    def __init__(self, client: GmailClient, matcher: KeywordMatcher, max_results: int = 5):
        self.client = client
        self.matcher = matcher
        self.max_results = max_results

    async def scan(self) -> List[MatchResult]:
        """
        Scan the inbox once

        Messages are fetched concurrently. Results keep the order in which
        Gmail listed the messages.

        Returns:
            MatchResult for each message whose body contains a trigger phrase,
            never more than max_results
        """
        message_ids = await asyncio.to_thread(self.client.list_unread_message_ids, self.max_results)
        message_ids = message_ids[:self.max_results]

        if not message_ids:
            logger.debug("No unread messages in inbox")
            return []

        results = await asyncio.gather(*(self._evaluate(message_id) for message_id in message_ids))
        matches = [result for result in results if result.has_keywords]

        logger.info(f"Scanned {len(message_ids)} unread messages, {len(matches)} matched keywords")
        return matches

    async def _evaluate(self, message_id: str) -> MatchResult:
        resource = await asyncio.to_thread(self.client.get_message, message_id)
        message = parse_message(resource)
        return MatchResult(
            message_id=message_id,
            has_keywords=self.matcher.matches(message.body)
        )
