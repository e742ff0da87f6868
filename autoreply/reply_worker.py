"""
Reply worker: sends the canned auto-reply and archives the original
"""
import asyncio
import base64
import logging
from email import policy
from email.message import EmailMessage
from typing import Optional, Set

from .gmail_client import INBOX_LABEL, GmailClient, parse_message
from .models import ReplyOutcome, ReplyStatus

logger = logging.getLogger(__name__)

REPLY_SUBJECT_PREFIX = "Re: "

AUTO_REPLY_BODY = (
    "Thank you for your email. I'm currently unavailable and will reply to you soon.\n"
    "Note: This is an auto-generated message. Please do not reply to this email.\n"
)


def build_reply(
    to: str,
    subject: str,
    in_reply_to: Optional[str] = None,
    body: str = AUTO_REPLY_BODY
) -> str:
    """
    Build the auto-reply as a base64url encoded RFC 5322 message

    Args:
        to: Recipient, normally the original From header
        subject: Original subject; "Re: " is prepended
        in_reply_to: Message-ID of the original, used for threading headers
        body: Plain-text body, must be 7-bit clean

    Returns:
        Value for the "raw" field of a Gmail send request
    """
    message = EmailMessage()
    message["To"] = to
    message["Subject"] = REPLY_SUBJECT_PREFIX + subject
    if in_reply_to:
        message["In-Reply-To"] = in_reply_to
        message["References"] = in_reply_to
    message.set_content(body, subtype="plain", charset="utf-8", cte="7bit")

    return base64.urlsafe_b64encode(message.as_bytes(policy=policy.SMTP)).decode("ascii")


class ReplyWorker:
    """Replies to matched messages and moves them out of the inbox"""

    def __init__(self, client: GmailClient, label_id: str):
        """
        Args:
            client: Authenticated Gmail client
            label_id: Managed label added to every handled message
        """
        self.client = client
        self.label_id = label_id
        self.replied_ids: Set[str] = set()

    async def process(self, message_id: str) -> ReplyOutcome:
        """
        Reply to one candidate message

        Fetch and send errors propagate to the caller. A failed relabel is
        logged and reported in the outcome.
        """
        if message_id in self.replied_ids:
            logger.debug(f"Already replied to {message_id} in this process")
            return ReplyOutcome(message_id=message_id, status=ReplyStatus.ALREADY_REPLIED)

        resource = await asyncio.to_thread(self.client.get_message, message_id)
        message = parse_message(resource)

        if message.has_header("In-Reply-To"):
            logger.debug(f"Message {message_id} is itself a reply, skipping")
            return ReplyOutcome(message_id=message_id, status=ReplyStatus.ALREADY_REPLIED)

        sender = message.get_header("From")
        subject = message.get_header("Subject")
        if sender is None or subject is None:
            logger.warning(f"Message {message_id} is missing From or Subject header, skipping")
            return ReplyOutcome(message_id=message_id, status=ReplyStatus.MISSING_HEADERS)

        raw = build_reply(sender, subject, in_reply_to=message.get_header("Message-ID"))
        await asyncio.to_thread(self.client.send_raw, raw, message.thread_id)
        self.replied_ids.add(message_id)

        outcome = ReplyOutcome(message_id=message_id, status=ReplyStatus.REPLIED, recipient=sender)
        try:
            await asyncio.to_thread(
                self.client.modify_labels,
                message_id,
                [self.label_id],
                [INBOX_LABEL]
            )
        except Exception as e:
            logger.error(f"Replied to {message_id} but failed to relabel it: {e}")
            outcome.status = ReplyStatus.RELABEL_FAILED
            outcome.error = str(e)

        logger.info(f"Replied to the email - {sender}")
        return outcome
