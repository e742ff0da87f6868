"""
Get-or-create for the label applied to handled messages
"""
import logging

from googleapiclient.errors import HttpError

from .gmail_client import GmailClient

logger = logging.getLogger(__name__)

HTTP_CONFLICT = 409


class LabelNotFoundError(RuntimeError):
    """Gmail reported a name conflict but no label with that name was listed"""


class LabelManager:
    """Ensures a named label exists exactly once"""

    def __init__(self, client: GmailClient):
        self.client = client

    def ensure_label(self, name: str) -> str:
        """
        Create the label, or return the existing one's ID

        Args:
            name: Label name

        Returns:
            Gmail label ID

        Raises:
            HttpError: Any provider error other than a name conflict
            LabelNotFoundError: Conflict reported but the label is not listed
        """
        try:
            label = self.client.create_label(name)
            logger.info(f"Created label '{name}' (id: {label['id']})")
            return label["id"]
        except HttpError as e:
            if e.resp.status != HTTP_CONFLICT:
                raise
            logger.debug(f"Label '{name}' already exists, looking it up")

        for label in self.client.list_labels():
            if label.get("name") == name:
                logger.info(f"Using existing label '{name}' (id: {label['id']})")
                return label["id"]

        raise LabelNotFoundError(f"Label '{name}' conflicts but was not found in label list")
