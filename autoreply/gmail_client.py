"""
Gmail API client for reading, labelling and sending mail
"""
import base64
import logging
import os
from typing import Any, Dict, List, Optional

import httplib2
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .config import Settings
from .models import GmailMessage, MessageHeader

logger = logging.getLogger(__name__)

USER_ID = "me"
INBOX_LABEL = "INBOX"
DEFAULT_HTTP_TIMEOUT = 60


class GmailClient:
    """Thin wrapper over the Gmail v1 service for the calls the workflow makes"""

    def __init__(
        self,
        service: Any,
        credentials: Optional[Credentials] = None,
        timeout: int = DEFAULT_HTTP_TIMEOUT
    ):
        """
        Args:
            service: Resource returned by googleapiclient.discovery.build
            credentials: When given, every request runs on its own authorized
                         httplib2 connection so calls may be issued from
                         several threads at once
            timeout: Socket timeout in seconds for those connections
        """
        self.service = service
        self.credentials = credentials
        self.timeout = timeout

    def _execute(self, request) -> Dict[str, Any]:
        if self.credentials is None:
            return request.execute()
        http = AuthorizedHttp(self.credentials, http=httplib2.Http(timeout=self.timeout))
        return request.execute(http=http)

    def list_labels(self) -> List[Dict[str, Any]]:
        """Return every label in the mailbox"""
        response = self._execute(self.service.users().labels().list(userId=USER_ID))
        return response.get("labels", [])

    def create_label(self, name: str) -> Dict[str, Any]:
        """Create a label shown both in the label list and the message list"""
        request = self.service.users().labels().create(
            userId=USER_ID,
            body={
                "name": name,
                "labelListVisibility": "labelShow",
                "messageListVisibility": "show",
            }
        )
        return self._execute(request)

    def list_unread_message_ids(self, max_results: int = 5) -> List[str]:
        """
        List unread messages in the inbox

        Args:
            max_results: Page size requested from Gmail

        Returns:
            Message IDs, newest first
        """
        request = self.service.users().messages().list(
            userId=USER_ID,
            labelIds=[INBOX_LABEL],
            q="is:unread",
            maxResults=max_results
        )
        response = self._execute(request)
        message_ids = [message["id"] for message in response.get("messages", [])]
        logger.debug(f"Found {len(message_ids)} unread inbox messages")
        return message_ids

    def get_message(self, message_id: str) -> Dict[str, Any]:
        """Fetch the full message resource"""
        request = self.service.users().messages().get(
            userId=USER_ID,
            id=message_id,
            format="full"
        )
        return self._execute(request)

    def modify_labels(
        self,
        message_id: str,
        add_label_ids: Optional[List[str]] = None,
        remove_label_ids: Optional[List[str]] = None
    ) -> Dict[str, Any]:
        """Add and/or remove labels on a message"""
        request = self.service.users().messages().modify(
            userId=USER_ID,
            id=message_id,
            body={
                "addLabelIds": add_label_ids or [],
                "removeLabelIds": remove_label_ids or [],
            }
        )
        return self._execute(request)

    def send_raw(self, raw: str, thread_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Send a pre-encoded message

        Args:
            raw: base64url encoded RFC 5322 message
            thread_id: Gmail thread to attach the message to
        """
        body = {"raw": raw}
        if thread_id:
            body["threadId"] = thread_id
        return self._execute(self.service.users().messages().send(userId=USER_ID, body=body))


def parse_message(resource: Dict[str, Any]) -> GmailMessage:
    """Convert a Gmail message resource into our GmailMessage model"""
    payload = resource.get("payload", {})
    headers = [
        MessageHeader(name=header["name"], value=header.get("value", ""))
        for header in payload.get("headers", [])
    ]
    return GmailMessage(
        id=resource["id"],
        thread_id=resource.get("threadId"),
        label_ids=resource.get("labelIds", []),
        headers=headers,
        body=extract_plain_text(payload)
    )


def extract_plain_text(payload: Dict[str, Any]) -> str:
    """
    Extract the first text/plain body from a message payload

    Nested multipart containers are searched depth-first. Parts whose data
    is not inline (attachments) are skipped.

    Returns:
        Decoded text, or an empty string when there is no plain-text part
    """
    parts = payload.get("parts") or []

    if not parts:
        if payload.get("mimeType") == "text/plain":
            return _decode_body(payload.get("body", {}))
        return ""

    for part in parts:
        mime_type = part.get("mimeType", "")
        if mime_type == "text/plain":
            text = _decode_body(part.get("body", {}))
            if text:
                return text
        elif mime_type.startswith("multipart/"):
            text = extract_plain_text(part)
            if text:
                return text

    return ""


def _decode_body(body: Dict[str, Any]) -> str:
    data = body.get("data")
    if not data:
        return ""
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def load_credentials(credentials_file: str, token_file: str, scopes: List[str]) -> Credentials:
    """
    Load OAuth user credentials, running the local consent flow if needed

    A cached token is reused and refreshed when possible; otherwise the
    installed-app flow opens a browser. The resulting token is written back
    to token_file.
    """
    creds = None

    if os.path.exists(token_file):
        creds = Credentials.from_authorized_user_file(token_file, scopes)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing Gmail access token")
            creds.refresh(Request())
        else:
            logger.info(f"Starting OAuth flow with client secrets from {credentials_file}")
            flow = InstalledAppFlow.from_client_secrets_file(credentials_file, scopes)
            creds = flow.run_local_server(port=0)

        with open(token_file, "w") as token:
            token.write(creds.to_json())

    return creds


def get_gmail_client(settings: Settings) -> GmailClient:
    """
    Authenticate and build a GmailClient from settings.

    Returns:
        GmailClient instance
    """
    creds = load_credentials(settings.credentials_file, settings.token_file, settings.scopes)
    service = build("gmail", "v1", credentials=creds, cache_discovery=False)
    logger.info("Gmail service authenticated successfully")
    return GmailClient(service, credentials=creds, timeout=settings.http_timeout)
