"""
In-memory stand-in for the Gmail API and message builders shared by the tests
"""
import base64
from typing import Dict, List, Optional

import httplib2
from googleapiclient.errors import HttpError


def encode(text: str) -> str:
    """Encode text the way Gmail returns body data"""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def make_http_error(status: int) -> HttpError:
    return HttpError(httplib2.Response({"status": status}), b'{"error": {"message": "test"}}')


def make_message(
    message_id: str,
    body: Optional[str],
    sender: Optional[str] = "Alice <alice@example.com>",
    subject: Optional[str] = "Hello",
    in_reply_to: Optional[str] = None,
    message_header_id: Optional[str] = None,
    thread_id: str = "thread-1"
) -> Dict:
    """Build a Gmail message resource with a single text/plain part"""
    headers = []
    if sender is not None:
        headers.append({"name": "From", "value": sender})
    if subject is not None:
        headers.append({"name": "Subject", "value": subject})
    if in_reply_to is not None:
        headers.append({"name": "In-Reply-To", "value": in_reply_to})
    if message_header_id is not None:
        headers.append({"name": "Message-ID", "value": message_header_id})

    parts = []
    if body is not None:
        parts.append({"mimeType": "text/plain", "body": {"data": encode(body)}})
    parts.append({"mimeType": "text/html", "body": {"data": encode("<p>html</p>")}})

    return {
        "id": message_id,
        "threadId": thread_id,
        "labelIds": ["INBOX", "UNREAD"],
        "payload": {"mimeType": "multipart/alternative", "headers": headers, "parts": parts},
    }


class FakeGmailClient:
    """Records every mutating call; ignores max_results like a misbehaving server would"""

    def __init__(self, messages: Optional[List[Dict]] = None):
        self.messages = {m["id"]: m for m in (messages or [])}
        self.labels: List[Dict] = [{"id": "INBOX", "name": "INBOX"}]
        self.created_labels: List[str] = []
        self.sent: List[Dict] = []
        self.modified: List[Dict] = []
        self.fetched: List[str] = []
        self.modify_error: Optional[Exception] = None

    def list_labels(self):
        return list(self.labels)

    def create_label(self, name):
        if any(label["name"] == name for label in self.labels):
            raise make_http_error(409)
        label = {"id": f"Label_{len(self.labels)}", "name": name}
        self.labels.append(label)
        self.created_labels.append(name)
        return label

    def list_unread_message_ids(self, max_results=5):
        return [
            message_id for message_id, message in self.messages.items()
            if "UNREAD" in message["labelIds"] and "INBOX" in message["labelIds"]
        ]

    def get_message(self, message_id):
        self.fetched.append(message_id)
        return self.messages[message_id]

    def modify_labels(self, message_id, add_label_ids=None, remove_label_ids=None):
        if self.modify_error:
            raise self.modify_error
        self.modified.append({
            "id": message_id,
            "add": list(add_label_ids or []),
            "remove": list(remove_label_ids or []),
        })
        labels = self.messages[message_id]["labelIds"]
        labels[:] = [l for l in labels if l not in (remove_label_ids or [])] + list(add_label_ids or [])
        return self.messages[message_id]

    def send_raw(self, raw, thread_id=None):
        self.sent.append({"raw": raw, "threadId": thread_id})
        return {"id": f"sent-{len(self.sent)}"}
