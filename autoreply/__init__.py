"""
Auto-Reply Service

Polls a Gmail inbox for unread messages containing trigger phrases:
- Sends a canned auto-reply to the sender
- Tags the message with a managed label
- Archives it out of the inbox
"""

__version__ = "1.0.0"
