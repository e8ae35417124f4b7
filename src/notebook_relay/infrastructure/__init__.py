"""
Infrastructure package for outbound HTTP integrations.
Handles the webhook endpoints and the status store.
"""

from .status_store import SourceStatusStore, recover_source_id
from .webhook_client import WebhookClient

__all__ = ["WebhookClient", "SourceStatusStore", "recover_source_id"]
