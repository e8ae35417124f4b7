"""
Webhook relay package for Notebook Relay.
Request models, relay services and the HTTP router.
"""

from .models import ChatMessageRequest, ProcessDocumentRequest, RelayResponse

__all__ = ["ProcessDocumentRequest", "ChatMessageRequest", "RelayResponse"]
