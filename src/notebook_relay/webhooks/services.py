"""
Relay services for the two webhook handlers.
Each request builds fresh services from the current settings.
"""

import json
from typing import Any

import httpx
from loguru import logger

from ..config.settings import RelaySettings
from ..core.exceptions import (
    BaseRelayException,
    ConfigurationError,
    WebhookResponseError,
    WebhookTransportError,
    create_invalid_url_error,
    create_missing_fields_error,
)
from ..core.logging import mask_secret
from ..infrastructure.status_store import SourceStatusStore, recover_source_id
from ..infrastructure.webhook_client import WebhookClient
from ..utils.urls import is_valid_url
from .models import (
    ChatMessageRequest,
    ChatWebhookPayload,
    DocumentWebhookPayload,
    ProcessDocumentRequest,
    RelayResponse,
    utc_timestamp,
)

INTERNAL_ERROR_STATUS_MESSAGE = "Internal server error during document processing"


def _load_json_object(raw_body: bytes) -> dict[str, Any]:
    """Decode a request body that must be a JSON object."""
    data = json.loads(raw_body)
    if not isinstance(data, dict):
        raise TypeError("Request body must be a JSON object")
    return data


class DocumentProcessingRelay:
    """
    Forwards a document reference to the processing webhook.

    Every failure after the request is validated marks the source
    `failed` exactly once before responding. Success writes nothing;
    the webhook reports completion through its own callback.
    """

    def __init__(
        self,
        settings: RelaySettings,
        webhook_client: WebhookClient,
        status_store: SourceStatusStore,
    ):
        self.settings = settings
        self.webhook_client = webhook_client
        self.status_store = status_store

    async def relay(self, raw_body: bytes) -> RelayResponse:
        try:
            request = ProcessDocumentRequest.from_request_data(_load_json_object(raw_body))

            missing = request.missing_fields()
            if missing:
                error = create_missing_fields_error(missing)
                logger.warning(f"Rejecting document request, missing: {missing}")
                return RelayResponse(
                    status_code=400,
                    content={"error": error.message, "missing": error.details["missing"]},
                )

            logger.info(
                f"Processing document: source_id={request.source_id}, "
                f"file_path={request.file_path}, source_type={request.source_type}"
            )
            return await self._forward(request)

        except Exception as e:
            logger.error(f"Error in process-document relay: {e!r}")
            await self._recover_and_mark_failed(raw_body)
            return RelayResponse(
                status_code=500,
                content={"error": "Internal server error", "details": str(e)},
            )

    def _resolve_webhook_url(self) -> str:
        webhook_url = self.settings.require("document_processing_webhook_url")
        if not is_valid_url(webhook_url):
            raise create_invalid_url_error("DOCUMENT_PROCESSING_WEBHOOK_URL", webhook_url)
        return webhook_url

    def build_payload(self, request: ProcessDocumentRequest) -> DocumentWebhookPayload:
        return DocumentWebhookPayload(
            source_id=request.source_id,
            file_url=self.settings.public_file_url(request.file_path),
            file_path=request.file_path,
            source_type=request.source_type,
            callback_url=self.settings.callback_url(),
        )

    async def _forward(self, request: ProcessDocumentRequest) -> RelayResponse:
        source_id = request.source_id

        try:
            webhook_url = self._resolve_webhook_url()
        except ConfigurationError as e:
            logger.error(f"Document webhook misconfigured: {e.message}")
            await self.status_store.mark_failed(source_id, e.message)
            return RelayResponse(status_code=500, content={"error": e.message})

        logger.info(f"Calling external webhook: {webhook_url}")
        payload = self.build_payload(request)
        logger.debug(f"Webhook payload: {payload.model_dump()}")

        try:
            response = await self.webhook_client.post_json(
                webhook_url,
                payload.model_dump(),
                authorization=self.settings.notebook_generation_auth,
            )
        except WebhookTransportError:
            error_message = (
                f"Failed to connect to webhook URL: {webhook_url}. "
                "Please verify the URL is correct and accessible."
            )
            await self.status_store.mark_failed(source_id, error_message)
            return RelayResponse(
                status_code=500,
                content={
                    "error": "Document processing failed",
                    "details": error_message,
                    "webhookUrl": webhook_url,
                },
            )
        except WebhookResponseError as e:
            await self.status_store.mark_failed(source_id, e.message)
            return RelayResponse(
                status_code=500,
                content={
                    "error": "Document processing failed",
                    "details": e.message,
                    "webhookUrl": webhook_url,
                    "status": e.status_code,
                    "statusText": e.status_text,
                },
            )

        result = response.json()
        logger.info(f"Webhook response: {result}")

        return RelayResponse(
            content={
                "success": True,
                "message": "Document processing initiated",
                "result": result,
            }
        )

    async def _recover_and_mark_failed(self, raw_body: bytes) -> None:
        source_id = recover_source_id(raw_body)
        if source_id:
            await self.status_store.mark_failed(source_id, INTERNAL_ERROR_STATUS_MESSAGE)


class ChatMessageRelay:
    """
    Forwards a chat message to the chat webhook and returns its reply.
    All failures surface through one error response.
    """

    def __init__(self, settings: RelaySettings, webhook_client: WebhookClient):
        self.settings = settings
        self.webhook_client = webhook_client

    async def relay(self, raw_body: bytes) -> RelayResponse:
        try:
            request = ChatMessageRequest.model_validate(_load_json_object(raw_body))
            logger.info(
                f"Received message: session_id={request.session_id}, user_id={request.user_id}"
            )

            webhook_url = self.settings.require("notebook_chat_url")
            auth_header = self.settings.require("notebook_generation_auth")
            if not is_valid_url(webhook_url):
                raise create_invalid_url_error("NOTEBOOK_CHAT_URL", webhook_url)

            logger.info(f"Sending to webhook URL: {webhook_url}")
            logger.info(f"Using auth header: {mask_secret(auth_header)}")

            payload = ChatWebhookPayload.from_request(request)
            logger.debug(f"Webhook payload: {payload.model_dump()}")

            response = await self.webhook_client.post_json(
                webhook_url, payload.model_dump(), authorization=auth_header
            )
            data = self._parse_response(response)
            logger.info(f"Webhook response data: {data}")

            return RelayResponse(content={"success": True, "data": data})

        except Exception as e:
            logger.error(f"Error in send-chat-message relay: {e!r}")
            return RelayResponse(status_code=500, content=self._error_content(e))

    @staticmethod
    def _parse_response(response: httpx.Response) -> Any:
        """JSON body if there is one, else a wrapper around the raw text."""
        try:
            return response.json()
        except ValueError:
            logger.info(f"Webhook returned non-JSON response: {response.text}")
            return {"message": "Webhook processed successfully", "response": response.text}

    def _error_content(self, error: Exception) -> dict[str, Any]:
        if isinstance(error, BaseRelayException):
            message = error.message
        else:
            message = str(error) or "Failed to send message to webhook"

        return {
            "error": message,
            "details": {
                "webhookUrl": self.settings.notebook_chat_url,
                "hasAuth": bool(self.settings.notebook_generation_auth),
                "timestamp": utc_timestamp(),
            },
        }
