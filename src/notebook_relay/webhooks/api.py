"""
Relay API router.
Collaborators are wired through FastAPI dependencies built from
injectable factories, so every request sees fresh settings.
"""

from collections.abc import AsyncIterator, Callable
from typing import Any

import httpx
from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from ..config.settings import RelaySettings, get_settings
from ..infrastructure.status_store import SourceStatusStore
from ..infrastructure.webhook_client import WebhookClient
from .services import ChatMessageRelay, DocumentProcessingRelay

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

SettingsProvider = Callable[[], RelaySettings]
HTTPClientFactory = Callable[[], httpx.AsyncClient]


def default_http_client() -> httpx.AsyncClient:
    """Outbound client with httpx's default timeout."""
    return httpx.AsyncClient(follow_redirects=True)


def json_response(content: dict[str, Any], status_code: int = 200) -> JSONResponse:
    """JSON response carrying the permissive CORS headers."""
    return JSONResponse(status_code=status_code, content=content, headers=CORS_HEADERS)


def create_relay_router(
    settings_provider: SettingsProvider | None = None,
    http_client_factory: HTTPClientFactory | None = None,
) -> APIRouter:
    """
    Create the relay router.

    Args:
        settings_provider: Callable returning settings (defaults to get_settings)
        http_client_factory: Callable returning an httpx.AsyncClient
            (defaults to default_http_client)

    Returns:
        Configured FastAPI router
    """
    router = APIRouter(tags=["relay"])

    settings_provider = settings_provider or get_settings
    http_client_factory = http_client_factory or default_http_client

    def get_request_settings() -> RelaySettings:
        return settings_provider()

    async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
        async with http_client_factory() as client:
            yield client

    def get_document_relay(
        settings: RelaySettings = Depends(get_request_settings),
        client: httpx.AsyncClient = Depends(get_http_client),
    ) -> DocumentProcessingRelay:
        status_store = SourceStatusStore(
            client,
            base_url=settings.supabase_url,
            service_role_key=settings.supabase_service_role_key,
            table=settings.status_table,
        )
        return DocumentProcessingRelay(settings, WebhookClient(client), status_store)

    def get_chat_relay(
        settings: RelaySettings = Depends(get_request_settings),
        client: httpx.AsyncClient = Depends(get_http_client),
    ) -> ChatMessageRelay:
        return ChatMessageRelay(settings, WebhookClient(client))

    @router.options("/process-document")
    @router.options("/send-chat-message")
    async def preflight() -> Response:
        """CORS preflight."""
        return Response(status_code=200, headers=CORS_HEADERS)

    @router.post("/process-document")
    async def process_document(
        request: Request,
        relay: DocumentProcessingRelay = Depends(get_document_relay),
    ) -> JSONResponse:
        """Forward a document to the processing webhook."""
        raw_body = await request.body()
        result = await relay.relay(raw_body)
        return json_response(result.content, result.status_code)

    @router.post("/send-chat-message")
    async def send_chat_message(
        request: Request,
        relay: ChatMessageRelay = Depends(get_chat_relay),
    ) -> JSONResponse:
        """Forward a chat message to the chat webhook."""
        raw_body = await request.body()
        result = await relay.relay(raw_body)
        return json_response(result.content, result.status_code)

    return router
