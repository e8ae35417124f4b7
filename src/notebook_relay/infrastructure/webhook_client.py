"""
Outbound webhook client.
Uses httpx for async HTTP operations; one attempt per call, no retries.
"""

from typing import Any

import httpx
from loguru import logger

from ..core.exceptions import WebhookResponseError, WebhookTransportError


class WebhookClient:
    """
    Posts JSON payloads to an external webhook and classifies the outcome.

    The underlying httpx client is injected so the transport (and its
    default timeout) is owned by the caller.
    """

    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        authorization: str | None = None,
    ) -> httpx.Response:
        """
        POST `payload` to `url`.

        Args:
            url: Webhook endpoint
            payload: JSON body
            authorization: Optional Authorization header value

        Returns:
            The successful (2xx) response

        Raises:
            WebhookTransportError: The request could not be sent
            WebhookResponseError: The webhook answered with a non-2xx status
        """
        headers = {"Content-Type": "application/json"}
        if authorization:
            headers["Authorization"] = authorization

        try:
            response = await self._client.post(url, json=payload, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"Network error calling webhook {url}: {e}")
            raise WebhookTransportError(
                message=f"Failed to connect to webhook URL: {url}. Network error: {e}",
                error_code="WEBHOOK_TRANSPORT_ERROR",
                details={"webhookUrl": url, "error": str(e)},
            ) from e

        logger.info(f"Webhook response status: {response.status_code}")
        logger.debug(f"Webhook response headers: {dict(response.headers)}")

        if not response.is_success:
            body = response.text
            status_text = response.reason_phrase
            logger.error(
                f"Webhook call failed: {response.status_code} {status_text} {body}"
            )
            raise WebhookResponseError(
                message=f"Webhook returned {response.status_code} {status_text}: {body}",
                error_code="WEBHOOK_RESPONSE_ERROR",
                details={
                    "webhookUrl": url,
                    "status": response.status_code,
                    "statusText": status_text,
                    "body": body,
                },
            )

        return response
