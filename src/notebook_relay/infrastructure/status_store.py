"""
Processing-status writes against the Supabase REST (PostgREST) endpoint.
"""

import json
from typing import Any

import httpx
from loguru import logger

from ..core.exceptions import StatusUpdateError
from ..webhooks.models import ProcessingStatus


class SourceStatusStore:
    """
    Updates the `processing_status` of a source row, keyed by its id.

    Only ever written to; prior state is never read back.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str | None,
        service_role_key: str | None,
        table: str = "sources",
    ):
        self._client = client
        self.base_url = (base_url or "").rstrip("/")
        self.service_role_key = service_role_key or ""
        self.table = table

        if not self.base_url or not self.service_role_key:
            logger.warning("Status store created without Supabase credentials")

    def _headers(self) -> dict[str, str]:
        return {
            "apikey": self.service_role_key,
            "Authorization": f"Bearer {self.service_role_key}",
            "Content-Type": "application/json",
            "Prefer": "return=minimal",
        }

    async def update_status(
        self,
        source_id: str,
        status: ProcessingStatus,
        error_message: str | None = None,
    ) -> None:
        """
        Write a status change for one source.

        Raises:
            StatusUpdateError: The store could not be reached or rejected the write
        """
        update_data: dict[str, Any] = {"processing_status": ProcessingStatus(status).value}
        if error_message:
            update_data["metadata"] = {"error": error_message}

        if not self.base_url:
            raise StatusUpdateError(
                message="Status store not configured: SUPABASE_URL is not set",
                error_code="STATUS_STORE_UNCONFIGURED",
                details={"source_id": source_id},
            )

        url = f"{self.base_url}/rest/v1/{self.table}"
        try:
            response = await self._client.patch(
                url,
                params={"id": f"eq.{source_id}"},
                json=update_data,
                headers=self._headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise StatusUpdateError(
                message=f"Status store returned HTTP {e.response.status_code}",
                error_code="STATUS_UPDATE_REJECTED",
                details={"source_id": source_id, "response": e.response.text[:1000]},
            ) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise StatusUpdateError(
                message=f"Status store unreachable: {e}",
                error_code="STATUS_UPDATE_FAILED",
                details={"source_id": source_id},
            ) from e

        logger.info(f"Source {source_id} marked {update_data['processing_status']}")

    async def mark_failed(self, source_id: str, error_message: str) -> bool:
        """
        Best-effort transition to `failed`.
        Failures are logged and reported as False, never raised.
        """
        try:
            await self.update_status(source_id, ProcessingStatus.FAILED, error_message)
            return True
        except StatusUpdateError as e:
            logger.error(f"Could not update status for source {source_id}: {e.message}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error updating status for source {source_id}: {e!r}")
            return False


def recover_source_id(raw_body: bytes | None) -> str | None:
    """
    Pull `sourceId` back out of an already-read request body.

    Returns None (and logs) when the body cannot be parsed or has no id.
    """
    if not raw_body:
        return None
    try:
        data = json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error(f"Could not parse request to update source status: {e}")
        return None

    if not isinstance(data, dict):
        logger.error("Could not parse request to update source status: body is not an object")
        return None

    source_id = data.get("sourceId")
    if not source_id or isinstance(source_id, (dict, list, bool)):
        return None
    return str(source_id)
