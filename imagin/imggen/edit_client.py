"""Async wrapper around the Gemini ``generateContent`` image editing endpoint."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

import httpx

from imagin.config.settings import Settings


class EditServiceRequestError(RuntimeError):
    """Raised when the edit service cannot be reached or responds with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


logger = logging.getLogger(__name__)


class EditService(Protocol):
    """Anything able to turn an image plus an instruction into a raw response."""

    async def edit_image(self, image_b64: str, content_type: str, instruction: str) -> Mapping[str, Any]:
        ...


def build_edit_request(image_b64: str, content_type: str, instruction: str) -> dict[str, Any]:
    """Compose a request with one inline image part and one text part."""

    return {
        "contents": [
            {
                "parts": [
                    {"inlineData": {"data": image_b64, "mimeType": content_type}},
                    {"text": instruction},
                ],
            },
        ],
        "generationConfig": {"responseModalities": ["IMAGE"]},
    }


class GeminiEditClient:
    """Sends edit requests to the configured Gemini image model."""

    def __init__(self, settings: Settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        if not settings.gemini_api_key:
            raise RuntimeError("GEMINI_API_KEY is not configured.")

        self._settings = settings
        self._client = httpx.AsyncClient(
            base_url=settings.gemini_base_url.rstrip("/"),
            timeout=settings.request_timeout,
            headers={"x-goog-api-key": settings.gemini_api_key},
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""

        await self._client.aclose()

    async def _request_json(
        self,
        method: str,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, endpoint, json=json_body)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except httpx.TimeoutException as exc:
            raise EditServiceRequestError("Timed out waiting for the edit service.") from exc
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text.strip()
            if len(detail) > 240:
                detail = detail[:240] + "..."
            raise EditServiceRequestError(
                f"Edit service returned {exc.response.status_code}: {detail}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise EditServiceRequestError(f"Edit service request failed: {exc}") from exc
        except ValueError as exc:
            raise EditServiceRequestError("Edit service returned a non-JSON body.") from exc

    async def edit_image(self, image_b64: str, content_type: str, instruction: str) -> dict[str, Any]:
        """Submit the image and instruction and return the raw JSON response."""

        model = self._settings.gemini_image_model
        logger.info("Requesting edit from %s (%d base64 chars)", model, len(image_b64))
        return await self._request_json(
            "POST",
            f"/models/{model}:generateContent",
            json_body=build_edit_request(image_b64, content_type, instruction),
        )

    async def ping(self) -> bool:
        """Return ``True`` when the service responds to a model listing call."""

        payload = await self._request_json("GET", "/models")
        return bool(payload.get("models"))
