"""The four Discord REST endpoints the bot talks to.

Command sync overwrites slash commands. Replies go through interaction
callbacks, interaction follow-ups and plain channel messages.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Optional, Union

import httpx

from .constants import DISCORD_API_BASE_URL
from .errors import DiscordAPIError, DiscordPermanentError, DiscordTransientError

logger = logging.getLogger(__name__)

JsonBody = Union[dict[str, Any], list[dict[str, Any]]]

_RETRYABLE_NETWORK_ERRORS = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.WriteError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.WriteTimeout,
)


class DiscordRestClient:
    def __init__(
        self,
        *,
        bot_token: str,
        timeout_seconds: float = 10.0,
        base_url: str = DISCORD_API_BASE_URL,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        retry_max_delay: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
            headers={"Authorization": f"Bot {bot_token}"},
        )
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._retry_max_delay = retry_max_delay

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def bulk_overwrite_application_commands(
        self,
        *,
        application_id: str,
        commands: list[dict[str, Any]],
        guild_id: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        if guild_id is None:
            path = f"/applications/{application_id}/commands"
        else:
            path = f"/applications/{application_id}/guilds/{guild_id}/commands"
        body = await self._send("PUT", path, commands)
        if not isinstance(body, list):
            return []
        return [item for item in body if isinstance(item, dict)]

    async def create_interaction_response(
        self,
        *,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> None:
        # Discord answers callbacks with 204 or an empty body.
        await self._send(
            "POST",
            f"/interactions/{interaction_id}/{interaction_token}/callback",
            payload,
            decode=False,
        )

    async def create_followup_message(
        self,
        *,
        application_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        body = await self._send(
            "POST", f"/webhooks/{application_id}/{interaction_token}", payload
        )
        return body if isinstance(body, dict) else {}

    async def create_channel_message(
        self,
        *,
        channel_id: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        body = await self._send("POST", f"/channels/{channel_id}/messages", payload)
        return body if isinstance(body, dict) else {}

    async def _send(
        self,
        method: str,
        path: str,
        payload: JsonBody,
        *,
        decode: bool = True,
    ) -> Any:
        """Send one request, waiting out rate limits and retrying failures.

        Rate limits and server or network failures have separate retry
        budgets of ``max_retries`` each.
        """
        rate_limit_waits = 0
        failures = 0
        while True:
            try:
                response = await self._client.request(method, path, json=payload)
            except httpx.HTTPError as exc:
                if not isinstance(exc, _RETRYABLE_NETWORK_ERRORS):
                    raise DiscordTransientError(
                        f"Discord API network error for {method} {path}: {exc}"
                    ) from exc
                if failures >= self._max_retries:
                    raise DiscordTransientError(
                        f"Discord API network error for {method} {path} "
                        f"after {failures} retries: {exc}"
                    ) from exc
                failures += 1
                await self._back_off(method, path, failures, type(exc).__name__)
                continue

            if response.status_code == 429:
                retry_after = _parse_retry_after(response.headers.get("Retry-After"))
                if retry_after is None or rate_limit_waits >= self._max_retries:
                    raise DiscordTransientError(
                        f"Discord API rate limit exceeded for {method} {path}",
                        retry_after=retry_after,
                        status_code=429,
                    )
                rate_limit_waits += 1
                logger.info(
                    "Discord rate limited %s %s, waiting %.2fs (wait %d)",
                    method,
                    path,
                    retry_after,
                    rate_limit_waits,
                )
                await asyncio.sleep(retry_after)
                continue

            if response.is_server_error and failures < self._max_retries:
                failures += 1
                await self._back_off(
                    method, path, failures, f"status {response.status_code}"
                )
                continue

            if response.is_error:
                raise _error_for_status(method, path, response)
            if not decode:
                return None
            return _decode_json(method, path, response)

    async def _back_off(self, method: str, path: str, attempt: int, reason: str) -> None:
        delay = min(
            self._retry_base_delay * (2**attempt) + random.uniform(0, 1),
            self._retry_max_delay,
        )
        logger.warning(
            "Discord %s on %s %s, retry %d/%d in %.1fs",
            reason,
            method,
            path,
            attempt,
            self._max_retries,
            delay,
        )
        await asyncio.sleep(delay)


def _error_for_status(
    method: str, path: str, response: httpx.Response
) -> DiscordAPIError:
    status_code = response.status_code
    preview = (response.text or "").strip().replace("\n", " ")[:200]
    detail = f"{method} {path}: status={status_code} body={preview!r}"
    if response.is_server_error:
        return DiscordTransientError(
            f"Discord API server error for {detail}", status_code=status_code
        )
    if status_code in (401, 403):
        return DiscordPermanentError(
            f"Discord API authentication failure for {detail}",
            status_code=status_code,
        )
    return DiscordPermanentError(
        f"Discord API rejected {detail}", status_code=status_code
    )


def _decode_json(method: str, path: str, response: httpx.Response) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise DiscordAPIError(
            f"Discord API returned non-JSON success response for {method} {path}"
        ) from exc


def _parse_retry_after(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return 0.0
