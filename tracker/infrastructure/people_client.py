"""
Client for the external people-info service.

The service resolves passport data into personal info:

    GET /info?passportSerie=1234&passportNumber=567890
    -> {"name": ..., "surname": ..., "patronymic": ..., "address": ...}

Transport failures, timeouts, non-200 responses and undecodable bodies are
all surfaced as PeopleLookupError. Calls are not retried.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from tracker.domain.errors import PeopleLookupError
from tracker.domain.models import People
from tracker.utils.logging import get_logger

log = get_logger(__name__)

_OP = "people_client.lookup"


class PeopleClient:
    """
    Thin async wrapper over the people-info HTTP endpoint.

    The aiohttp session is created lazily on first use so the client can be
    constructed outside a running event loop.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[aiohttp.ClientSession] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None
        self._log = logger or log

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def lookup(self, serie: str, number: str) -> People:
        """
        Fetch personal info for the given passport.

        Raises
        ------
        PeopleLookupError
            On any transport, status or decoding failure.
        """
        url = f"{self._base_url}/info"
        params = {"passportSerie": serie, "passportNumber": number}
        self._log.debug("requesting people info", extra={"url": url, **params})

        try:
            async with self._get_session().get(url, params=params) as resp:
                if resp.status != 200:
                    raise PeopleLookupError(
                        f"unexpected status code: {resp.status} {resp.reason}", op=_OP
                    )
                payload = await resp.json(content_type=None)
        except asyncio.TimeoutError as exc:
            raise PeopleLookupError("people info request timed out", op=_OP) from exc
        except aiohttp.ClientError as exc:
            raise PeopleLookupError(f"failed to fetch people info: {exc}", op=_OP) from exc
        except ValueError as exc:
            raise PeopleLookupError(f"failed to decode response body: {exc}", op=_OP) from exc

        try:
            people = People.model_validate(payload)
        except ValueError as exc:
            raise PeopleLookupError(f"failed to decode response body: {exc}", op=_OP) from exc

        self._log.debug("fetched people info", extra={"people": people.model_dump()})
        return people

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None


__all__ = ["PeopleClient"]
