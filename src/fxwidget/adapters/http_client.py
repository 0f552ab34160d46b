"""
HTTP Client - Async-friendly GET over a requests Session

Provider adapters are async so the fetcher can put a deadline on each
attempt. The blocking requests call runs in the event loop's executor with
a streamed body. When the awaiting coroutine is cancelled the response is
closed, so the pooled connection and the worker thread do not outlive the
attempt deadline.

Files that USE this module:
- fxwidget.adapters.providers.base (every adapter issues its GET through HttpClient)
- fxwidget.app (builds the shared client)

Files that this module USES:
- fxwidget.config (timeout and user agent defaults)
"""
from __future__ import annotations

import asyncio
import logging
import threading
from functools import partial
from typing import Any, Dict, Optional

import requests

from fxwidget.config import settings

log = logging.getLogger(__name__)


class _PendingResponse:
    """
    Response slot shared between the awaiting coroutine and the worker thread.

    Whichever side comes second closes the response: cancel() closes one that
    already arrived, attach() closes one that arrives after cancellation.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._response: Optional[requests.Response] = None
        self.cancelled = False

    def attach(self, response: requests.Response) -> bool:
        with self._lock:
            if self.cancelled:
                response.close()
                return False
            self._response = response
            return True

    def cancel(self) -> None:
        with self._lock:
            self.cancelled = True
            response, self._response = self._response, None
        if response is not None:
            response.close()


class HttpClient:
    """Thin wrapper around a requests Session that sends JSON GETs."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Socket timeout in seconds (defaults to settings.http_timeout_seconds)
            session: Optional requests Session to reuse (a new one is created otherwise)
            user_agent: Optional User-Agent header (defaults to settings.user_agent)
        """
        self.timeout = timeout or settings.http_timeout_seconds
        self.session = session or requests.Session()
        self.headers = {
            "Accept": "application/json",
            "User-Agent": user_agent or settings.user_agent,
        }

    def get_sync(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        pending: Optional[_PendingResponse] = None,
    ) -> requests.Response:
        """
        Blocking GET; exceptions from requests propagate unchanged.

        The body is streamed and read here, so a cancelled attempt can close
        the response while the body is still arriving.
        """
        log.debug("GET %s params=%s", url, params)
        resp = self.session.get(
            url, params=params, headers=self.headers, timeout=self.timeout, stream=True
        )
        if pending is not None and not pending.attach(resp):
            log.debug("GET %s finished after cancellation, response closed", url)
            return resp
        resp.content  # read the body inside the worker thread
        return resp

    async def get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        GET a URL without blocking the event loop.

        Cancelling the awaiting task closes the response (and its pooled
        connection), which ends a body read still in progress in the worker.
        """
        loop = asyncio.get_running_loop()
        pending = _PendingResponse()
        try:
            return await loop.run_in_executor(None, partial(self.get_sync, url, params, pending))
        except asyncio.CancelledError:
            pending.cancel()
            raise

    def close(self) -> None:
        self.session.close()
