"""HTTP actuator client built on :mod:`requests`.

Wire contract::

    POST /press                  hold until /release
    POST /release                let go
    POST /press?t=<seconds>&wait hold for <seconds>, reply once released
    GET  /status                 {"on": bool, ...}, success is HTTP 200 only

Blocking calls run in worker threads so the UI loop keeps serving gestures
and poll ticks while a round trip is pending.  Commands and status polls
have separate pools: a slow ``/status`` can never hold a press back.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

import requests
from pydantic import ValidationError

from powerbutton.actuator.errors import summarize_error
from powerbutton.core.interfaces.actuator import ActuatorClient
from powerbutton.core.models.command import Command, CommandResult
from powerbutton.core.models.state import MIN_PRESS_SECONDS, ActuatorStatus

_log = logging.getLogger(__name__)

_HEADERS = {"User-Agent": "PowerButton/1.0", "Accept": "application/json"}


def format_seconds(seconds: float) -> str:
    """Render a duration as a plain decimal: ``1.5``, ``10``, ``0.25``.

    The actuator counts in whole milliseconds, so that is the resolution
    here too.  Anything shorter than one millisecond would go out as ``0``
    and is rejected instead.
    """
    if seconds < MIN_PRESS_SECONDS:
        raise ValueError(f"Press duration must be at least {MIN_PRESS_SECONDS}s, got {seconds}")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


class HttpActuator(ActuatorClient):
    """Talks to a remote actuator at *base_url*.

    Args:
        base_url: Absolute actuator address, e.g. ``https://relay.local``.
        timeout: Transport timeout per round trip in seconds.  A timed
            press waits ``seconds + timeout`` since the reply only comes
            after the press finished.

    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._command_pool = ThreadPoolExecutor(max_workers=4, thread_name_prefix="actuator-cmd")
        self._status_pool = ThreadPoolExecutor(max_workers=2, thread_name_prefix="actuator-status")

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # ActuatorClient
    # ------------------------------------------------------------------

    async def press(self) -> CommandResult:
        return await self._in_thread(
            self._command_pool, self._command, Command.PRESS, "/press", self._timeout
        )

    async def release(self) -> CommandResult:
        return await self._in_thread(
            self._command_pool, self._command, Command.RELEASE, "/release", self._timeout
        )

    async def timed_press(self, seconds: float) -> CommandResult:
        path = f"/press?t={format_seconds(seconds)}&wait"
        return await self._in_thread(
            self._command_pool, self._command, Command.TIMED_PRESS, path, seconds + self._timeout
        )

    async def status(self) -> CommandResult:
        return await self._in_thread(self._status_pool, self._status)

    async def close(self) -> None:
        for pool in (self._command_pool, self._status_pool):
            pool.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Blocking helpers (worker thread)
    # ------------------------------------------------------------------

    @staticmethod
    async def _in_thread(
        pool: ThreadPoolExecutor, func: Callable[..., CommandResult], *args: Any
    ) -> CommandResult:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(pool, func, *args)

    def _command(self, command: Command, path: str, timeout: float) -> CommandResult:
        url = self._base_url + path
        try:
            resp = requests.request("POST", url, headers=_HEADERS, timeout=timeout)
            resp.raise_for_status()
        except requests.exceptions.RequestException as exc:
            return self._failed(command, exc)

        _log.debug("POST %s -> %d", path, resp.status_code)
        return CommandResult.success(command, resp.status_code, self._json_or_none(resp))

    def _status(self) -> CommandResult:
        url = self._base_url + "/status"
        try:
            resp = requests.request("GET", url, headers=_HEADERS, timeout=self._timeout)
        except requests.exceptions.RequestException as exc:
            return self._failed(Command.STATUS, exc)

        # Only an explicit 200 is data; 204, 503 and friends are failed polls.
        if resp.status_code != 200:
            msg = f"HTTP {resp.status_code} {resp.reason or ''}".strip()
            _log.debug("status failed: %s", msg)
            return CommandResult.failure(Command.STATUS, msg, resp.status_code)

        try:
            status = ActuatorStatus.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            _log.debug("status returned an unusable body: %s", exc)
            return CommandResult.failure(Command.STATUS, "Malformed status body", resp.status_code)

        return CommandResult.success(Command.STATUS, resp.status_code, status)

    @staticmethod
    def _failed(command: Command, exc: requests.exceptions.RequestException) -> CommandResult:
        msg = summarize_error(exc)
        resp = getattr(exc, "response", None)
        status_code = resp.status_code if resp is not None else None
        # Callers (dispatcher, poller) log failures with their own context.
        _log.debug("%s failed: %s", command.value, msg)
        return CommandResult.failure(command, msg, status_code)

    @staticmethod
    def _json_or_none(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except ValueError:
            return None
