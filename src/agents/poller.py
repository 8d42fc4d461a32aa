"""
Run poller - drives a remote run to a terminal status

States: pending (queued, in_progress, requires_action, cancelling, ...) →
completed | failed | cancelled | expired | incomplete.

Polling is fixed-interval with a hard attempt ceiling, so the worst case
wall-clock cost is max_attempts × interval. Each wait is an asyncio.sleep:
the calling request is suspended, other requests keep being served.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import openai
from loguru import logger

from src.config.constants import RUN_FAILURE_STATUSES, RUN_STATUS_COMPLETED, RUN_TIMEOUT_MESSAGE
from src.models.conversation import RunState
from src.utils.errors import RunFailureError, RunTimeoutError


# Connection-level failures; a poll that hits one learns nothing about the run
TRANSPORT_ERRORS = (openai.APIConnectionError, openai.APITimeoutError)


class RunPoller:
    """Bounded fixed-interval poller for one run at a time"""

    def __init__(
        self,
        retrieve_run: Callable[[str, str], Awaitable[RunState]],
        max_attempts: int,
        interval: float = 1.0,
        retry_transport_errors: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Initialize run poller

        Args:
            retrieve_run: Coroutine function (thread_id, run_id) -> RunState
            max_attempts: Status checks before giving up
            interval: Seconds between status checks
            retry_transport_errors: Count a connection error as one pending
                attempt instead of aborting
            sleep: Awaitable sleep (injectable for tests)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._retrieve_run = retrieve_run
        self.max_attempts = max_attempts
        self.interval = interval
        self.retry_transport_errors = retry_transport_errors
        self._sleep = sleep

    async def wait_for_run(self, thread_id: str, run_id: str, max_attempts: Optional[int] = None) -> RunState:
        """
        Poll until the run reaches a terminal status.

        Args:
            thread_id: Remote thread id
            run_id: Remote run id
            max_attempts: Ceiling for this call only (defaults to the poller's)

        Returns:
            The completed run

        Raises:
            RunFailureError: Run ended failed/cancelled/expired/incomplete
            RunTimeoutError: Still pending after max_attempts checks
        """
        max_attempts = max_attempts or self.max_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                run = await self._retrieve_run(thread_id, run_id)
            except TRANSPORT_ERRORS as e:
                if not self.retry_transport_errors:
                    raise
                logger.warning(f"Transport error polling run {run_id} (attempt {attempt}/{max_attempts}): {e}")
            else:
                if run.status == RUN_STATUS_COMPLETED:
                    logger.debug(f"Run {run_id} completed after {attempt} checks")
                    return run
                if run.status in RUN_FAILURE_STATUSES:
                    logger.error(f"Run {run_id} ended with status {run.status}: {run.error_message}")
                    raise RunFailureError(run.status, run.error_message)

            if attempt < max_attempts:
                await self._sleep(self.interval)

        logger.error(f"Run {run_id} still pending after {max_attempts} checks")
        raise RunTimeoutError(RUN_TIMEOUT_MESSAGE)
