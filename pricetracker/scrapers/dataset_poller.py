"""Dataset collection protocol: trigger, poll until terminal, fetch once.

The loop is driven by a pure transition function so the state machine
can be tested without a provider or timers. The sleep between polls is
injected for the same reason.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import structlog

from pricetracker.core.exceptions import (
    ProviderCollectionFailedError,
    ProviderTimeoutError,
    ProviderTriggerError,
)
from pricetracker.scrapers.provider import BrightDataClient

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]

DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_MAX_ATTEMPTS = 30


class PollState(str, Enum):
    TRIGGERED = "triggered"
    POLLING = "polling"
    READY = "ready"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset({PollState.READY, PollState.FAILED, PollState.TIMED_OUT})


def next_state(
    state: PollState,
    status: Optional[str],
    attempt: int,
    max_attempts: int,
) -> PollState:
    """Transition after observing a job status.

    Args:
        state: Current state
        status: Status string reported by the latest poll
        attempt: Number of polls issued so far (1-based)
        max_attempts: Poll budget

    Returns:
        The next state. "running" keeps polling until the budget is spent,
        "failed" fails, any other status counts as ready.
    """
    if state in TERMINAL_STATES:
        return state

    if status == "failed":
        return PollState.FAILED
    if status == "running":
        if attempt >= max_attempts:
            return PollState.TIMED_OUT
        return PollState.POLLING
    return PollState.READY


@dataclass
class DatasetJob:
    """Provider-side collection job for one target URL."""

    snapshot_id: str
    url: str
    status: Optional[str] = None
    state: PollState = PollState.TRIGGERED
    attempts: int = 0


class DatasetJobPoller:
    """Runs one dataset collection to completion.

    Bounded: at most max_attempts progress requests, one every
    poll_interval seconds, so a call ends within about
    poll_interval * max_attempts seconds.
    """

    def __init__(
        self,
        client: BrightDataClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep

    async def trigger(self, dataset_id: str, url: str) -> DatasetJob:
        """Start a collection.

        Raises:
            ProviderTriggerError: If the response carries no snapshot id
        """
        response = await self.client.trigger_dataset(dataset_id, url)
        snapshot_id = response.get("snapshot_id")
        if not snapshot_id:
            logger.error("dataset_trigger_failed", dataset_id=dataset_id, url=url, response=response)
            raise ProviderTriggerError()

        logger.info("dataset_triggered", dataset_id=dataset_id, snapshot_id=snapshot_id)
        return DatasetJob(snapshot_id=str(snapshot_id), url=url)

    async def wait(self, job: DatasetJob) -> DatasetJob:
        """Poll until the job reaches a terminal state.

        Raises:
            ProviderCollectionFailedError: If the provider reports "failed"
            ProviderTimeoutError: If the poll budget runs out
        """
        job.state = PollState.POLLING

        while job.state not in TERMINAL_STATES:
            await self._sleep(self.poll_interval)

            progress = await self.client.get_progress(job.snapshot_id)
            job.attempts += 1
            job.status = progress.get("status")
            job.state = next_state(job.state, job.status, job.attempts, self.max_attempts)

            logger.debug(
                "dataset_poll_status",
                snapshot_id=job.snapshot_id,
                attempt=job.attempts,
                status=job.status,
            )

        if job.state is PollState.FAILED:
            logger.error("dataset_collection_failed", snapshot_id=job.snapshot_id)
            raise ProviderCollectionFailedError(job.snapshot_id)

        if job.state is PollState.TIMED_OUT:
            logger.error("dataset_poll_timeout", snapshot_id=job.snapshot_id, attempts=job.attempts)
            raise ProviderTimeoutError(job.snapshot_id, job.attempts)

        return job

    async def collect(self, dataset_id: str, url: str) -> Any:
        """Trigger, wait for and fetch a collection for url.

        Returns:
            The snapshot payload, unmodified
        """
        job = await self.trigger(dataset_id, url)
        await self.wait(job)

        payload = await self.client.get_snapshot(job.snapshot_id)
        logger.info("dataset_collected", snapshot_id=job.snapshot_id, attempts=job.attempts)
        return payload
