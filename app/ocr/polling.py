"""
Fixed-interval poll loop for asynchronous OCR jobs.

The loop is a small state machine over ``JobStatus``::

    pending --succeeded--> succeeded
    pending --failed-----> failed
    pending --budget-----> timed-out

Each iteration waits ``interval`` seconds, then asks the poll source for
the job's status. All state lives on the ``OCRJob`` passed in, so
concurrent orchestrations never share anything.
"""
import asyncio
import logging
from typing import Awaitable, Callable, Literal

from app.errors import OCRTimeoutError, UpstreamFailureError, UpstreamProtocolError
from app.ocr.base import PollResponse
from app.schemas.job import JobStatus, OCRJob

logger = logging.getLogger(__name__)

PollSource = Callable[[str], Awaitable[PollResponse]]
Sleep = Callable[[float], Awaitable[None]]

# Raw statuses the Read API reports, lower-cased
SUCCEEDED_STATUSES = frozenset({"succeeded"})
FAILED_STATUSES = frozenset({"failed"})
IN_PROGRESS_STATUSES = frozenset({"notstarted", "running", "pending"})


def classify_status(
    raw_status: str | None,
    unknown_status_policy: Literal["error", "continue"] = "error",
) -> JobStatus:
    """
    Map a raw upstream status string onto a job state.

    Args:
        raw_status: Status string from the poll response, or None if absent.
        unknown_status_policy: ``"error"`` escalates unrecognized statuses,
            ``"continue"`` keeps polling.

    Returns:
        The job state the status corresponds to.

    Raises:
        UpstreamProtocolError: For an unrecognized status under the ``"error"`` policy.
    """
    normalized = (raw_status or "").strip().lower()

    if normalized in SUCCEEDED_STATUSES:
        return JobStatus.SUCCEEDED
    if normalized in FAILED_STATUSES:
        return JobStatus.FAILED
    if normalized in IN_PROGRESS_STATUSES:
        return JobStatus.PENDING

    if unknown_status_policy == "continue":
        logger.warning(f"Unrecognized OCR status {raw_status!r}, continuing to poll")
        return JobStatus.PENDING

    raise UpstreamProtocolError(f"Unrecognized OCR status: {raw_status!r}")


async def poll_until_complete(
    job: OCRJob,
    poll: PollSource,
    interval: float = 1.0,
    max_attempts: int = 30,
    unknown_status_policy: Literal["error", "continue"] = "error",
    sleep: Sleep = asyncio.sleep,
) -> PollResponse:
    """
    Poll an OCR job until it reaches a terminal state.

    Args:
        job: The job to drive. Its status and attempt count are updated in place.
        poll: Coroutine function fetching the status for a job handle.
        interval: Seconds to wait before each poll.
        max_attempts: Maximum number of poll calls.
        unknown_status_policy: See ``classify_status``.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        The poll response that reported success.

    Raises:
        UpstreamFailureError: If the job reports ``failed`` or a poll call fails.
        UpstreamProtocolError: If a poll response is malformed.
        OCRTimeoutError: If the attempt budget runs out.
    """
    while job.attempts < max_attempts:
        await sleep(interval)

        job.attempts += 1
        try:
            response = await poll(job.operation_location)
        except (UpstreamFailureError, UpstreamProtocolError):
            job.status = JobStatus.FAILED
            raise
        job.upstream_status = response.status

        logger.info(f"Polling attempt {job.attempts}/{max_attempts}: {response.status}")

        try:
            state = classify_status(response.status, unknown_status_policy)
        except UpstreamProtocolError:
            job.status = JobStatus.FAILED
            raise

        if state is JobStatus.SUCCEEDED:
            job.status = JobStatus.SUCCEEDED
            return response
        if state is JobStatus.FAILED:
            job.status = JobStatus.FAILED
            raise UpstreamFailureError("OCR processing failed")

    job.status = JobStatus.TIMED_OUT
    logger.warning(f"OCR did not complete after {job.attempts} attempts")
    raise OCRTimeoutError(f"OCR did not complete in time ({job.attempts} attempts)")
