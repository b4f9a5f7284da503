from enum import Enum

from pydantic import BaseModel, Field


class JobStatus(str, Enum):
    """Status of an OCR job as tracked by the poll loop."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


class OCRJob(BaseModel):
    """
    One submitted image-analysis request.

    Created on submission and mutated only by the poll loop. Jobs are
    never stored; they live for the duration of a single request.
    """

    # The image bytes are not kept: they are only needed for the submission
    # call, so the job records their size and type instead.

    operation_location: str = Field(description="Job handle returned by the submission call")
    content_type: str = "application/octet-stream"
    image_size: int = 0
    status: JobStatus = JobStatus.PENDING
    attempts: int = 0
    upstream_status: str | None = Field(
        default=None, description="Last raw status string reported by the OCR service"
    )
    extracted_text: str | None = None
