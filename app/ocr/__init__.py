from app.ocr.azure_read import AzureReadClient
from app.ocr.base import BaseReadClient, PollResponse, Submission
from app.ocr.extraction import ExtractionResult, extract_read_result
from app.ocr.orchestrator import OCROrchestrator
from app.ocr.polling import classify_status, poll_until_complete

__all__ = [
    # Clients
    "BaseReadClient",
    "AzureReadClient",
    "PollResponse",
    "Submission",
    # Pipeline
    "OCROrchestrator",
    "poll_until_complete",
    "classify_status",
    "ExtractionResult",
    "extract_read_result",
]
