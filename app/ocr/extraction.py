from dataclasses import dataclass, field

from app.errors import UpstreamProtocolError


@dataclass
class ExtractionResult:
    """Page texts in the order returned by the OCR service."""

    pages: list[list[str]] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Lines joined by newlines within a page, pages joined by newlines."""
        return "\n".join("\n".join(lines) for lines in self.pages)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


def extract_read_result(payload: dict) -> ExtractionResult:
    """
    Walk ``analyzeResult.readResults[*].lines[*].text`` in order.

    A missing or empty structure yields an empty result. Present but
    mistyped structure is a protocol error.
    """
    analyze_result = payload.get("analyzeResult")
    if not analyze_result:
        return ExtractionResult()
    if not isinstance(analyze_result, dict):
        raise UpstreamProtocolError("Malformed OCR result: analyzeResult is not an object")

    read_results = analyze_result.get("readResults") or []
    if not isinstance(read_results, list):
        raise UpstreamProtocolError("Malformed OCR result: readResults is not a list")

    pages = []
    for page in read_results:
        if not isinstance(page, dict):
            raise UpstreamProtocolError("Malformed OCR result: page is not an object")
        lines = page.get("lines") or []
        if not isinstance(lines, list):
            raise UpstreamProtocolError("Malformed OCR result: lines is not a list")
        page_lines = []
        for line in lines:
            if not isinstance(line, dict) or not isinstance(line.get("text"), str):
                raise UpstreamProtocolError("Malformed OCR result: line without text")
            page_lines.append(line["text"])
        pages.append(page_lines)

    return ExtractionResult(pages=pages)
