import asyncio
import io

import httpx
import pytest
from PIL import Image

from app.config import OCRConfig, TranslatorConfig
from app.ocr.azure_read import AzureReadClient
from app.ocr.orchestrator import OCROrchestrator
from app.services.translation_service import TranslationService

VISION_ENDPOINT = "https://vision.test"
TRANSLATOR_ENDPOINT = "https://translator.test"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)

    @property
    def total(self):
        return sum(self.calls)


class FakeAzure:
    """
    In-memory Azure Read + Translator pair served through httpx.MockTransport.

    Each submission gets its own operation URL; ``poll_statuses`` is replayed
    independently for every job, repeating the last status once exhausted.
    """

    def __init__(
        self,
        poll_statuses=("succeeded",),
        pages=(("a", "b"), ("c",)),
        translation="translated",
        submit_response=None,
        poll_response=None,
        translation_delay=0.0,
    ):
        self.poll_statuses = list(poll_statuses)
        self.pages = pages
        self.translation = translation
        self.submit_response = submit_response
        self.poll_response = poll_response
        self.translation_delay = translation_delay
        self.requests = []
        self._jobs = 0
        self._poll_counts = {}

    def _requests_matching(self, predicate):
        return [r for r in self.requests if predicate(r)]

    @property
    def submit_calls(self):
        return self._requests_matching(lambda r: r.url.path.endswith("/read/analyze"))

    @property
    def poll_calls(self):
        return self._requests_matching(lambda r: "/operations/" in r.url.path)

    @property
    def translate_calls(self):
        return self._requests_matching(lambda r: r.url.path == "/translate")

    def read_result(self):
        return {
            "readResults": [
                {"page": number, "lines": [{"text": line} for line in lines]}
                for number, lines in enumerate(self.pages, start=1)
            ]
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path.endswith("/read/analyze"):
            if self.submit_response is not None:
                return self.submit_response
            self._jobs += 1
            location = f"{VISION_ENDPOINT}/vision/v3.2/read/operations/{self._jobs}"
            return httpx.Response(202, headers={"Operation-Location": location})

        if "/operations/" in path:
            if self.poll_response is not None:
                return self.poll_response
            count = self._poll_counts.get(path, 0)
            self._poll_counts[path] = count + 1
            status = self.poll_statuses[min(count, len(self.poll_statuses) - 1)]
            body = {"status": status}
            if status == "succeeded":
                body["analyzeResult"] = self.read_result()
            return httpx.Response(200, json=body)

        if path == "/translate":
            if isinstance(self.translation, Exception):
                raise self.translation
            if isinstance(self.translation, httpx.Response):
                return self.translation
            return httpx.Response(
                200,
                json=[{"translations": [{"text": self.translation, "to": request.url.params["to"]}]}],
            )

        return httpx.Response(404)

    async def slow_handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/translate":
            await asyncio.sleep(self.translation_delay)
        return self._respond(request)

    def client(self) -> httpx.AsyncClient:
        handler = self.slow_handler if self.translation_delay else self.handler
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def make_orchestrator(fake, sleep=None, **config_overrides):
    config_values = {
        "endpoint": VISION_ENDPOINT,
        "key": "vision-key",
        "poll_interval": 1.0,
        "max_poll_attempts": 10,
    }
    config_values.update(config_overrides)
    config = OCRConfig(**config_values)
    client = fake.client()
    translator = TranslationService(
        TranslatorConfig(endpoint=TRANSLATOR_ENDPOINT, key="translator-key", region="westeurope"),
        client,
    )
    kwargs = {"sleep": sleep} if sleep is not None else {}
    return OCROrchestrator(config, AzureReadClient(config, client), translator, **kwargs)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color="white").save(buffer, format="PNG")
    return buffer.getvalue()
