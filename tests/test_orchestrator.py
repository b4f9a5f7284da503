import asyncio
import json

import httpx
import pytest

from app.errors import (
    ClientInputError,
    DeadlineExceededError,
    OCRTimeoutError,
    UpstreamFailureError,
    UpstreamProtocolError,
)
from app.schemas.ocr import (
    NO_TEXT_FOUND,
    NO_TEXT_TO_TRANSLATE,
    TRANSLATION_UNAVAILABLE,
    TranslationStatus,
)

from tests.conftest import FakeAzure, make_orchestrator

IMAGE = b"\x89PNG\r\n\x1a\nfake-image"


def test_success_on_first_poll(sleep):
    fake = FakeAzure(translation="übersetzt")
    orchestrator = make_orchestrator(fake, sleep)

    result = asyncio.run(orchestrator.run(IMAGE, "de"))

    assert result.extracted_text == "a\nb\nc"
    assert result.translated_text == "übersetzt"
    assert result.target_language == "de"
    assert result.translation_status is TranslationStatus.TRANSLATED
    assert len(fake.submit_calls) == 1
    assert len(fake.poll_calls) == 1
    assert sleep.calls == [1.0]


def test_submission_sends_raw_bytes_with_key(sleep):
    fake = FakeAzure()
    asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    submit = fake.submit_calls[0]
    assert submit.content == IMAGE
    assert submit.headers["Content-Type"] == "application/octet-stream"
    assert submit.headers["Ocp-Apim-Subscription-Key"] == "vision-key"
    assert fake.poll_calls[0].headers["Ocp-Apim-Subscription-Key"] == "vision-key"


def test_translation_request_shape(sleep):
    fake = FakeAzure()
    asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "fr"))

    request = fake.translate_calls[0]
    assert request.url.params["to"] == "fr"
    assert request.url.params["api-version"] == "3.0"
    assert request.headers["Ocp-Apim-Subscription-Region"] == "westeurope"
    assert json.loads(request.content) == [{"Text": "a\nb\nc"}]


def test_pending_then_success(sleep):
    fake = FakeAzure(poll_statuses=["notStarted", "running", "running", "succeeded"])

    result = asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    assert result.extracted_text == "a\nb\nc"
    assert len(fake.poll_calls) == 4
    assert sleep.total == 4.0


@pytest.mark.parametrize("language", [None, "", "   "])
def test_target_language_defaults_to_english(sleep, language):
    fake = FakeAzure()
    result = asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, language))

    assert result.target_language == "en"
    assert fake.translate_calls[0].url.params["to"] == "en"


@pytest.mark.parametrize("image", [None, b""])
def test_missing_image_makes_no_calls(sleep, image):
    fake = FakeAzure()

    with pytest.raises(ClientInputError):
        asyncio.run(make_orchestrator(fake, sleep).run(image, "en"))

    assert fake.requests == []
    assert sleep.calls == []


def test_failed_status_stops_polling(sleep):
    fake = FakeAzure(poll_statuses=["running", "failed", "succeeded"])

    with pytest.raises(UpstreamFailureError):
        asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    assert len(fake.poll_calls) == 2
    assert fake.translate_calls == []


def test_budget_exhausted_is_timeout(sleep):
    fake = FakeAzure(poll_statuses=["running"])

    with pytest.raises(OCRTimeoutError) as exc_info:
        asyncio.run(make_orchestrator(fake, sleep, max_poll_attempts=4).run(IMAGE, "en"))

    assert not isinstance(exc_info.value, UpstreamFailureError)
    assert len(fake.poll_calls) == 4
    assert fake.translate_calls == []


def test_submission_error_includes_upstream_status_and_body(sleep):
    fake = FakeAzure(submit_response=httpx.Response(401, text="Access denied due to invalid subscription key"))

    with pytest.raises(UpstreamFailureError) as exc_info:
        asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    assert exc_info.value.upstream_status == 401
    assert "invalid subscription key" in exc_info.value.message
    assert "vision-key" not in exc_info.value.message
    assert fake.poll_calls == []


def test_submission_without_handle_is_protocol_error(sleep):
    fake = FakeAzure(submit_response=httpx.Response(202))

    with pytest.raises(UpstreamProtocolError):
        asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    assert fake.poll_calls == []
    assert sleep.calls == []


def test_poll_http_error_is_fatal(sleep):
    fake = FakeAzure(poll_response=httpx.Response(500, text="boom"))

    with pytest.raises(UpstreamFailureError) as exc_info:
        asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))

    assert exc_info.value.upstream_status == 500
    assert len(fake.poll_calls) == 1


def test_poll_non_json_is_protocol_error(sleep):
    fake = FakeAzure(poll_response=httpx.Response(200, text="<html>"))

    with pytest.raises(UpstreamProtocolError):
        asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en"))


def test_empty_text_skips_translation(sleep):
    fake = FakeAzure(pages=())

    result = asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "de"))

    assert result.extracted_text == NO_TEXT_FOUND
    assert result.translated_text == NO_TEXT_TO_TRANSLATE
    assert result.translation_status is TranslationStatus.SKIPPED
    assert fake.translate_calls == []


def test_whitespace_text_skips_translation(sleep):
    fake = FakeAzure(pages=(("   ",),))

    result = asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "de"))

    assert result.translated_text == NO_TEXT_TO_TRANSLATE
    assert fake.translate_calls == []


@pytest.mark.parametrize(
    "translation",
    [
        httpx.Response(503, text="unavailable"),
        httpx.Response(200, json={"unexpected": True}),
        httpx.Response(200, text="not json"),
        httpx.ConnectError("connection refused"),
    ],
)
def test_translation_failure_degrades(sleep, translation):
    fake = FakeAzure(translation=translation)

    result = asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "de"))

    assert result.extracted_text == "a\nb\nc"
    assert result.translated_text == TRANSLATION_UNAVAILABLE
    assert result.translation_status is TranslationStatus.UNAVAILABLE


def test_deadline_aborts_poll_loop():
    fake = FakeAzure(poll_statuses=["running"])
    orchestrator = make_orchestrator(fake, poll_interval=1.0, max_poll_attempts=30, deadline_seconds=0.05)

    with pytest.raises(DeadlineExceededError) as exc_info:
        asyncio.run(orchestrator.run(IMAGE, "en"))

    assert isinstance(exc_info.value, OCRTimeoutError)
    assert len(fake.submit_calls) == 1
    assert fake.poll_calls == []


def test_slow_translation_degrades_at_deadline():
    fake = FakeAzure(translation_delay=0.3)
    orchestrator = make_orchestrator(fake, poll_interval=0.0, deadline_seconds=0.1)

    result = asyncio.run(orchestrator.run(IMAGE, "de"))

    assert result.extracted_text == "a\nb\nc"
    assert result.translated_text == TRANSLATION_UNAVAILABLE
    assert result.translation_status is TranslationStatus.UNAVAILABLE
    assert result.target_language == "de"
    assert len(fake.translate_calls) == 1


def test_deadline_leaves_room_for_fast_translation():
    fake = FakeAzure(translation="übersetzt")
    orchestrator = make_orchestrator(fake, poll_interval=0.0, deadline_seconds=5.0)

    result = asyncio.run(orchestrator.run(IMAGE, "de"))

    assert result.translated_text == "übersetzt"
    assert result.translation_status is TranslationStatus.TRANSLATED


def test_submission_ignores_image_content_type(sleep):
    fake = FakeAzure()
    asyncio.run(make_orchestrator(fake, sleep).run(IMAGE, "en", content_type="image/png"))

    assert fake.submit_calls[0].headers["Content-Type"] == "application/octet-stream"


def test_concurrent_runs_do_not_share_state(sleep):
    fake = FakeAzure(poll_statuses=["running", "running", "succeeded"])
    orchestrator = make_orchestrator(fake, sleep)

    async def run_both():
        return await asyncio.gather(
            orchestrator.run(IMAGE, "de"),
            orchestrator.run(IMAGE, "fr"),
        )

    first, second = asyncio.run(run_both())

    assert first.target_language == "de"
    assert second.target_language == "fr"
    assert first.extracted_text == second.extracted_text == "a\nb\nc"
    assert len(fake.submit_calls) == 2
    assert len(fake.poll_calls) == 6
    assert {call.url.path for call in fake.poll_calls} == {
        "/vision/v3.2/read/operations/1",
        "/vision/v3.2/read/operations/2",
    }
