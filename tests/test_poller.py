import httpx
import pytest

from videosummary.errors import HttpError, JobFailedError, PollTimeoutError, ProtocolViolationError, ServiceError
from videosummary.services.poller import ResolutionKind, poll_for_result, resolve

from conftest import BASE_URL


FILE_URL = f"{BASE_URL}/v1/auto/file/f1"


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_two_pending_then_complete_waits_twice(service, transport):
    service.add_json(
        "GET", FILE_URL,
        {"file": {"id": "f1", "complete": False}},
        {"file": {"id": "f1", "complete": False}},
        {"file": {"id": "f1", "complete": True, "failed_reason": None, "final_summary": "done"}},
    )
    sleep = RecordingSleep()
    body = await poll_for_result(transport, "f1", interval=3.0, sleep=sleep)

    assert sleep.calls == [3.0, 3.0]
    assert body["file"]["final_summary"] == "done"
    polls = service.calls("GET", FILE_URL)
    assert len(polls) == 3
    assert polls[0].url.params["id"] == "f1"
    assert polls[0].headers["Authorization"] == "Bearer test-key"


@pytest.mark.asyncio
async def test_failed_reason_stops_loop(service, transport):
    service.add_json(
        "GET", FILE_URL,
        {"file": {"id": "f1", "complete": False, "failed": True, "failed_reason": "unsupported codec"}},
        {"file": {"id": "f1", "complete": True}},
    )
    sleep = RecordingSleep()
    with pytest.raises(JobFailedError) as exc:
        await poll_for_result(transport, "f1", sleep=sleep)
    assert exc.value.reason == "unsupported codec"
    assert sleep.calls == []
    assert len(service.calls("GET", FILE_URL)) == 1


@pytest.mark.asyncio
async def test_failed_flag_without_reason_is_terminal(service, transport):
    service.add_json("GET", FILE_URL, {"file": {"id": "f1", "failed": True}})
    with pytest.raises(JobFailedError):
        await poll_for_result(transport, "f1", sleep=RecordingSleep())


@pytest.mark.asyncio
async def test_top_level_error_surfaced_verbatim(service, transport):
    service.add_json("GET", FILE_URL, {"error": "file not found for this account"})
    with pytest.raises(ServiceError) as exc:
        await poll_for_result(transport, "f1", sleep=RecordingSleep())
    assert exc.value.message == "file not found for this account"


@pytest.mark.asyncio
async def test_non_success_status_raises_http_error(service, transport):
    service.add("GET", FILE_URL, httpx.Response(502, text="bad gateway"))
    with pytest.raises(HttpError) as exc:
        await poll_for_result(transport, "f1", sleep=RecordingSleep())
    assert exc.value.status == 502


@pytest.mark.asyncio
async def test_attempt_ceiling(service, transport):
    service.add_json("GET", FILE_URL, {"file": {"id": "f1", "complete": False}})
    sleep = RecordingSleep()
    with pytest.raises(PollTimeoutError) as exc:
        await poll_for_result(transport, "f1", max_attempts=4, sleep=sleep)
    assert exc.value.attempts == 4
    assert len(sleep.calls) == 3


@pytest.mark.asyncio
async def test_callback_submission_skips_polling(service, transport):
    submission = {"file": {"id": "f1", "complete": False, "callback": "https://me.example/hook"}}
    resolution = await resolve(transport, submission, sleep=RecordingSleep())

    assert resolution.kind is ResolutionKind.ASYNC_ACCEPTED
    assert resolution.response is submission
    assert service.requests == []


@pytest.mark.asyncio
async def test_submission_without_file_id_is_protocol_violation(service, transport):
    with pytest.raises(ProtocolViolationError):
        await resolve(transport, {"file": {"complete": True}}, sleep=RecordingSleep())
    with pytest.raises(ProtocolViolationError):
        await resolve(transport, {"status": "ok"}, sleep=RecordingSleep())
    assert service.requests == []


@pytest.mark.asyncio
async def test_null_flags_mean_still_pending(service, transport):
    service.add_json(
        "GET", FILE_URL,
        {"file": {"id": "f1", "complete": None, "failed": None, "failed_reason": None}},
        {"file": {"id": "f1", "complete": True, "failed": None}},
    )
    sleep = RecordingSleep()
    body = await poll_for_result(transport, "f1", interval=1.0, sleep=sleep)
    assert body["file"]["complete"] is True
    assert sleep.calls == [1.0]


@pytest.mark.asyncio
async def test_submission_with_null_complete_is_polled(service, transport):
    service.add_json("GET", FILE_URL, {"file": {"id": "f1", "complete": True}})
    submission = {"file": {"id": "f1", "complete": None, "callback": None}}
    resolution = await resolve(transport, submission, sleep=RecordingSleep())
    assert resolution.kind is ResolutionKind.COMPLETE
    assert len(service.calls("GET", FILE_URL)) == 1
