from types import SimpleNamespace

import httpx
import pytest

from app.errors import AuthenticationRequired, PersistenceFailure, SubmissionValidationError
from app.models.weather import WeatherSnapshot
from app.notifiers.email import EmailDispatchResult
from app.repositories import WeatherRequestRepository
from app.security.api_keys import CallerIdentity
from app.services.orchestrator import OutcomeStatus, RequestOrchestrator, SubmissionState

CALLER = CallerIdentity(requester_id="42", email="owner@example.com")


class FakeWeather:
    def __init__(self, snapshot: WeatherSnapshot):
        self.snapshot = snapshot
        self.call_count = 0

    async def resolve(self, city: str) -> WeatherSnapshot:
        self.call_count += 1
        return self.snapshot.model_copy(update={"city": city})


class FakeStore:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: list[dict] = []

    def insert(self, **fields):
        if self.fail:
            raise PersistenceFailure("Failed to save your weather request")
        self.records.append(fields)
        return SimpleNamespace(id=f"req-{len(self.records)}", **fields)


class FakeEmail:
    def __init__(self, result: EmailDispatchResult | None = None, exc: Exception | None = None):
        self.result = result or EmailDispatchResult(success=True, provider_message_id="msg-1")
        self.exc = exc
        self.calls: list[tuple] = []

    async def send(self, name, email, city, snapshot):
        self.calls.append((name, email, city, snapshot))
        if self.exc:
            raise self.exc
        return self.result


def _orchestrator(snapshot, store=None, email=None):
    weather = FakeWeather(snapshot)
    store = store or FakeStore()
    email = email or FakeEmail()
    return RequestOrchestrator(weather=weather, store=store, email=email), weather, store, email


@pytest.mark.anyio
async def test_successful_submission(snapshot):
    orchestrator, weather, store, email = _orchestrator(snapshot)

    outcome = await orchestrator.submit(CALLER, " Ada ", "ada@example.com", "London")

    assert outcome.status is OutcomeStatus.SUCCESS
    assert outcome.record_saved and outcome.email_sent
    assert outcome.snapshot.city == "London"
    assert outcome.request_id == "req-1"
    assert store.records[0]["requester_id"] == "42"
    assert store.records[0]["name"] == "Ada"
    assert email.calls[0][:3] == ("Ada", "ada@example.com", "London")
    assert orchestrator.state is SubmissionState.EMAIL_SUCCEEDED


@pytest.mark.anyio
async def test_missing_identity_fails_before_any_work(snapshot):
    orchestrator, weather, store, email = _orchestrator(snapshot)

    with pytest.raises(AuthenticationRequired):
        await orchestrator.submit(None, "Ada", "ada@example.com", "London")

    assert weather.call_count == 0
    assert store.records == []
    assert email.calls == []


@pytest.mark.anyio
async def test_empty_city_is_rejected_without_side_effects(snapshot):
    orchestrator, weather, store, email = _orchestrator(snapshot)

    with pytest.raises(SubmissionValidationError) as exc_info:
        await orchestrator.submit(CALLER, "Ada", "ada@example.com", "   ")

    assert exc_info.value.field_errors == {"city": "City is required"}
    assert weather.call_count == 0
    assert store.records == []
    assert email.calls == []
    assert orchestrator.state is SubmissionState.IDLE


@pytest.mark.anyio
async def test_persistence_failure_is_fatal_and_skips_email(snapshot):
    store = FakeStore(fail=True)
    orchestrator, weather, _, email = _orchestrator(snapshot, store=store)

    outcome = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert outcome.status is OutcomeStatus.FATAL
    assert outcome.record_saved is False
    assert outcome.email_sent is False
    assert outcome.snapshot is None
    assert outcome.error_code == "persistence_failed"
    assert weather.call_count == 1
    assert len(email.calls) == 0
    assert orchestrator.state is SubmissionState.PERSIST_FAILED


@pytest.mark.anyio
async def test_email_failure_is_partial_success_and_keeps_record(snapshot, db_session):
    store = WeatherRequestRepository(db_session)
    email = FakeEmail(result=EmailDispatchResult.failed("Email provider returned 500", "provider"))
    orchestrator, _, _, _ = _orchestrator(snapshot, store=store, email=email)

    outcome = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert outcome.status is OutcomeStatus.PARTIAL_SUCCESS
    assert outcome.record_saved is True
    assert outcome.email_sent is False
    assert outcome.email_error == "Email provider returned 500"
    assert outcome.snapshot.city == "London"
    assert store.count_for_requester("42") == 1
    assert orchestrator.state is SubmissionState.EMAIL_FAILED


@pytest.mark.anyio
async def test_email_transport_exception_is_partial_success(snapshot):
    email = FakeEmail(exc=httpx.ConnectError("socket closed"))
    orchestrator, _, store, _ = _orchestrator(snapshot, email=email)

    outcome = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert outcome.status is OutcomeStatus.PARTIAL_SUCCESS
    assert outcome.email_error == "socket closed"
    assert len(store.records) == 1


@pytest.mark.anyio
async def test_unexpected_email_error_propagates_after_record_saved(snapshot):
    email = FakeEmail(exc=RuntimeError("template bug"))
    orchestrator, _, store, _ = _orchestrator(snapshot, email=email)

    with pytest.raises(RuntimeError):
        await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert len(store.records) == 1
    assert orchestrator.state is SubmissionState.NOTIFYING_EMAIL


@pytest.mark.anyio
async def test_repeated_submissions_are_not_deduplicated(snapshot):
    orchestrator, _, store, _ = _orchestrator(snapshot)

    first = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")
    second = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert first.request_id != second.request_id
    assert len(store.records) == 2


@pytest.mark.anyio
async def test_resubmission_after_fatal_starts_from_idle(snapshot):
    store = FakeStore(fail=True)
    orchestrator, _, _, _ = _orchestrator(snapshot, store=store)

    await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")
    assert orchestrator.state is SubmissionState.PERSIST_FAILED

    store.fail = False
    outcome = await orchestrator.submit(CALLER, "Ada", "ada@example.com", "London")

    assert outcome.status is OutcomeStatus.SUCCESS
