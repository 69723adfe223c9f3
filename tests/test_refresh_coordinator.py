import asyncio
import threading

import pytest

from core.proximity.coordinator import RefreshState, RefreshStatus
from core.proximity.errors import (
    FetchFailed,
    LocationPermissionDenied,
    ProviderUnavailable,
    RefreshTimeout,
    Unauthorized,
)
from core.proximity.radius import RADIUS_KEY


@pytest.fixture
def toronto(posting, directory, store):
    a = posting("A", 43.7050, -79.4050)
    b = posting("B", 43.9000, -79.6000)
    directory.postings = [a, b]
    store.values[RADIUS_KEY] = "5"
    return a, b


def test_end_to_end_notifies_only_nearby_posting(coordinator, toronto, sink, accounts, run):
    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.status == "completed"
    assert outcome.matched_ids == ["A"]
    assert outcome.notified_ids == ["A"]
    assert len(sink.intents) == 1
    assert sink.intents[0].payload == {"jobId": "A"}
    assert accounts.tokens == ["tok"]
    assert outcome.status is RefreshStatus.COMPLETED
    assert coordinator.state is RefreshState.IDLE
    assert outcome.identity.user_id == "u1"


def test_two_unchanged_cycles_alert_once(coordinator, toronto, sink, run):
    first = run(coordinator.trigger_refresh("tok"))
    second = run(coordinator.trigger_refresh("tok"))

    assert first.notified_ids == ["A"]
    assert second.matched_ids == ["A"]
    assert second.notified_ids == []
    assert sink.job_ids == ["A"]


def test_moved_posting_alerts_again(coordinator, toronto, directory, sink, posting, run):
    run(coordinator.trigger_refresh("tok"))

    directory.postings = [posting("A", 43.7051, -79.4050), toronto[1]]
    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.notified_ids == ["A"]
    assert sink.job_ids == ["A", "A"]


def test_removed_posting_is_evicted_and_silent(coordinator, toronto, directory, sink, posting, run):
    c = posting("C", 43.7010, -79.4010)
    directory.postings = [toronto[0], c]
    run(coordinator.trigger_refresh("tok"))
    assert sink.job_ids == ["A", "C"]

    directory.postings = [toronto[0]]
    outcome = run(coordinator.trigger_refresh("tok"))

    assert "C" not in coordinator.cache
    assert outcome.matched_ids == ["A"]
    assert sink.job_ids == ["A", "C"]


def test_radius_is_read_each_cycle(coordinator, toronto, store, sink, run):
    store.values[RADIUS_KEY] = "0.1"
    assert run(coordinator.trigger_refresh("tok")).matched_ids == []

    store.values[RADIUS_KEY] = "50"
    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.matched_ids == ["A", "B"]
    assert sink.job_ids == ["A", "B"]


def test_second_refresh_while_acquiring_is_dropped(coordinator, toronto, provider, directory, run):
    async def scenario():
        provider.gate = asyncio.Event()
        first = asyncio.create_task(coordinator.trigger_refresh("tok"))
        while coordinator.state is not RefreshState.ACQUIRING or provider.position_calls == 0:
            await asyncio.sleep(0)

        dropped = await coordinator.trigger_refresh("tok")
        state_after_drop = coordinator.state

        provider.gate.set()
        return dropped, state_after_drop, await first

    dropped, state_after_drop, completed = run(scenario())

    assert dropped.status == "dropped"
    assert dropped.state is RefreshState.ACQUIRING
    assert state_after_drop is RefreshState.ACQUIRING
    assert completed.status == "completed"
    assert provider.position_calls == 1
    assert directory.calls == 1


def test_second_refresh_while_fetching_is_dropped(coordinator, toronto, directory, run):
    async def scenario():
        directory.gate = asyncio.Event()
        first = asyncio.create_task(coordinator.trigger_refresh("tok"))
        while directory.calls == 0:
            await asyncio.sleep(0)

        dropped = await coordinator.trigger_refresh("tok")
        directory.gate.set()
        return dropped, await first

    dropped, completed = run(scenario())

    assert dropped.status == "dropped"
    assert dropped.state is RefreshState.FETCHING
    assert completed.status == "completed"
    assert directory.calls == 1


@pytest.mark.parametrize(
    "error",
    [LocationPermissionDenied(), ProviderUnavailable("no fix")],
)
def test_location_failure_skips_fetch(coordinator, toronto, provider, directory, sink, error, run):
    provider.error = error

    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.status == "failed"
    assert outcome.error is error
    assert directory.calls == 0
    assert sink.intents == []
    assert coordinator.state is RefreshState.IDLE


def test_permission_denied_by_provider_short_circuits_later_cycles(coordinator, toronto, provider, run):
    provider.granted = False

    first = run(coordinator.trigger_refresh("tok"))
    second = run(coordinator.trigger_refresh("tok"))

    assert isinstance(first.error, LocationPermissionDenied)
    assert isinstance(second.error, LocationPermissionDenied)
    assert provider.permission_requests == 1


def test_fetch_failure_keeps_previous_cache(coordinator, toronto, directory, sink, run):
    run(coordinator.trigger_refresh("tok"))
    directory.error = FetchFailed("502 from directory")

    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.status == "failed"
    assert outcome.error.code == "fetch_failed"
    assert "A" in coordinator.cache
    assert coordinator.cache.is_notified("A")
    assert sink.job_ids == ["A"]


def test_unauthorized_fails_cycle(coordinator, toronto, accounts, sink, run):
    accounts.error = Unauthorized()

    outcome = run(coordinator.trigger_refresh(None))

    assert outcome.status == "failed"
    assert outcome.to_dict()["error"]["code"] == "unauthorized"
    assert sink.intents == []


def test_stalled_location_times_out_and_coordinator_recovers(coordinator, toronto, provider, run):
    coordinator.timeout_seconds = 0.05
    provider.gate = asyncio.Event()  # never set

    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.status == "failed"
    assert isinstance(outcome.error, RefreshTimeout)
    assert coordinator.state is RefreshState.IDLE

    provider.gate = None
    assert run(coordinator.trigger_refresh("tok")).status == "completed"


def test_stalled_fetch_times_out(coordinator, toronto, directory, run):
    coordinator.timeout_seconds = 0.05
    directory.gate = asyncio.Event()

    outcome = run(coordinator.trigger_refresh("tok"))

    assert outcome.error.code == "timeout"
    assert coordinator.state is RefreshState.IDLE


def test_unexpected_error_still_returns_to_idle(coordinator, toronto, directory, run):
    directory.error = KeyError("bug")

    with pytest.raises(KeyError):
        run(coordinator.trigger_refresh("tok"))

    assert coordinator.state is RefreshState.IDLE
    directory.error = None
    assert run(coordinator.trigger_refresh("tok")).status == "completed"


def test_sink_receives_cycle_identity(store, provider, directory, accounts, toronto, run):
    from core.proximity import JobCache, LocationTracker, RadiusConfig, RefreshCoordinator

    seen = []

    class Sink:
        def __init__(self, identity):
            seen.append(identity)

        def schedule(self, intent):
            pass

    coordinator = RefreshCoordinator(
        tracker=LocationTracker(provider),
        directory=directory,
        accounts=accounts,
        radius_config=RadiusConfig(store),
        sink_factory=Sink,
        cache=JobCache(),
    )

    run(coordinator.trigger_refresh("tok"))

    assert seen == [accounts.identity]
    assert coordinator.last_outcome.notified_ids == ["A"]


def test_failed_identity_cancels_inflight_fetch(coordinator, toronto, accounts, directory, run):
    async def scenario():
        directory.gate = asyncio.Event()  # never set
        accounts.error = Unauthorized()

        first = await coordinator.trigger_refresh("tok")
        leftover = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]

        await coordinator.trigger_refresh("tok")
        leftover_after_second = [t for t in asyncio.all_tasks() if t is not asyncio.current_task()]
        return first, leftover, leftover_after_second

    first, leftover, leftover_after_second = run(scenario())

    assert first.error.code == "unauthorized"
    assert coordinator.state is RefreshState.IDLE
    assert leftover == []
    assert leftover_after_second == []
    assert directory.calls == 2


def test_other_account_is_rejected_without_touching_cache(coordinator, toronto, accounts, sink, run):
    from core.proximity import Identity

    assert run(coordinator.trigger_refresh("tok")).notified_ids == ["A"]
    assert coordinator.owner_id == "u1"

    accounts.identity = Identity(user_id="u2", username="alex", email="alex@example.com")
    outcome = run(coordinator.trigger_refresh("other"))

    assert outcome.status is RefreshStatus.FAILED
    assert outcome.error.code == "unauthorized"
    assert sink.job_ids == ["A"]
    assert coordinator.cache.is_notified("A")


def test_configured_owner_rejects_first_foreign_account(store, provider, directory, accounts, sink, toronto, run):
    from core.proximity import JobCache, LocationTracker, RadiusConfig, RefreshCoordinator

    coordinator = RefreshCoordinator(
        tracker=LocationTracker(provider),
        directory=directory,
        accounts=accounts,
        radius_config=RadiusConfig(store),
        sink_factory=lambda identity: sink,
        cache=JobCache(),
        owner_id="someone-else",
    )

    outcome = run(coordinator.trigger_refresh("tok"))

    assert isinstance(outcome.error, Unauthorized)
    assert len(coordinator.cache) == 0
    assert sink.intents == []


def test_storage_calls_run_off_the_event_loop_thread(coordinator, toronto, store, sink, run):
    loop_thread = threading.get_ident()
    seen = {}
    original_get = store.get
    original_schedule = sink.schedule

    def _get(key):
        seen["radius"] = threading.get_ident()
        return original_get(key)

    def _schedule(intent):
        seen["sink"] = threading.get_ident()
        original_schedule(intent)

    store.get = _get
    sink.schedule = _schedule

    assert run(coordinator.trigger_refresh("tok")).notified_ids == ["A"]
    assert seen["radius"] != loop_thread
    assert seen["sink"] != loop_thread


def test_stalled_radius_read_times_out(coordinator, toronto, store, run):
    coordinator.timeout_seconds = 0.05
    release = threading.Event()
    original_get = store.get

    def _slow_get(key):
        release.wait(2)
        return original_get(key)

    store.get = _slow_get

    async def scenario():
        outcome = await coordinator.trigger_refresh("tok")
        release.set()
        return outcome

    outcome = run(scenario())

    assert isinstance(outcome.error, RefreshTimeout)
    assert coordinator.state is RefreshState.IDLE
