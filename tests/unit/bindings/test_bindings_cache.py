from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from docbind.bindings import ServiceCache
from docbind.exceptions import ConfigurationError, ServiceConstructionError
from docbind.services import InMemoryDocumentService, InMemoryServiceFactory


class _Abort(BaseException):
    pass


class _GatedFactory:
    """Blocks construction of ``gated_key`` until ``release`` is set."""

    def __init__(self, gated_key: str, *, fail: bool = False) -> None:
        self.gated_key = gated_key
        self.fail = fail
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def create(self, connection_string: str) -> InMemoryDocumentService:
        with self._lock:
            self.calls.append(connection_string)
        if connection_string == self.gated_key:
            self.entered.set()
            self.release.wait(timeout=5)
            if self.fail:
                raise ConnectionError("auth failed: AccountKey=s3cr3t")
        return InMemoryDocumentService(connection_string)


def test_same_key_returns_identical_handle(service_cache: ServiceCache, service_factory: InMemoryServiceFactory) -> None:
    first = service_cache.get_or_create("conn1")
    second = service_cache.get_or_create("conn1")
    assert first is second
    assert service_factory.created == ["conn1"]
    assert "conn1" in service_cache
    assert len(service_cache) == 1


def test_distinct_keys_get_distinct_handles(service_cache: ServiceCache) -> None:
    assert service_cache.get_or_create("a") is not service_cache.get_or_create("b")
    assert len(service_cache) == 2


@given(callers=st.integers(min_value=2, max_value=12))
@settings(max_examples=10, deadline=None)
def test_property_concurrent_callers_construct_once(callers: int) -> None:
    """Property: N simultaneous first-access callers share one construction."""
    factory = InMemoryServiceFactory(delay_seconds=0.02)
    cache = ServiceCache(factory)
    barrier = threading.Barrier(callers)

    def _call() -> object:
        barrier.wait()
        return cache.get_or_create("shared")

    with ThreadPoolExecutor(max_workers=callers) as pool:
        handles = list(pool.map(lambda _: _call(), range(callers)))

    assert factory.calls_for("shared") == 1
    assert all(handle is handles[0] for handle in handles)


def test_two_concurrent_requests_with_slow_construction() -> None:
    factory = InMemoryServiceFactory(delay_seconds=0.2)
    cache = ServiceCache(factory)
    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(cache.get_or_create, "conn1") for _ in range(2)]
        handles = [future.result(timeout=5) for future in futures]
    assert factory.created == ["conn1"]
    assert handles[0] is handles[1]


def test_failed_construction_is_retried_on_next_call() -> None:
    factory = InMemoryServiceFactory(failures={"flaky": 1})
    cache = ServiceCache(factory)

    with pytest.raises(ServiceConstructionError, match="simulated connection failure"):
        cache.get_or_create("flaky")
    assert "flaky" not in cache

    service = cache.get_or_create("flaky")
    assert isinstance(service, InMemoryDocumentService)
    assert factory.calls_for("flaky") == 2
    assert cache.get_or_create("flaky") is service


def test_construction_error_redacts_account_key() -> None:
    connection_string = "AccountEndpoint=https://x/;AccountKey=s3cr3t;"
    factory = _GatedFactory(connection_string, fail=True)
    factory.release.set()
    cache = ServiceCache(factory)
    with pytest.raises(ServiceConstructionError) as exc_info:
        cache.get_or_create(connection_string)
    assert "s3cr3t" not in str(exc_info.value)
    assert "AccountKey=***" in exc_info.value.connection_string


def test_construction_error_cause_is_original_exception() -> None:
    factory = InMemoryServiceFactory(failures={"bad": 1})
    cache = ServiceCache(factory)
    with pytest.raises(ServiceConstructionError) as exc_info:
        cache.get_or_create("bad")
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_docbind_errors_from_factory_propagate_unwrapped() -> None:
    class _Factory:
        def create(self, connection_string: str) -> InMemoryDocumentService:
            raise ConfigurationError("bad setting")

    with pytest.raises(ConfigurationError, match="bad setting"):
        ServiceCache(_Factory()).get_or_create("x")


def test_racing_callers_observe_the_same_failure() -> None:
    factory = _GatedFactory("flaky", fail=True)
    cache = ServiceCache(factory)
    errors: list[BaseException] = []

    def _call() -> None:
        try:
            cache.get_or_create("flaky")
        except ServiceConstructionError as exc:
            errors.append(exc)

    owner = threading.Thread(target=_call)
    owner.start()
    assert factory.entered.wait(timeout=5)
    waiter = threading.Thread(target=_call)
    waiter.start()
    time.sleep(0.2)
    factory.release.set()
    owner.join(timeout=5)
    waiter.join(timeout=5)

    assert factory.calls == ["flaky"]
    assert len(errors) == 2
    assert errors[0] is errors[1]


def test_slow_construction_does_not_block_other_keys() -> None:
    factory = _GatedFactory("slow")
    cache = ServiceCache(factory)
    slow = threading.Thread(target=cache.get_or_create, args=("slow",))
    slow.start()
    try:
        assert factory.entered.wait(timeout=5)
        started = time.monotonic()
        fast = cache.get_or_create("fast")
        assert time.monotonic() - started < 1.0
        assert isinstance(fast, InMemoryDocumentService)
        assert "slow" not in cache
    finally:
        factory.release.set()
        slow.join(timeout=5)
    assert "slow" in cache


def test_base_exception_during_construction_allows_retry() -> None:
    class _Interrupting:
        def __init__(self) -> None:
            self.calls = 0

        def create(self, connection_string: str) -> InMemoryDocumentService:
            self.calls += 1
            if self.calls == 1:
                raise _Abort
            return InMemoryDocumentService(connection_string)

    factory = _Interrupting()
    cache = ServiceCache(factory)
    with pytest.raises(_Abort):
        cache.get_or_create("k")
    assert isinstance(cache.get_or_create("k"), InMemoryDocumentService)
    assert factory.calls == 2


@pytest.mark.asyncio
async def test_async_lookup_of_other_key_proceeds_during_slow_construction() -> None:
    factory = _GatedFactory("slow")
    cache = ServiceCache(factory)
    slow = asyncio.create_task(cache.get_or_create_async("slow"))
    assert await asyncio.to_thread(factory.entered.wait, 5)

    fast = await asyncio.wait_for(cache.get_or_create_async("fast"), timeout=2)

    assert fast.connection_string == "fast"
    assert not slow.done()
    factory.release.set()
    assert (await slow).connection_string == "slow"


@pytest.mark.asyncio
async def test_async_callers_share_one_construction() -> None:
    factory = _GatedFactory("shared")
    cache = ServiceCache(factory)
    owner = asyncio.create_task(cache.get_or_create_async("shared"))
    assert await asyncio.to_thread(factory.entered.wait, 5)
    waiters = [asyncio.create_task(cache.get_or_create_async("shared")) for _ in range(3)]
    await asyncio.sleep(0)
    factory.release.set()

    results = await asyncio.gather(owner, *waiters)

    assert all(result is results[0] for result in results)
    assert factory.calls == ["shared"]
    assert cache.get_or_create("shared") is results[0]


@pytest.mark.asyncio
async def test_cancelled_async_waiter_leaves_construction_intact() -> None:
    factory = _GatedFactory("shared")
    cache = ServiceCache(factory)
    owner = asyncio.create_task(cache.get_or_create_async("shared"))
    assert await asyncio.to_thread(factory.entered.wait, 5)
    waiter = asyncio.create_task(cache.get_or_create_async("shared"))
    await asyncio.sleep(0)
    waiter.cancel()
    factory.release.set()

    service = await owner

    with pytest.raises(asyncio.CancelledError):
        await waiter
    assert "shared" in cache
    assert cache.get_or_create("shared") is service


@pytest.mark.asyncio
async def test_async_racing_callers_observe_the_same_failure() -> None:
    factory = _GatedFactory("flaky", fail=True)
    cache = ServiceCache(factory)
    owner = asyncio.create_task(cache.get_or_create_async("flaky"))
    assert await asyncio.to_thread(factory.entered.wait, 5)
    waiter = asyncio.create_task(cache.get_or_create_async("flaky"))
    await asyncio.sleep(0)
    factory.release.set()

    results = await asyncio.gather(owner, waiter, return_exceptions=True)

    assert isinstance(results[0], ServiceConstructionError)
    assert results[1] is results[0]
    assert "s3cr3t" not in str(results[0])
    assert "flaky" not in cache
