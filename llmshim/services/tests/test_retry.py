import asyncio
import random

import pytest

from llmshim.common.exceptions import (
    AuthenticationException,
    InvalidResponseException,
    NetworkException,
    ProviderTimeoutException,
    RateLimitException,
)
from llmshim.config.models import RetryConfig
from llmshim.services.retry import RetryCoordinator, RetryState


def _coordinator(**overrides) -> RetryCoordinator:
    values = {'max_attempts': 3, 'base_delay': 0.001, 'max_delay': 0.01, 'jitter': False}
    values.update(overrides)
    return RetryCoordinator(RetryConfig(**values))


class FlakyOperation:
    """Fails with the queued errors, then returns ``result``."""

    def __init__(self, *errors, result='ok'):
        self.errors = list(errors)
        self.result = result
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.result


class TestComputeDelay:
    def test_exponential_growth_capped(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=1, max_delay=5, backoff_factor=2, jitter=False))
        assert [coordinator.compute_delay(n) for n in range(1, 6)] == [1, 2, 4, 5, 5]

    def test_jitter_bounds(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=1, max_delay=100, jitter=True), rng=random.Random(42))
        for _ in range(50):
            assert 0.5 <= coordinator.compute_delay(1) < 1.5

    def test_jitter_never_exceeds_max_delay(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=4, max_delay=4, jitter=True), rng=random.Random(7))
        for _ in range(50):
            assert coordinator.compute_delay(3) <= 4

    @pytest.mark.parametrize('failures', [1025, 5000, 10**6])
    def test_large_failure_counts_stay_at_max_delay(self, failures):
        coordinator = RetryCoordinator(RetryConfig(base_delay=1, max_delay=5, backoff_factor=2, jitter=False))
        assert coordinator.compute_delay(failures) == 5

    def test_huge_backoff_factor_stays_at_max_delay(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=0.5, max_delay=8, backoff_factor=1e300, jitter=False))
        assert coordinator.compute_delay(3) == 8

    def test_zero_base_delay(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=0, max_delay=0, jitter=False))
        assert coordinator.compute_delay(2000) == 0

    def test_retry_after_honored_up_to_max_delay(self):
        coordinator = RetryCoordinator(RetryConfig(base_delay=0.1, max_delay=10, jitter=False))
        assert coordinator.compute_delay(1, RateLimitException('slow', retry_after=3)) == 3
        assert coordinator.compute_delay(1, RateLimitException('slow', retry_after=60)) == 10
        assert coordinator.compute_delay(1, RateLimitException('slow')) == pytest.approx(0.1)


class TestRun:
    @pytest.mark.asyncio
    async def test_success_first_try(self):
        operation = FlakyOperation()
        states = []

        assert await _coordinator().run(operation, on_transition=states.append) == 'ok'
        assert operation.calls == 1
        assert states == [RetryState.IDLE, RetryState.ATTEMPTING, RetryState.SUCCESS]

    @pytest.mark.asyncio
    async def test_retries_transient_then_succeeds(self):
        operation = FlakyOperation(NetworkException('reset'), ProviderTimeoutException(1.0))
        states = []

        assert await _coordinator().run(operation, on_transition=states.append) == 'ok'
        assert operation.calls == 3
        assert states == [
            RetryState.IDLE,
            RetryState.ATTEMPTING,
            RetryState.RETRY_WAIT,
            RetryState.ATTEMPTING,
            RetryState.RETRY_WAIT,
            RetryState.ATTEMPTING,
            RetryState.SUCCESS,
        ]

    @pytest.mark.asyncio
    async def test_retries_server_errors(self):
        operation = FlakyOperation(InvalidResponseException('boom', status_code=503))
        assert await _coordinator().run(operation) == 'ok'
        assert operation.calls == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        'error',
        [
            AuthenticationException('bad key', status_code=401),
            InvalidResponseException('bad request', status_code=400),
            InvalidResponseException('garbage body', status_code=200),
        ],
    )
    async def test_non_retryable_fails_immediately(self, error):
        operation = FlakyOperation(error)
        states = []

        with pytest.raises(type(error)) as exc_info:
            await _coordinator().run(operation, on_transition=states.append)

        assert exc_info.value is error
        assert exc_info.value.attempts == 1
        assert operation.calls == 1
        assert states[-1] == RetryState.FAILED

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_last_error(self):
        errors = [NetworkException(f'fail {i}') for i in range(5)]
        operation = FlakyOperation(*errors)

        with pytest.raises(NetworkException) as exc_info:
            await _coordinator(max_attempts=3).run(operation)

        assert exc_info.value is errors[2]
        assert exc_info.value.attempts == 3
        assert operation.calls == 3

    @pytest.mark.asyncio
    async def test_long_retry_budget_ends_with_last_error(self):
        errors = [NetworkException(f'fail {i}') for i in range(2000)]
        operation = FlakyOperation(*errors)

        with pytest.raises(NetworkException) as exc_info:
            await _coordinator(max_attempts=2000, base_delay=1e-12, max_delay=1e-12).run(operation)

        assert exc_info.value is errors[-1]
        assert exc_info.value.attempts == 2000

    @pytest.mark.asyncio
    async def test_single_attempt_never_retries(self):
        operation = FlakyOperation(NetworkException('down'))
        with pytest.raises(NetworkException):
            await _coordinator(max_attempts=1).run(operation)
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_foreign_exceptions_propagate(self):
        operation = FlakyOperation(KeyError('bug'))
        with pytest.raises(KeyError):
            await _coordinator().run(operation)
        assert operation.calls == 1

    @pytest.mark.asyncio
    async def test_total_timeout_stops_retrying(self):
        coordinator = _coordinator(max_attempts=10, base_delay=5, max_delay=5, total_timeout=1)
        operation = FlakyOperation(*[NetworkException('down') for _ in range(10)])

        with pytest.raises(NetworkException) as exc_info:
            await coordinator.run(operation)

        assert operation.calls == 1
        assert exc_info.value.attempts == 1

    @pytest.mark.asyncio
    async def test_cancel_event_set_before_wait(self):
        cancel = asyncio.Event()
        cancel.set()
        operation = FlakyOperation(NetworkException('down'))
        states = []

        with pytest.raises(NetworkException):
            await _coordinator(base_delay=10, max_delay=10).run(operation, cancel_event=cancel, on_transition=states.append)

        assert operation.calls == 1
        assert states[-2:] == [RetryState.RETRY_WAIT, RetryState.FAILED]

    @pytest.mark.asyncio
    async def test_cancel_event_interrupts_wait(self):
        cancel = asyncio.Event()
        operation = FlakyOperation(RateLimitException('slow', retry_after=30))
        coordinator = _coordinator(base_delay=30, max_delay=30)

        task = asyncio.create_task(coordinator.run(operation, cancel_event=cancel))
        await asyncio.sleep(0.01)
        cancel.set()

        with pytest.raises(RateLimitException):
            await asyncio.wait_for(task, timeout=1)
        assert operation.calls == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('with_event', [False, True])
    async def test_task_cancelled_during_backoff(self, with_event):
        operation = FlakyOperation(NetworkException('down'))
        states = []
        cancel_event = asyncio.Event() if with_event else None
        coordinator = _coordinator(base_delay=30, max_delay=30)

        task = asyncio.create_task(coordinator.run(operation, cancel_event=cancel_event, on_transition=states.append))
        await asyncio.sleep(0.01)
        assert states[-1] == RetryState.RETRY_WAIT
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0.01)

        assert task.cancelled()
        assert operation.calls == 1
        assert states[-1] == RetryState.RETRY_WAIT

    @pytest.mark.asyncio
    async def test_task_cancelled_during_attempt(self):
        started = asyncio.Event()
        calls = []

        async def slow_operation():
            calls.append(1)
            started.set()
            await asyncio.sleep(30)

        task = asyncio.create_task(_coordinator().run(slow_operation))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_runs_share_coordinator(self):
        coordinator = _coordinator()
        operations = [FlakyOperation(NetworkException('x'), result=i) for i in range(5)]

        results = await asyncio.gather(*(coordinator.run(op) for op in operations))

        assert results == [0, 1, 2, 3, 4]
        assert all(op.calls == 2 for op in operations)
