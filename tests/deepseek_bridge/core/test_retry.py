import time

import pytest

from deepseek_bridge.core.exceptions import AuthenticationError, RateLimitExceededError, ServerError
from deepseek_bridge.core.retry import RetryStrategy, with_retry


def test_compute_delay_without_jitter() -> None:
    strategy = RetryStrategy(base_backoff_sec=1.0, jitter=False)
    assert strategy.compute_delay(1) == 1.0  # 1 * 2^(1-1)
    assert strategy.compute_delay(2) == 2.0  # 1 * 2^(2-1)  # noqa: PLR2004
    # capped
    assert strategy.compute_delay(10) == strategy.max_backoff_sec


def test_default_strategy_is_single_attempt() -> None:
    calls = {'cnt': 0}

    @with_retry()
    def _fn() -> str:
        calls['cnt'] += 1
        raise ServerError('down', status_code=503)

    with pytest.raises(ServerError):
        _fn()
    assert calls['cnt'] == 1


def test_wrapper_success_first_try() -> None:
    calls = {'cnt': 0}

    @with_retry(RetryStrategy(max_attempts=3, base_backoff_sec=0, jitter=False))
    def _fn() -> str:
        calls['cnt'] += 1
        return 'ok'

    assert _fn() == 'ok'
    assert calls['cnt'] == 1


def test_wrapper_eventual_success(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(time, 'sleep', lambda *_: None)
    calls = {'cnt': 0}

    @with_retry(RetryStrategy(max_attempts=3, base_backoff_sec=0, jitter=False))
    def _fn() -> str:
        calls['cnt'] += 1
        if calls['cnt'] < 3:  # noqa: PLR2004
            raise RateLimitExceededError('busy', status_code=429)
        return 'done'

    assert _fn() == 'done'
    assert calls['cnt'] == 3  # noqa: PLR2004


def test_last_error_is_reraised(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(time, 'sleep', lambda *_: None)

    @with_retry(RetryStrategy(max_attempts=2, base_backoff_sec=0, jitter=False))
    def _always_fail() -> None:
        raise RateLimitExceededError('still busy', status_code=429)

    with pytest.raises(RateLimitExceededError, match='still busy'):
        _always_fail()


def test_auth_errors_are_not_retried() -> None:
    calls = {'cnt': 0}

    @with_retry(RetryStrategy(max_attempts=5, base_backoff_sec=0, jitter=False))
    def _fn() -> None:
        calls['cnt'] += 1
        raise AuthenticationError('Invalid API key', status_code=401)

    with pytest.raises(AuthenticationError):
        _fn()
    assert calls['cnt'] == 1
