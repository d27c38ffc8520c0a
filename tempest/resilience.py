"""
Failure isolation for the weather and insight HTTP collaborators.

A CircuitBreaker stops hammering a service that keeps failing; with_retry
re-attempts transient errors with exponential backoff (tenacity). Providers
stack them as breaker(with_retry(...)(call)), so one breaker failure is
counted per exhausted retry sequence, not per attempt.
"""
import functools
import logging
import threading
import time
from enum import Enum
from typing import Callable, Dict, Optional, Tuple, Type, TypeVar

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """The guarded service is being skipped until its cool-down ends."""
    pass


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    CLOSED: calls pass; `failure_threshold` failures in a row open the circuit.
    OPEN: calls fail fast with CircuitOpenError for `recovery_timeout` seconds.
    HALF_OPEN: trial calls pass; `half_open_max_calls` successes close the
    circuit, any failure re-opens it.

    Usage:
        openweather = CircuitBreaker(name="openweather_api")
        fetch = openweather(fetch_current_conditions)
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout: float = 60,
        half_open_max_calls: int = 1,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = max(failure_threshold, 1)
        self.recovery_timeout = recovery_timeout
        self.half_open_max_calls = max(half_open_max_calls, 1)
        self._clock = clock

        self._lock = threading.RLock()
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._successes = 0
        self._trial_successes = 0
        self._opened_at: Optional[float] = None
        self._last_error: Optional[str] = None

    def __repr__(self) -> str:
        return f"CircuitBreaker(name={self.name!r}, state={self._state.value})"

    @property
    def state(self) -> CircuitState:
        with self._lock:
            self._maybe_half_open()
            return self._state

    def _maybe_half_open(self) -> None:
        if self._state is not CircuitState.OPEN or self._opened_at is None:
            return
        if self._clock() - self._opened_at >= self.recovery_timeout:
            self._state = CircuitState.HALF_OPEN
            self._trial_successes = 0
            logger.info(f"Circuit '{self.name}' cool-down over, allowing trial calls")

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        logger.warning(
            f"Circuit '{self.name}' opened after {self._consecutive_failures} "
            f"consecutive failures; skipping calls for {self.recovery_timeout}s"
        )

    def record_success(self) -> None:
        with self._lock:
            self._successes += 1
            self._consecutive_failures = 0
            if self._state is CircuitState.HALF_OPEN:
                self._trial_successes += 1
                if self._trial_successes >= self.half_open_max_calls:
                    self._state = CircuitState.CLOSED
                    self._opened_at = None
                    logger.info(f"Circuit '{self.name}' closed, service is answering again")

    def record_failure(self, error: Exception) -> None:
        with self._lock:
            self._consecutive_failures += 1
            self._last_error = f"{type(error).__name__}: {error}"
            logger.warning(f"Circuit '{self.name}' call failed ({self._consecutive_failures}): {error}")

            if self._state is CircuitState.HALF_OPEN:
                self._open()
            elif self._consecutive_failures >= self.failure_threshold:
                self._open()

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def guarded(*args, **kwargs) -> T:
            if self.state is CircuitState.OPEN:
                raise CircuitOpenError(
                    f"{self.name} is unavailable (circuit open), "
                    f"retry after {self.recovery_timeout}s"
                )
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                self.record_failure(e)
                raise
            self.record_success()
            return result

        return guarded

    def get_status(self) -> Dict:
        """Snapshot for the health endpoint."""
        with self._lock:
            self._maybe_half_open()
            return {
                'name': self.name,
                'state': self._state.value,
                'failure_count': self._consecutive_failures,
                'success_count': self._successes,
                'last_error': self._last_error,
                'failure_threshold': self.failure_threshold,
                'recovery_timeout_seconds': self.recovery_timeout,
            }


def with_retry(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 5.0,
    exceptions: Tuple[Type[BaseException], ...] = (Exception,),
):
    """
    Retry `exceptions` with exponential backoff; re-raise the last one.

    Usage:
        @with_retry(max_attempts=2, exceptions=(requests.RequestException,))
        def fetch_current_conditions(coordinate):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        return retry(
            stop=stop_after_attempt(max(max_attempts, 1)),
            wait=wait_exponential(multiplier=min_wait, min=min_wait, max=max_wait),
            retry=retry_if_exception_type(exceptions),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )(func)

    return decorator


_breakers: Dict[str, CircuitBreaker] = {}


def register_circuit_breaker(breaker: CircuitBreaker) -> CircuitBreaker:
    """Make a breaker visible to /api/health."""
    _breakers[breaker.name] = breaker
    return breaker


def get_all_circuit_breaker_status() -> Dict[str, Dict]:
    return {name: breaker.get_status() for name, breaker in _breakers.items()}
