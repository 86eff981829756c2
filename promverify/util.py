"""
Polling primitives.  Everything that waits for a condition goes through
`poll`; nothing else in the package retries.
"""
import logging
import time
from collections import namedtuple
from enum import Enum

from promverify.config import DEFAULT_TIMEOUT
from promverify.errors import ConfigError, PatternError, PollTimeout

logger = logging.getLogger(__name__)

# Errors that mean the check itself is wrong, so retrying can't help
FATAL_ERRORS = (PatternError, ConfigError)


class PollState(Enum):
    # A PollOutcome only ever carries one of the two terminal states
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    TIMED_OUT = "timed out"


class ProbeResult(namedtuple("ProbeResult", ["met", "failures", "error"])):
    """
    What one probe attempt found: either the condition is met, it is not met
    yet (with the reasons why), or the attempt itself failed in a way that is
    worth retrying (e.g. the server returned garbage while starting up).
    """

    __slots__ = ()

    @classmethod
    def ok(cls):
        return cls(True, (), None)

    @classmethod
    def not_yet(cls, failures=()):
        return cls(False, tuple(failures), None)

    @classmethod
    def abnormal(cls, error):
        return cls(False, (), error)


class PollOutcome(namedtuple("PollOutcome", ["state", "attempts", "elapsed", "failures", "last_error"])):
    __slots__ = ()

    @property
    def succeeded(self):
        return self.state is PollState.SUCCEEDED

    def __bool__(self):
        return self.succeeded


def _run_probe(probe):
    try:
        result = probe()
    except FATAL_ERRORS:
        raise
    except AssertionError as e:
        return ProbeResult.not_yet([str(e) or repr(e)])
    except Exception as e:  # pylint: disable=broad-except
        return ProbeResult.abnormal(e)

    if isinstance(result, ProbeResult):
        return result
    return ProbeResult.ok() if result else ProbeResult.not_yet()


def poll(probe, interval_seconds, timeout_seconds, clock=time.monotonic, sleep=time.sleep):
    """
    Calls `probe` right away and then every `interval_seconds` until it
    reports the condition met or `timeout_seconds` have elapsed.

    `probe` may return a ProbeResult or any value (truthy means met).  An
    exception from the probe counts as not met, except for PatternError and
    ConfigError which are raised straight through.

    Returns a PollOutcome.  A timed out outcome always has at least one
    failure reason: the last reported ones, or the last probe error.
    """
    if interval_seconds < 0 or timeout_seconds < 0:
        raise ConfigError(
            "poll interval and timeout must be non-negative, got %r and %r" % (interval_seconds, timeout_seconds)
        )
    start = clock()
    attempts = 0
    failures = ()
    last_error = None
    while True:
        attempts += 1
        result = _run_probe(probe)
        elapsed = clock() - start
        if result.met:
            return PollOutcome(PollState.SUCCEEDED, attempts, elapsed, (), None)

        if result.error is not None:
            last_error = result.error
            logger.info("Attempt %d of %r failed, will retry: %s", attempts, probe, result.error)
        else:
            failures = result.failures
            logger.debug("Attempt %d of %r not met yet: %s", attempts, probe, list(failures))

        if elapsed > timeout_seconds:
            if not failures:
                if last_error is not None:
                    failures = ("last attempt failed: %r" % (last_error,),)
                else:
                    failures = ("%r never reported success" % (probe,),)
            logger.warning("Gave up on %r after %d attempts (%.1fs): %s", probe, attempts, elapsed, list(failures))
            return PollOutcome(PollState.TIMED_OUT, attempts, elapsed, tuple(failures), last_error)

        sleep(interval_seconds)


def wait_for(test, timeout_seconds=DEFAULT_TIMEOUT, interval_seconds=0.2):
    """
    Repeatedly calls the test function for timeout_seconds until either test
    returns a truthy value, at which point the function returns True -- or the
    timeout is exceeded, at which point it will return False.
    """
    return poll(test, interval_seconds, timeout_seconds).succeeded


def assert_wait_for(test, timeout_seconds=DEFAULT_TIMEOUT, interval_seconds=0.2, on_fail=None):
    """
    Runs `poll` but raises PollTimeout if it fails, optionally calling
    `on_fail` before raising
    """
    outcome = poll(test, interval_seconds, timeout_seconds)
    if not outcome.succeeded:
        if on_fail:
            on_fail()

        raise PollTimeout(outcome, "test '%s'" % (test,))
    return outcome


def wait_for_assertion(test, timeout_seconds=DEFAULT_TIMEOUT, interval_seconds=0.2):
    """
    Waits for the given `test` function passed in to not raise an
    AssertionError.  It is called repeatedly until that happens or the
    timeout elapses, in which case the last assertion message is reported.
    """

    def probe():
        test()
        return True

    return assert_wait_for(probe, timeout_seconds, interval_seconds)


def ensure_always(test, timeout_seconds=DEFAULT_TIMEOUT, interval_seconds=0.2, clock=time.monotonic, sleep=time.sleep):
    """
    Repeatedly calls the given test.  If it ever returns false before the timeout
    given is completed, returns False, otherwise True.
    """
    start = clock()
    while True:
        if not test():
            return False
        if clock() - start > timeout_seconds:
            return True
        sleep(interval_seconds)
