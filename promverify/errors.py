"""
Exceptions raised by the verification helpers.

Only configuration problems and timeouts are meant to reach a caller of the
poller.  Decode failures are transient and get retried.
"""


class VerificationError(Exception):
    pass


class MalformedInput(VerificationError):
    """
    A metrics or targets payload could not be decoded.  The original decode
    error is kept as `cause`.
    """

    def __init__(self, message, cause=None):
        super().__init__(message)
        self.cause = cause


class PatternError(VerificationError, ValueError):
    """
    A scrape URL pattern is not a valid regular expression
    """

    def __init__(self, pattern, cause):
        super().__init__("invalid scrape URL pattern %r: %s" % (pattern, cause))
        self.pattern = pattern


class ConfigError(VerificationError, ValueError):
    pass


class PollTimeout(AssertionError):
    """
    Raised when a wait gives up.  The message lists every expectation that was
    still failing on the last attempt.
    """

    def __init__(self, outcome, description=None):
        self.outcome = outcome
        header = "%s still failing after %d attempts (%.1f seconds)" % (
            description or "condition",
            outcome.attempts,
            outcome.elapsed,
        )
        super().__init__("\n - ".join([header] + list(outcome.failures)))
