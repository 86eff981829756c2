"""
Ties a PrometheusClient and a Scenario together into a single check that can
be polled until it passes
"""
import logging

from promverify.assertions import any_counter_advanced, expect_metric
from promverify.errors import PollTimeout
from promverify.targets import all_failures, evaluate
from promverify.util import ProbeResult, poll

logger = logging.getLogger(__name__)


def targets_probe(fetch_targets, expectations):
    """
    Returns a probe that fetches a fresh target list on every call and checks
    all of `expectations` against it
    """

    def probe():
        failures = evaluate(fetch_targets(), expectations)
        if failures:
            logger.info("missing some targets: %s", failures)
            return ProbeResult.not_yet(failures)
        return ProbeResult.ok()

    return probe


def wait_for_targets(fetch_targets, expectations, interval_seconds, timeout_seconds):
    return poll(targets_probe(fetch_targets, expectations), interval_seconds, timeout_seconds)


def wait_for_metrics(fetch_metrics, check, interval_seconds, timeout_seconds):
    """
    Polls until `check` holds for a freshly fetched set of families, e.g.
    `p(has_sample, name="up", labels={"job": "apiserver"})`
    """
    return poll(lambda: check(fetch_metrics()), interval_seconds, timeout_seconds)


class Verifier:
    def __init__(self, client, scenario):
        self.client = client
        self.scenario = scenario

    def check_targets(self):
        if not self.scenario.targets:
            return []
        return evaluate(self.client.get_targets(), self.scenario.targets)

    def check_metrics(self):
        if not (self.scenario.metrics or self.scenario.advancing_counters):
            return []
        families = self.client.get_metrics()
        failures = all_failures(*[expect_metric(families, m) for m in self.scenario.metrics])
        for names in self.scenario.advancing_counters:
            if not any_counter_advanced(families, names):
                failures.append("none of %s has advanced past zero" % ", ".join(names))
        return failures

    def probe(self):
        """
        Runs every check of the scenario once.  Both the targets and the
        metrics are always checked so the result lists everything that is
        currently failing.
        """
        failures = self.check_targets() + self.check_metrics()
        if failures:
            return ProbeResult.not_yet(failures)
        return ProbeResult.ok()

    def run(self, interval_seconds=None, timeout_seconds=None):
        interval = self.scenario.interval_seconds if interval_seconds is None else interval_seconds
        timeout = self.scenario.timeout_seconds if timeout_seconds is None else timeout_seconds
        return poll(self.probe, interval, timeout)

    def verify(self, interval_seconds=None, timeout_seconds=None):
        """
        Polls until the whole scenario holds, raising PollTimeout with the
        still failing expectations otherwise
        """
        outcome = self.run(interval_seconds, timeout_seconds)
        if not outcome.succeeded:
            raise PollTimeout(outcome, "scenario against %s" % self.client.url)
        logger.info("All expectations met after %d attempts", outcome.attempts)
        return outcome
