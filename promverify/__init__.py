"""
Black-box checks that a Prometheus deployment is scraping what it should be
"""
from promverify.assertions import (
    MetricExpectation,
    MetricTest,
    expect_metric,
    find_counters_with_labels,
    find_gauges_with_labels,
    find_label_values,
    find_samples_with_labels,
    has_all_labels,
    has_sample,
)
from promverify.errors import ConfigError, MalformedInput, PatternError, PollTimeout, VerificationError
from promverify.samples import Labels, MetricFamily, Sample, families_from_text, get_family
from promverify.targets import ActiveTarget, Expectation, TargetList, evaluate
from promverify.util import PollOutcome, PollState, ProbeResult, poll, wait_for
