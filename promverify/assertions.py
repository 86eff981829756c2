"""
Assertions about decoded metric families
"""
from collections import namedtuple

from promverify.formatting import format_labels, format_sample
from promverify.samples import get_family


def has_all_labels(labels, predicate):
    """
    Tests if every name/value pair in `predicate` is also in `labels`
    """
    return predicate.items() <= labels.items()


def find_samples_with_labels(family, predicate):
    """
    Returns the samples of `family`, in order, that carry all of the labels in
    `predicate`.  Extra labels on a sample are ignored.  A missing family
    yields an empty list.
    """
    if family is None:
        return []
    return [s for s in family.samples if has_all_labels(s.labels, predicate or {})]


def _is_counter_value(sample):
    return not sample.name.endswith("_created")


def find_counters_with_labels(family, predicate):
    return [s.value for s in find_samples_with_labels(family, predicate) if _is_counter_value(s)]


def find_gauges_with_labels(family, predicate):
    return [s.value for s in find_samples_with_labels(family, predicate)]


def find_label_values(family, predicate, label):
    """
    Returns the value of `label` on each matching sample.  Samples without
    that label are skipped.
    """
    return [s.labels[label] for s in find_samples_with_labels(family, predicate) if label in s.labels]


def has_sample(families, name, labels=None, value=None):
    """
    Returns True if the family called `name` has a sample with all of the
    given labels.  If `value` is provided, the sample must also have that
    value.
    """
    for sample in find_samples_with_labels(get_family(families, name), labels):
        if value is not None and sample.value != value:
            continue
        return True
    return False


def any_counter_advanced(families, names, labels=None):
    """
    Returns True if the first matching counter of any of the families in
    `names` is greater than zero.  Useful when a metric got renamed between
    releases.
    """
    for name in names:
        counts = find_counters_with_labels(get_family(families, name), labels)
        if counts and counts[0] > 0:
            return True
    return False


class MetricTest(namedtuple("MetricTest", ["value", "greater_than_equal"])):
    __slots__ = ()

    def __new__(cls, value, greater_than_equal=False):
        return super().__new__(cls, value, greater_than_equal)

    def passes(self, observed):
        if self.greater_than_equal:
            return observed >= self.value
        return observed == self.value

    def __str__(self):
        return "%s %s" % (">=" if self.greater_than_equal else "==", self.value)


class MetricExpectation(namedtuple("MetricExpectation", ["name", "labels", "tests"])):
    __slots__ = ()

    def __new__(cls, name, labels=None, tests=()):
        return super().__new__(cls, name, dict(labels or {}), tuple(tests))

    def __str__(self):
        return "%s%s" % (self.name, format_labels(self.labels) if self.labels else "")


def expect_metric(families, expectation):
    """
    Returns None if at least one sample selected by `expectation` satisfies
    all of its tests, otherwise a description of what was observed.
    """
    family = get_family(families, expectation.name)
    if family is None:
        return "metric %s not found" % expectation
    samples = [s for s in find_samples_with_labels(family, expectation.labels) if _is_counter_value(s)]
    if not samples:
        return "no samples of %s" % expectation
    for sample in samples:
        if all(t.passes(sample.value) for t in expectation.tests):
            return None
    return "%s expected %s, got %s" % (
        expectation,
        " and ".join(str(t) for t in expectation.tests),
        ", ".join(format_sample(s) for s in samples),
    )
