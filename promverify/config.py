"""
Runtime defaults and scenario files.

A scenario is a YAML document describing the targets and series that must show
up on a Prometheus server, e.g.:

    url: https://prometheus-k8s.openshift-monitoring.svc:9091
    timeoutSeconds: 120
    targets:
      - labels: {job: apiserver}
        health: up
        scrapeUrl: ^https://.*/metrics$
    metrics:
      - name: federate_samples
        labels: {job: telemeter-client}
        value: 10
        greaterThanEqual: true
    advancingCounters:
      - [tsdb_samples_appended_total, prometheus_tsdb_head_samples_appended_total]
"""
import logging
import os

import yaml

from promverify.assertions import MetricExpectation, MetricTest
from promverify.errors import ConfigError, PatternError
from promverify.samples import Labels
from promverify.targets import Expectation, compile_pattern

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = int(os.environ.get("PROMVERIFY_TIMEOUT", 240))
DEFAULT_INTERVAL = float(os.environ.get("PROMVERIFY_INTERVAL", 10))
PROMETHEUS_URL = os.environ.get("PROMVERIFY_PROMETHEUS_URL", "https://prometheus-k8s.openshift-monitoring.svc:9091")
BEARER_TOKEN = os.environ.get("PROMVERIFY_BEARER_TOKEN")
VERIFY_TLS = os.environ.get("PROMVERIFY_VERIFY_TLS", "").lower() in ("1", "true", "yes")

# Every job an OpenShift monitoring stack should be scraping
DEFAULT_TARGET_EXPECTATIONS = (
    Expectation(Labels(job="apiserver"), "up", "^https://.*/metrics$"),
    Expectation(Labels(job="scheduler"), "up", "^http://.*/metrics$"),
    Expectation(Labels(job="kube-controller-manager"), "up", "^http://.*/metrics$"),
    Expectation(Labels(job="kube-state-metrics"), "up", "^https://.*/metrics$"),
    Expectation(Labels(job="cluster-version-operator"), "up", "^http://.*/metrics$"),
    Expectation(
        Labels(job="prometheus-k8s", namespace="openshift-monitoring", pod="prometheus-k8s-0"),
        "up",
        "^https://.*/metrics$",
    ),
    Expectation(Labels(job="kubelet"), "up", "^https://.*/metrics$"),
    Expectation(Labels(job="kubelet"), "up", "^https://.*/metrics/cadvisor$"),
    Expectation(Labels(job="node-exporter"), "up", "^https://.*/metrics$"),
)

SCENARIO_KEYS = {"url", "timeoutSeconds", "intervalSeconds", "targets", "metrics", "advancingCounters"}
TARGET_KEYS = {"labels", "health", "scrapeUrl"}
METRIC_KEYS = {"name", "labels", "value", "greaterThanEqual"}


class Scenario:
    """
    Everything that has to hold on a Prometheus server for it to be considered
    healthy
    """

    def __init__(
        self,
        url=None,
        timeout_seconds=DEFAULT_TIMEOUT,
        interval_seconds=DEFAULT_INTERVAL,
        targets=(),
        metrics=(),
        advancing_counters=(),
    ):
        self.url = url
        self.timeout_seconds = timeout_seconds
        self.interval_seconds = interval_seconds
        self.targets = tuple(targets)
        self.metrics = tuple(metrics)
        self.advancing_counters = tuple(tuple(names) for names in advancing_counters)

    @classmethod
    def from_yaml(cls, text):
        try:
            doc = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError("scenario is not valid YAML: %s" % e)
        return cls.from_dict(doc or {})

    @classmethod
    def from_dict(cls, doc):
        if not isinstance(doc, dict):
            raise ConfigError("scenario must be a mapping, got %s" % type(doc).__name__)
        _check_keys("scenario", doc, SCENARIO_KEYS)

        return cls(
            url=doc.get("url"),
            timeout_seconds=_number(doc, "timeoutSeconds", DEFAULT_TIMEOUT),
            interval_seconds=_number(doc, "intervalSeconds", DEFAULT_INTERVAL),
            targets=[_target_from_dict(t) for t in doc.get("targets") or []],
            metrics=[_metric_from_dict(m) for m in doc.get("metrics") or []],
            advancing_counters=[_counter_names(names) for names in doc.get("advancingCounters") or []],
        )

    @property
    def empty(self):
        return not (self.targets or self.metrics or self.advancing_counters)


def load_scenario(path):
    with open(path, "r", encoding="utf-8") as fd:
        scenario = Scenario.from_yaml(fd.read())
    logger.debug(
        "Loaded scenario %s: %d targets, %d metrics, %d counters",
        path,
        len(scenario.targets),
        len(scenario.metrics),
        len(scenario.advancing_counters),
    )
    return scenario


def _check_keys(what, doc, allowed):
    unknown = set(doc) - allowed
    if unknown:
        raise ConfigError("unknown %s keys: %s" % (what, ", ".join(sorted(unknown))))


def _number(doc, key, default):
    value = doc.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError("%s must be a non-negative number, got %r" % (key, value))
    return value


def _labels(what, value):
    if value is None:
        return Labels()
    if not isinstance(value, dict):
        raise ConfigError("%s labels must be a mapping, got %r" % (what, value))
    return Labels({str(k): _label_value(what, k, v) for k, v in value.items()})


def _label_value(what, name, value):
    # YAML reads true/yes/on as booleans; Prometheus renders them lowercase
    if isinstance(value, bool):
        return "true" if value else "false"
    if not isinstance(value, (str, int, float)):
        raise ConfigError("%s label %s must be a string or number, got %r" % (what, name, value))
    return str(value)


def _target_from_dict(doc):
    if not isinstance(doc, dict):
        raise ConfigError("target expectation must be a mapping, got %r" % (doc,))
    _check_keys("target", doc, TARGET_KEYS)
    for key in ("health", "scrapeUrl"):
        if not isinstance(doc.get(key), str):
            raise ConfigError("target expectation is missing %s: %r" % (key, doc))
    try:
        compile_pattern(doc["scrapeUrl"])
    except PatternError as e:
        raise ConfigError(str(e))
    return Expectation(_labels("target", doc.get("labels")), doc["health"], doc["scrapeUrl"])


def _metric_from_dict(doc):
    if not isinstance(doc, dict):
        raise ConfigError("metric expectation must be a mapping, got %r" % (doc,))
    _check_keys("metric", doc, METRIC_KEYS)
    if not isinstance(doc.get("name"), str):
        raise ConfigError("metric expectation is missing name: %r" % (doc,))
    tests = []
    if "value" in doc:
        value = doc["value"]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError("metric %s value must be a number, got %r" % (doc["name"], value))
        tests.append(MetricTest(value, greater_than_equal=bool(doc.get("greaterThanEqual", False))))
    return MetricExpectation(doc["name"], _labels("metric", doc.get("labels")), tests)


def _counter_names(names):
    if isinstance(names, str):
        return (names,)
    if not isinstance(names, list) or not names or not all(isinstance(n, str) for n in names):
        raise ConfigError("advancingCounters entries must be a name or a list of names, got %r" % (names,))
    return tuple(names)
