import json

import pytest
from promverify.errors import MalformedInput, PatternError
from promverify.samples import Labels
from promverify.targets import ActiveTarget, Expectation, TargetList, all_failures, evaluate
from tests.helpers.fakes import TARGETS_DOC


def _targets(*targets):
    return TargetList("success", [ActiveTarget(l, h, u) for l, h, u in targets])


def test_decode_targets_response():
    targets = TargetList.from_json(json.dumps(TARGETS_DOC))

    assert targets.status == "success"
    assert len(targets) == 4
    assert targets.active_targets[0] == ActiveTarget(
        {"job": "apiserver", "namespace": "default"}, "up", "https://10.0.0.1:6443/metrics"
    )


def test_decode_missing_sections_is_empty():
    assert len(TargetList.from_dict({})) == 0
    assert len(TargetList.from_dict({"status": "success", "data": {}})) == 0
    assert len(TargetList.from_json('{"status": "success", "data": {"activeTargets": null}}')) == 0


@pytest.mark.parametrize("body", ["<html>503</html>", "[1, 2]", '{"data": {"activeTargets": [1]}}', ""])
def test_decode_malformed_targets(body):
    with pytest.raises(MalformedInput):
        TargetList.from_json(body)


def test_single_target_up():
    targets = _targets(({"job": "x"}, "up", "https://h/metrics"))
    assert targets.expect({"job": "x"}, "up", "^https://.*/metrics$") is None


def test_wrong_health_names_the_job():
    targets = _targets(({"job": "x"}, "up", "https://h/metrics"))

    reason = targets.expect({"job": "x"}, "down", "^https://.*/metrics$")

    assert reason is not None
    assert 'job="x"' in reason
    assert "down" in reason
    assert "^https://.*/metrics$" in reason


def test_health_is_compared_exactly():
    targets = _targets(({"job": "x"}, "up", "https://h/metrics"))
    assert targets.expect({"job": "x"}, "UP", ".*") is not None
    assert targets.expect({"job": "x"}, "", ".*") is not None


def test_extra_target_labels_are_ignored(targets):
    assert targets.expect({"job": "apiserver"}, "up", "^https://.*/metrics$") is None
    assert targets.expect({"job": "apiserver", "namespace": "kube-system"}, "up", ".*") is not None


def test_empty_predicate_matches_any_target(targets):
    assert targets.expect({}, "down", "^http://") is None


def test_only_one_url_needs_to_match(targets):
    assert targets.expect(Labels(job="kubelet"), "up", "^https://.*/metrics/cadvisor$") is None
    assert targets.expect(Labels(job="kubelet"), "up", "^https://.*/metrics$") is None


def test_target_order_does_not_matter():
    first = ({"job": "k"}, "up", "https://n/metrics/cadvisor")
    second = ({"job": "k"}, "up", "https://n/metrics")
    for targets in (_targets(first, second), _targets(second, first)):
        assert targets.expect({"job": "k"}, "up", "^https://.*/metrics$") is None


def test_all_conditions_must_hold_on_the_same_target():
    targets = _targets(
        ({"job": "k"}, "down", "https://n/metrics"),
        ({"job": "k"}, "up", "http://n/metrics"),
    )
    assert targets.expect({"job": "k"}, "up", "^https://.*/metrics$") is not None


def test_pattern_is_searched_not_anchored():
    targets = _targets(({"job": "x"}, "up", "https://h/metrics/cadvisor"))
    assert targets.expect({"job": "x"}, "up", "/metrics") is None
    assert targets.expect({"job": "x"}, "up", "/metrics$") is not None


def test_missing_predicate_matches_any_target(targets):
    assert targets.expect(None, "up", "^https://.*/metrics$") is None


def test_no_targets():
    assert TargetList().expect({"job": "x"}, "up", ".*") is not None


def test_invalid_pattern_raises(targets):
    with pytest.raises(PatternError) as excinfo:
        targets.expect({"job": "apiserver"}, "up", "^https://(.*/metrics$")
    assert excinfo.value.pattern == "^https://(.*/metrics$"


def test_invalid_pattern_raises_with_no_targets():
    with pytest.raises(PatternError):
        TargetList().expect({}, "up", "[")


def test_all_failures():
    assert all_failures(None, "a", None, "b") == ["a", "b"]
    assert all_failures() == []


def test_evaluate_reports_every_failure(targets):
    expectations = [
        Expectation(Labels(job="apiserver"), "up", "^https://.*/metrics$"),
        Expectation(Labels(job="scheduler"), "up", "^http://.*/metrics$"),
        Expectation(Labels(job="kubelet"), "up", "^https://.*/metrics/cadvisor$"),
        Expectation(Labels(job="node-exporter"), "up", "^https://.*/metrics$"),
        Expectation(Labels(job="kube-state-metrics"), "up", "^https://.*/metrics$"),
    ]

    failures = evaluate(targets, expectations)

    assert len(failures) == 3
    assert 'job="scheduler"' in failures[0]
    assert 'job="node-exporter"' in failures[1]
    assert 'job="kube-state-metrics"' in failures[2]


def test_evaluate_all_met(targets):
    assert evaluate(targets, [Expectation({"job": "apiserver"}, "up", "^https://")]) == []
    assert evaluate(targets, []) == []
