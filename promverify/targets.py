"""
Checks against the active target list reported by the Prometheus
/api/v1/targets endpoint
"""
import json
import re
from collections import namedtuple

from promverify.assertions import has_all_labels
from promverify.errors import MalformedInput, PatternError
from promverify.formatting import format_labels

ActiveTarget = namedtuple("ActiveTarget", ["labels", "health", "scrape_url"])

Expectation = namedtuple("Expectation", ["labels", "health", "scrape_url_pattern"])


def compile_pattern(pattern):
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternError(pattern, e)


class TargetList:
    """A point-in-time view of the active targets"""

    def __init__(self, status="", active_targets=()):
        self.status = status
        self.active_targets = tuple(active_targets)

    @classmethod
    def from_json(cls, text):
        try:
            doc = json.loads(text)
        except ValueError as e:
            raise MalformedInput("targets response is not valid JSON: %s" % e, cause=e)
        return cls.from_dict(doc)

    @classmethod
    def from_dict(cls, doc):
        if not isinstance(doc, dict):
            raise MalformedInput("targets response must be an object, got %s" % type(doc).__name__)
        try:
            targets = [
                ActiveTarget(
                    labels=dict(t.get("labels") or {}),
                    health=t.get("health", ""),
                    scrape_url=t.get("scrapeUrl", ""),
                )
                for t in (doc.get("data") or {}).get("activeTargets") or []
            ]
        except (AttributeError, TypeError, ValueError) as e:
            raise MalformedInput("unexpected targets response shape: %s" % e, cause=e)
        return cls(status=doc.get("status", ""), active_targets=targets)

    def expect(self, labels, health, scrape_url_pattern):
        """
        Returns None if some active target has all of `labels`, the given
        health, and a scrape URL matched by `scrape_url_pattern`.  Otherwise
        returns the reason no target matched.

        The pattern is searched for anywhere in the URL, so anchor it with ^
        and $ to match the whole thing.
        """
        regex = compile_pattern(scrape_url_pattern)
        for target in self.active_targets:
            if not has_all_labels(target.labels, labels or {}):
                continue
            if target.health != health:
                continue
            if not regex.search(target.scrape_url):
                continue
            return None
        return "no match for %s with health %s and scrape URL %s" % (format_labels(labels), health, scrape_url_pattern)

    def __len__(self):
        return len(self.active_targets)

    def __repr__(self):
        return "TargetList(status=%r, %d active targets)" % (self.status, len(self.active_targets))


def all_failures(*results):
    """
    Collects the failure reasons out of a set of check results, dropping the
    ones that passed
    """
    return [r for r in results if r is not None]


def evaluate(snapshot, expectations):
    """
    Checks every expectation against the same snapshot and returns the reasons
    for the ones that failed.  An empty list means they all hold.
    """
    return all_failures(*[snapshot.expect(*e) for e in expectations])
