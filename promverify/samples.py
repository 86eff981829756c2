"""
Data model for a decoded metrics exposition snapshot.

The wire format itself is handled by prometheus_client's text parser; this
module only turns its output into plain immutable families and samples.
"""
from collections import namedtuple

from prometheus_client.parser import text_string_to_metric_families

from promverify.errors import MalformedInput


class Labels(dict):
    """
    A label predicate: the label name/value pairs a sample or target must
    carry.  Ordering is not significant and an empty predicate matches
    everything.
    """

    def with_label(self, name, value):
        """
        Returns a copy of this predicate with `name` set to `value`
        """
        new = Labels(self)
        new[name] = value
        return new

    def __repr__(self):
        return "Labels(%s)" % dict.__repr__(self)


Sample = namedtuple("Sample", ["name", "labels", "value"])

MetricFamily = namedtuple("MetricFamily", ["name", "type", "documentation", "samples"])


def families_from_text(text):
    """
    Decodes a Prometheus text exposition payload into a dict mapping family
    name to MetricFamily.  Raises MalformedInput if the payload can't be
    parsed.
    """
    families = {}
    try:
        for fam in text_string_to_metric_families(text):
            families[fam.name] = MetricFamily(
                name=fam.name,
                type=fam.type,
                documentation=fam.documentation,
                samples=tuple(Sample(s.name, dict(s.labels), s.value) for s in fam.samples),
            )
    except (ValueError, TypeError, IndexError) as e:
        raise MalformedInput("unable to parse metrics exposition: %s" % e, cause=e)
    return families


def get_family(families, name):
    """
    Looks up a family by the name used in the exposition.  Counter families
    are stored without their `_total` suffix, so `requests_total` and
    `requests` both find the counter.  Returns None if absent.
    """
    if not families:
        return None
    family = families.get(name)
    if family is None and name.endswith("_total"):
        family = families.get(name[: -len("_total")])
    return family
