from promverify.formatting import format_labels, format_sample
from promverify.samples import Sample


def test_format_labels_sorted():
    assert format_labels({"pod": "p-0", "job": "x"}) == '{job="x", pod="p-0"}'
    assert format_labels({}) == "{}"


def test_format_sample():
    assert format_sample(Sample("up", {"job": "x"}, 1.0)) == 'up{job="x"} = 1'
    assert format_sample(Sample("temperature", {}, 21.5)) == "temperature = 21.5"
