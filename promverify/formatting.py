def format_labels(labels):
    """
    Formats a label set the way Prometheus selectors read:
    {<name>="<value>", ...}, sorted by label name
    """
    if not labels:
        return "{}"
    return "{" + ", ".join('%s="%s"' % (k, labels[k]) for k in sorted(labels)) + "}"


def format_sample(sample):
    """
    Formats a sample in the format:
    <sample_name>{<label_name>="<label_value>", ...} = <value>
    """
    return "%s%s = %s" % (sample.name, format_labels(sample.labels) if sample.labels else "", _pretty_value(sample.value))


def _pretty_value(value):
    if float(value).is_integer():
        return str(int(value))
    return str(value)
