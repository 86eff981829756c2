import logging

import requests

from promverify.errors import ConfigError
from promverify.samples import families_from_text
from promverify.targets import TargetList

logger = logging.getLogger(__name__)


class PrometheusClient:
    """
    Fetches the raw payloads that get verified.  This is the only part of the
    package that does network I/O; decoding is done by the samples and targets
    modules.
    """

    def __init__(self, url, bearer_token=None, verify=False, timeout=10, session=None):
        self.url = url.rstrip("/")
        self.bearer_token = bearer_token
        self.verify = verify
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path, authenticated=False):
        headers = {}
        if authenticated:
            if not self.bearer_token:
                raise ConfigError("a bearer token is required for %s" % path)
            headers["Authorization"] = "Bearer %s" % self.bearer_token
        url = "%s/%s" % (self.url, path.lstrip("/"))
        logger.debug("GET %s", url)
        return self.session.get(url, headers=headers, verify=self.verify, timeout=self.timeout)

    def get_metrics_text(self):
        """
        Returns the unauthenticated /metrics exposition of the server itself
        """
        resp = self._get("/metrics")
        resp.raise_for_status()
        return resp.text

    def get_metrics(self):
        return families_from_text(self.get_metrics_text())

    def get_targets(self):
        """
        Returns the TargetList reported by /api/v1/targets
        """
        resp = self._get("/api/v1/targets", authenticated=True)
        resp.raise_for_status()
        return TargetList.from_json(resp.text)

    def status_code(self, path, authenticated=False):
        return self._get(path, authenticated=authenticated).status_code

    def expect_status_code(self, path, status, authenticated=False):
        """
        Returns None if requesting `path` gives back `status`, otherwise the
        reason it didn't
        """
        actual = self.status_code(path, authenticated=authenticated)
        if actual != status:
            return "last response from %s%s was not %d: %d" % (self.url, path, status, actual)
        return None
