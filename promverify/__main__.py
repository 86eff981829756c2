import argparse
import logging
import sys

from promverify import config
from promverify.client import PrometheusClient
from promverify.errors import ConfigError, PollTimeout
from promverify.verifier import Verifier

logger = logging.getLogger("promverify")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="promverify", description="Wait for a Prometheus server to scrape the expected targets and series"
    )
    parser.add_argument("--scenario", help="YAML scenario file.  Defaults to the standard OpenShift target checks.")
    parser.add_argument("--url", help="Base URL of the Prometheus server (default: %s)" % config.PROMETHEUS_URL)
    parser.add_argument("--token", default=config.BEARER_TOKEN, help="Bearer token for the Prometheus API")
    parser.add_argument("--timeout", type=float, help="Seconds to keep polling before giving up")
    parser.add_argument("--interval", type=float, help="Seconds between polls")
    parser.add_argument("--verify-tls", action="store_true", default=config.VERIFY_TLS)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        if args.scenario:
            scenario = config.load_scenario(args.scenario)
        else:
            scenario = config.Scenario(targets=config.DEFAULT_TARGET_EXPECTATIONS)
        if scenario.empty:
            raise ConfigError("scenario has nothing to check")

        client = PrometheusClient(
            args.url or scenario.url or config.PROMETHEUS_URL, bearer_token=args.token, verify=args.verify_tls
        )
        Verifier(client, scenario).verify(interval_seconds=args.interval, timeout_seconds=args.timeout)
    except (ConfigError, OSError) as e:
        logger.error("%s", e)
        return 2
    except PollTimeout as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
