"""Command-line entry point.

Usage:
    python -m ksense_assessment [--dry-run] [--pages N] [--limit N]
                                [--dedupe first|last] [--api-key KEY]
                                [--base-url URL] [--debug]

The API key is read from KSENSE_API_KEY (or API_KEY), optionally via a
.env file in the working directory.
"""

import argparse
import json
import logging
import sys
import time

from ksense_assessment.classifier import build_report
from ksense_assessment.client import PatientApiClient
from ksense_assessment.collector import collect_patients
from ksense_assessment.config import DEDUPE_POLICIES, ConfigError, load_settings

logger = logging.getLogger("ksense_assessment")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="ksense-assessment",
        description="Fetch patients, score their risk, and submit the assessment.",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the payload instead of submitting it")
    parser.add_argument("--pages", type=int, help="Number of pages to sweep (default 10)")
    parser.add_argument("--limit", type=int, help="Records per page (default 5)")
    parser.add_argument("--dedupe", choices=DEDUPE_POLICIES, help="Which record wins for a repeated patient ID")
    parser.add_argument("--api-key", help="API key override")
    parser.add_argument("--base-url", help="API base URL override")
    parser.add_argument("--env-file", help="Path to a .env file")
    parser.add_argument("--debug", action="store_true")
    return parser


def main(argv=None, session=None, sleep=time.sleep):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO,
                        format="%(levelname)s: %(message)s")

    try:
        settings = load_settings(args.env_file).with_overrides(
            api_key=args.api_key,
            base_url=args.base_url.rstrip("/") if args.base_url else None,
            total_pages=args.pages,
            page_limit=args.limit,
            dedupe=args.dedupe,
        )
    except ConfigError as e:
        logger.error("configuration error: %s", e)
        return 2

    if not settings.api_key:
        logger.error("no API key set; export KSENSE_API_KEY or pass --api-key")
        return 2

    client = PatientApiClient(settings, session=session, sleep=sleep)

    print("Fetching patients...")
    patients = collect_patients(client, settings)
    print(f"Got {len(patients)} patients")

    print("Scoring")
    report = build_report(patients)
    print("Counts:", report.counts())

    if args.dry_run:
        print(json.dumps(report.to_payload(), indent=2))
        return 0

    print("Submitting")
    resp = client.submit_report(report.to_payload())
    if resp is None:
        print("Submission failed, see log for details")
    else:
        print("Server response:")
        print(json.dumps(resp, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
