#!/usr/bin/env python3
"""
Run one credit report exchange against the configured bureau gateway.

- loads the application document from YAML or JSON
- signs and sends it, verifies and decodes the reply
- prints the result code/text and optionally dumps the report sections

Exit codes: 0 on a decoded reply (whatever its responsecode), 1 on any
exchange failure, 130 when interrupted.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent))

load_dotenv()

from equifax_credit.contracts.application import ApplicationDocument
from equifax_credit.contracts.envelopes import ReportResponse
from equifax_credit.credit_client import CreditReportClient
from equifax_credit.errors import CreditExchangeError, UnverifiableReplyError
from equifax_credit.utils.config_loader import load_client_config


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def load_document(path: Path) -> ApplicationDocument:
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    return ApplicationDocument.model_validate(data)


def dump_sections(response: ReportResponse, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, section in response.sections().items():
        path = out_dir / f"{name}.xml"
        path.write_bytes(section.raw)
        print(f"  wrote {path} ({len(section.raw)} bytes, {section.encoding})")


def main() -> int:
    parser = argparse.ArgumentParser(description="Send a credit report request to the bureau gateway")
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to client config YAML file (default: config/equifax_credit.yml)",
    )
    parser.add_argument("--request", type=Path, required=True, help="Application document (YAML or JSON)")
    parser.add_argument("--dump-reply", type=Path, default=None, help="Directory to write the report sections to")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()
    setup_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_client_config(args.config)
        client = CreditReportClient.from_config(config)
        document = load_document(args.request)

        response = client.exchange(document)

        print(f"Response code: {response.code} ({response.outcome.value})")
        print(f"Response text: {response.text}")
        if args.dump_reply:
            dump_sections(response, args.dump_reply)
        return 0
    except KeyboardInterrupt:
        logger.warning("Exchange interrupted by user")
        return 130
    except UnverifiableReplyError as e:
        print(f"Error: {e}")
        if e.response_text is not None:
            print(f"Bureau said: {e.response_text}")
        return 1
    except CreditExchangeError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error("Error during exchange: %s: %s", type(e).__name__, str(e), exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
