"""Command line entry point for SafeShield."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from .analysis import consolidate_analysis_results, get_overall_status
from .config import load_config, validate_config
from .similarity import SimilarityConfig, detect_similar_addresses

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr),
    ],
)
logger = logging.getLogger(__name__)


def _read_json(path: Path) -> dict:
    data = json.loads(path.read_text())
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return data


def run_status(path: Path) -> dict:
    """Overall verdict plus consolidated recipient/contract summaries for a JSON dump."""
    data = _read_json(path)
    recipient = data.get("recipient") or {}
    contract = data.get("contract") or {}
    threat = data.get("threat") or {}

    overall = get_overall_status(
        recipient_results=recipient,
        contract_results=contract,
        threat_results=threat,
        has_simulation_error=bool(data.get("hasSimulationError")),
        auth_required=bool(data.get("authRequired")),
    )

    return {
        "overall": overall.to_dict() if overall else None,
        "recipient": [r.to_dict() for r in consolidate_analysis_results(recipient)],
        "contract": [r.to_dict() for r in consolidate_analysis_results(contract)],
    }


def run_similar(addresses: list[str], config: SimilarityConfig) -> dict:
    result = detect_similar_addresses(addresses, config)
    return {
        "groups": [
            {"bucketKey": group.bucket_key, "addresses": group.addresses}
            for group in result.groups
        ]
    }


def _read_addresses(args) -> list[str]:
    addresses = list(args.addresses or [])
    if args.file:
        for line in Path(args.file).read_text().splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                addresses.append(line)
    return addresses


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safeshield",
        description="Pre-signature transaction risk analysis",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Compute the overall verdict for saved analysis results")
    status.add_argument("path", type=Path, help="JSON file with recipient, contract and threat maps")

    similar = subparsers.add_parser("similar", help="Find look-alike addresses")
    similar.add_argument("addresses", nargs="*", help="Addresses to compare")
    similar.add_argument("--file", type=Path, help="File with one address per line")
    similar.add_argument("--prefix", type=int, default=None, help="Prefix length")
    similar.add_argument("--suffix", type=int, default=None, help="Suffix length")
    similar.add_argument("--threshold", type=int, default=None, help="Maximum Hamming distance")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config = load_config()

    errors = validate_config(config)
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        return 2

    try:
        if args.command == "status":
            output = run_status(args.path)
        else:
            similarity = SimilarityConfig(
                prefix_length=config.similarity.prefix_length if args.prefix is None else args.prefix,
                suffix_length=config.similarity.suffix_length if args.suffix is None else args.suffix,
                hamming_threshold=(
                    config.similarity.hamming_threshold if args.threshold is None else args.threshold
                ),
            )
            output = run_similar(_read_addresses(args), similarity)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to run {args.command}: {e}")
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
