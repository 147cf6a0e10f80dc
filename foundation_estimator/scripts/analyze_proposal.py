"""
Analyze a saved proposal record and print its job costing as JSON.

Reads a proposal exported from the persistence layer (camelCase JSON),
validates it, and prints the cost breakdown. Useful for checking how the
volume engine read each line without opening the app.

Usage:
  python -m foundation_estimator.scripts.analyze_proposal proposal.json
  python -m foundation_estimator.scripts.analyze_proposal proposal.json --lines --out costs.json
  cat proposal.json | python -m foundation_estimator.scripts.analyze_proposal -
"""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

import structlog

from foundation_estimator.config.errors import ValidationError
from foundation_estimator.services.aggregator import line_volumes
from foundation_estimator.services.cost_report import build_cost_report
from foundation_estimator.services.costing import compute_costs
from foundation_estimator.utils.log_config import configure_logging
from foundation_estimator.validators.proposal_validator import validate_proposal

logger = structlog.get_logger(__name__)


def _load(path: str) -> Any:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def analyze(data: Dict[str, Any], include_lines: bool = False, include_report: bool = False) -> Dict[str, Any]:
    """Cost breakdown (and optional per-line detail) for a proposal record.

    Raises:
        ValidationError: If the record does not parse as a proposal
    """
    result = validate_proposal(data)
    if not result.is_valid:
        raise ValidationError(
            message="Proposal record is invalid",
            details={"errors": result.errors},
        )
    proposal = result.parsed

    output: Dict[str, Any] = {
        "proposalId": proposal.id,
        "builder": proposal.builder,
        "costs": compute_costs(proposal).to_dict(),
        "warnings": result.warnings,
    }
    if include_lines:
        output["lines"] = {
            "footingWallLines": [asdict(v) for v in line_volumes(proposal.footing_wall_lines)],
            "slabLines": [asdict(v) for v in line_volumes(proposal.slab_lines)],
        }
    if include_report:
        output["report"] = build_cost_report(proposal).to_dict()
    return output


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print the job costing for a proposal JSON record")
    parser.add_argument("path", help="Proposal JSON file ('-' reads stdin)")
    parser.add_argument("--out", required=False, help="Write JSON here instead of stdout")
    parser.add_argument("--lines", action="store_true", help="Include per-line volume detail")
    parser.add_argument("--report", action="store_true", help="Include cost analysis report data")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    try:
        data = _load(args.path)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("proposal_load_failed", path=args.path, error=str(e))
        print(f"Could not read {args.path}: {e}", file=sys.stderr)
        return 2

    try:
        output = analyze(data, include_lines=args.lines, include_report=args.report)
    except ValidationError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1

    text = json.dumps(output, indent=2, ensure_ascii=False)
    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        print(f"Wrote {args.out}")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
