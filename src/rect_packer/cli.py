from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from rect_packer.config import ITERATION_PRESETS, LOG_LEVELS, Settings, get_iteration_budget
from rect_packer.io.schemas import PackingRequest
from rect_packer.packing.heuristics import SelectionCriterion
from rect_packer.search.initial import InitialSolutionKind
from rect_packer.search.neighborhoods import NeighborhoodKind
from rect_packer.solver import compare, solve

logger = logging.getLogger(__name__)


def load_input(path: Path) -> dict:
    """
    Read an instance file.

    Accepted format:
        {"bin_side": 100, "rectangles": [{"width": 40, "height": 30, "quantity": 2}, ...]}
    "box_size" is accepted as an alias for "bin_side", and "w"/"h"/"qty"
    for the rectangle fields.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Input must be a JSON object")

    if "bin_side" not in data and "box_size" in data:
        data["bin_side"] = data.pop("box_size")
    if "bin_side" not in data:
        raise ValueError("Input must include 'bin_side'")

    raw = data.get("rectangles", [])
    if not isinstance(raw, list):
        raise ValueError("'rectangles' must be a list")

    rectangles = []
    for i, r in enumerate(raw):
        if not isinstance(r, dict):
            raise ValueError(f"Rectangle entry {i} must be an object, got {type(r).__name__}")
        rectangles.append({
            "width": r.get("width", r.get("w")),
            "height": r.get("height", r.get("h")),
            "quantity": r.get("quantity", r.get("qty", 1)),
        })
    data["rectangles"] = rectangles
    return data


def build_request(data: dict, args: argparse.Namespace, settings: Settings) -> PackingRequest:
    if args.iterations is not None:
        max_iterations = args.iterations
    elif args.preset is not None:
        max_iterations = get_iteration_budget(args.preset)
    else:
        max_iterations = data.get("max_iterations", settings.max_iterations)

    return PackingRequest(
        rectangles=data["rectangles"],
        bin_side=data["bin_side"],
        criterion=args.criterion or data.get("criterion", SelectionCriterion.AREA),
        neighborhood=args.neighborhood or data.get("neighborhood"),
        initial=args.initial or data.get("initial", InitialSolutionKind.GREEDY),
        max_iterations=max_iterations,
        seed=args.seed if args.seed is not None else data.get("seed", settings.seed),
        early_stop_fraction=settings.early_stop_fraction,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rectangle bin packing CLI")
    parser.add_argument("--input", required=True, help="Input instance JSON file")
    parser.add_argument(
        "--criterion",
        choices=[c.value for c in SelectionCriterion],
        help="Greedy ordering: area = largest area first, height = tallest first",
    )
    parser.add_argument(
        "--neighborhood",
        choices=[k.value for k in NeighborhoodKind],
        help="Run local search with this neighborhood (greedy only when omitted)",
    )
    parser.add_argument(
        "--initial",
        choices=[k.value for k in InitialSolutionKind],
        help="Local search start: greedy packing, or naive (one rectangle per bin)",
    )
    budget = parser.add_mutually_exclusive_group()
    budget.add_argument("--iterations", type=int, help="Local search iteration budget")
    budget.add_argument("--preset", choices=sorted(ITERATION_PRESETS), help="Named iteration budget")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible runs")
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Run greedy and local search and print both results",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default from RECT_PACKER_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValidationError as e:
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        data = load_input(Path(args.input))
        request = build_request(data, args, settings)
        if args.compare:
            output = compare(request).model_dump()
        else:
            output = solve(request).model_dump()
    except (OSError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
