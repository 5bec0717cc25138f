#!/usr/bin/env python3
"""CLI script to preview a contract's execution flow.

Usage:
    python -m contractflow.analysis.analyze_contract <artifact.json> <source file>

    # or with JSON output including layout positions
    python -m contractflow.analysis.analyze_contract <artifact.json> <source file> --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from contractflow.analysis.execution_preview import flow_to_dict, format_preview
from contractflow.config import LayoutSettings
from contractflow.models.artifact import ArtifactLoadError, load_artifact
from contractflow.sdk.flow_extractor import extract_flow
from contractflow.sdk.graph_layout import layout_flow


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract the execution flow of a compiled contract and print a preview."
    )
    parser.add_argument(
        "artifact",
        type=Path,
        help="path to the compiler artifact JSON",
    )
    parser.add_argument(
        "source",
        type=Path,
        help="path to the contract source the artifact was compiled from",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="output nodes, edges, steps and positions as JSON",
    )
    parser.add_argument(
        "--security-score",
        type=float,
        default=1.0,
        help="audit score shown in the preview header (default: 1.0)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="log scan details to stderr",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.source.exists():
        print(f"Error: source file not found: {args.source}", file=sys.stderr)
        return 1

    try:
        artifact = load_artifact(args.artifact)
    except ArtifactLoadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    source_code = args.source.read_text()
    flow = extract_flow(artifact, source_code)

    if args.json:
        layout = layout_flow(flow, LayoutSettings.from_env())
        print(json.dumps(flow_to_dict(flow, layout), indent=2))
    else:
        print(format_preview(flow.ordered_steps, args.security_score))
    return 0


if __name__ == "__main__":
    sys.exit(main())
