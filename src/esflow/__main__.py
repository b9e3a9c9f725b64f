"""Command line entry point: build control flow graphs for an ESTree JSON file."""

import argparse
import json
import sys

from loguru import logger

from . import __version__
from .codeviews.CFG.CFG_driver import parse
from .errors import ESFlowError
from .utils.postprocessor import export_program


def build_arg_parser():
    parser = argparse.ArgumentParser(
        prog="esflow",
        description="Build control flow graphs from an ESTree program",
    )
    parser.add_argument("--version", action="version", version=f"esflow {__version__}")
    parser.add_argument("input", help="ESTree JSON file (a Program node)")
    parser.add_argument("--format", default="dot", choices=["dot", "json"], help="output format")
    parser.add_argument("--output", "-o", help="write the result to this file instead of stdout")
    parser.add_argument(
        "--no-transit-removal",
        action="store_true",
        help="keep nodes with a single incoming and outgoing edge",
    )
    parser.add_argument(
        "--no-constant-folding",
        action="store_true",
        help="keep conditional edges guarded by literals",
    )
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    options = {
        "passes": {
            "removeTransitNodes": not args.no_transit_removal,
            "rewriteConstantConditionalEdges": not args.no_constant_folding,
        }
    }

    try:
        with open(args.input) as f:
            program = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read {}: {}", args.input, e)
        return 1

    try:
        flow_program = parse(program, options)
    except ESFlowError as e:
        logger.error("Could not build control flow graph: {}", e)
        return 1

    output = export_program(flow_program, args.format)

    if args.output:
        with open(args.output, "w") as f:
            f.write(output + "\n")
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
