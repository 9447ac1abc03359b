import argparse
import logging
import sys
from typing import List, Optional

from bin_inspector import config
from bin_inspector.errors import InspectionError

logger = logging.getLogger(__name__)


def _setup_logging(level: Optional[str] = None) -> None:
    settings = config.logging_settings()
    logging.basicConfig(
        level=(level or settings.get("level", "INFO")).upper(),
        format=settings.get("format", "%(levelname)s %(name)s: %(message)s"),
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bin-inspector",
        description="Report anti-debugging instrumentation, control-flow flattening and optimization level of a binary",
    )
    parser.add_argument("-f", "--file", type=str, help="Path to the binary to inspect")
    parser.add_argument("-t", "--train", type=str, metavar="DATASET", help="Train the optimization classifier on a dataset")
    parser.add_argument("-b", "--backend", choices=["radare2", "rizin"], help="Analysis backend (default: config.yaml / $BI_BACKEND)")
    parser.add_argument("--top", type=int, help="Number of highest-complexity functions to sample")
    parser.add_argument("--log-level", type=str, help="Logging level (default: config.yaml)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.log_level)

    if args.train:
        logger.error(f"Training is done by the separate training tool, not by bin-inspector (dataset: {args.train})")
        return 2
    if not args.file:
        build_parser().print_usage(sys.stderr)
        return 2

    # Imported here so --help does not pay for loading torch
    from bin_inspector.inspector import inspect
    from bin_inspector.ml.classifier import LstmOptimizationClassifier

    try:
        classifier = LstmOptimizationClassifier.from_assets()
        sample = inspect(args.file, classifier, engine_hint=args.backend, top=args.top)
    except InspectionError as e:
        logger.error(f"Inspection of {args.file} failed: {e}")
        return 1

    print(sample.to_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
