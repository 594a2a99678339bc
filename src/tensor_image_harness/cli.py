"""Command-line entry point.

Usage::

    tensor-image-harness model.onnx input.jpg output.png

    # Through the QNN execution provider on the HTP backend
    tensor-image-harness model.onnx input.jpg output.png --delegate qnn

    # Override a backend option and keep a JSON report
    tensor-image-harness model.onnx input.jpg output.png \\
        --delegate qnn --delegate-option backend_path=libQnnGpu.so \\
        --report run.json
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from tensor_image_harness import __version__
from tensor_image_harness.config import RunConfig
from tensor_image_harness.exceptions import HarnessError
from tensor_image_harness.inference.delegate import (
    PROVIDER_ALIASES,
    DelegateConfig,
    parse_delegate_options,
)
from tensor_image_harness.runner import run
from tensor_image_harness.schemas.report import RunReport

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class _ArgumentParser(argparse.ArgumentParser):
    """Report usage errors with the harness's failure exit code."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="tensor-image-harness",
        description="Run one image through an ONNX model and save the output as an image",
    )
    parser.add_argument("model", type=Path, help="Path to the .onnx model")
    parser.add_argument("input", type=Path, help="Input image")
    parser.add_argument("output", type=Path, help="Output PNG")
    parser.add_argument(
        "--delegate",
        type=str,
        default=None,
        help=(
            "Execution provider to attach: "
            f"{', '.join(sorted(PROVIDER_ALIASES))} or a full provider name "
            "(default: CPU only)"
        ),
    )
    parser.add_argument(
        "--delegate-option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Provider option, may be repeated (e.g. backend_path=libQnnHtp.so)",
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Write a JSON run report to this path",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def print_report(report: RunReport, console: Console | None = None) -> None:
    """Print the tensors and timing of a run as a table."""
    console = console or Console()
    table = Table(title="Run summary")
    table.add_column("Tensor", style="cyan")
    table.add_column("Name")
    table.add_column("Dimension")
    table.add_column("Type")
    table.add_column("Bytes", justify="right")
    table.add_column("Image")
    for role, info, geometry in (
        ("input", report.input_tensor, report.input_geometry),
        ("output", report.output_tensor, report.output_geometry),
    ):
        table.add_row(
            role,
            info.name,
            info.dims,
            info.dtype,
            info.size_label,
            str(geometry),
        )
    console.print(table)
    console.print(
        f"Providers: {', '.join(report.providers)}  "
        f"Execution time: {report.execution_time_ms:.2f} ms"
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = parse_delegate_options(args.delegate_option)
        config = RunConfig(
            model_path=args.model,
            input_path=args.input,
            output_path=args.output,
            delegate=DelegateConfig(name=args.delegate, options=options),
            report_path=args.report,
            log_level=args.log_level,
        )
    except (ValueError, ValidationError) as e:
        parser.error(str(e))

    logger.remove()
    logger.add(sys.stderr, level=config.log_level)

    try:
        report = run(config)
    except HarnessError as e:
        logger.error(str(e))
        return EXIT_FAILURE

    print_report(report)
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
