"""Run report writer using orjson."""

from __future__ import annotations

from pathlib import Path

import orjson

from tensor_image_harness.exceptions import ReportError
from tensor_image_harness.schemas.report import RunReport


class RunReportWriter:
    """Write a :class:`RunReport` as indented JSON.

    Parent directories of ``output_path`` are created on write.
    """

    def __init__(self, output_path: Path) -> None:
        self.output_path = output_path

    def write(self, report: RunReport) -> Path:
        """Write the report to disk. Returns the output path.

        Raises:
            ReportError: If the report cannot be serialized or written.
        """
        try:
            data = orjson.dumps(report.model_dump(), option=orjson.OPT_INDENT_2)
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            self.output_path.write_bytes(data)
        except (OSError, orjson.JSONEncodeError) as e:
            raise ReportError(
                f"failed to write run report to '{self.output_path}': {e}"
            ) from e
        return self.output_path
