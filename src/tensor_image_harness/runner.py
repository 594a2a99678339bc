"""Single-image inference run.

Load the model with its delegate, check that the one input and the one
output tensor both describe images, copy the decoded input image into
the input tensor, invoke, and encode the output tensor as a PNG.
"""

from __future__ import annotations

import time

import onnxruntime as ort
from loguru import logger

from tensor_image_harness.config import RunConfig
from tensor_image_harness.exceptions import (
    ByteSizeMismatchError,
    ImageDimensionMismatchError,
    ReportError,
    TensorCountError,
)
from tensor_image_harness.image_io import load_image, save_image
from tensor_image_harness.inference.onnx_interpreter import ONNXTensorInterpreter
from tensor_image_harness.io.report import RunReportWriter
from tensor_image_harness.schemas.geometry import ImageGeometry
from tensor_image_harness.schemas.report import RunReport
from tensor_image_harness.schemas.tensor import TensorInfo
from tensor_image_harness.shape import classify_shape


def _single_tensor(tensors: list[TensorInfo], role: str) -> TensorInfo:
    if len(tensors) != 1:
        raise TensorCountError(f"expected only 1 {role} tensor, got {len(tensors)}")
    return tensors[0]


def _log_tensor(info: TensorInfo, role: str) -> None:
    logger.info(f"{role.capitalize()} tensor '{info.name}':")
    logger.info(f"  Size: {info.size_label} bytes")
    logger.info(f"  Dimension: {info.dims}")
    logger.info(f"  Type: {info.dtype}")


def _tensor_geometry(info: TensorInfo, role: str) -> ImageGeometry:
    geometry = classify_shape(info.shape)
    logger.info(f"{role.capitalize()} tensor image dimensions: {geometry}")
    return geometry


def run(config: RunConfig) -> RunReport:
    """Run the model in ``config`` over its input image.

    The interpreter is released on every exit path. The output file is
    only created once the whole run has succeeded.

    Returns:
        A report of the tensors, geometries and execution time.

    Raises:
        HarnessError: Subclass naming the stage that failed.
    """
    logger.info(f"ONNX Runtime version: {ort.__version__}")

    with ONNXTensorInterpreter(config.model_path, config.delegate) as interpreter:
        input_info = _single_tensor(interpreter.input_details(), "input")
        _log_tensor(input_info, "input")
        input_geometry = _tensor_geometry(input_info, "input")

        output_info = _single_tensor(interpreter.output_details(), "output")
        _log_tensor(output_info, "output")
        output_geometry = _tensor_geometry(output_info, "output")

        pixels = load_image(config.input_path, input_geometry.channels)
        height, width = pixels.shape[:2]
        if (width, height) != (input_geometry.width, input_geometry.height):
            raise ImageDimensionMismatchError(
                f"input image {config.input_path} does not match dimension of "
                f"input tensor: expected {input_geometry.width}x"
                f"{input_geometry.height}, got {width}x{height}"
            )
        logger.info(f"Loaded input image '{config.input_path}'")

        # Same geometry, so a mismatch means the tensor is not 8-bit.
        if pixels.nbytes != input_info.byte_size:
            raise ByteSizeMismatchError(
                f"input image is {pixels.nbytes} bytes but input tensor "
                f"'{input_info.name}' ({input_info.dtype}) is {input_info.size_label}"
            )
        interpreter.set_input(0, pixels.tobytes())
        del pixels

        logger.info("Invoking interpreter...")
        start = time.perf_counter()
        interpreter.invoke()
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(f"Model execution time: {elapsed_ms:.2f} ms")

        output = interpreter.get_output(0)
        if output.nbytes != output_geometry.byte_size:
            raise ByteSizeMismatchError(
                f"output tensor '{output_info.name}' ({output_info.dtype}) is "
                f"{output.nbytes} bytes, a {output_geometry} image needs "
                f"{output_geometry.byte_size}"
            )
        save_image(config.output_path, output, output_geometry)
        logger.info(f"Wrote output image to '{config.output_path}'")

        providers = interpreter.providers

    report = RunReport(
        model_path=str(config.model_path),
        input_path=str(config.input_path),
        output_path=str(config.output_path),
        providers=providers,
        input_tensor=input_info,
        output_tensor=output_info,
        input_geometry=input_geometry,
        output_geometry=output_geometry,
        execution_time_ms=elapsed_ms,
        runtime_version=ort.__version__,
    )
    if config.report_path is not None:
        try:
            RunReportWriter(config.report_path).write(report)
        except ReportError:
            # A run without its report has failed; leave no output behind.
            config.output_path.unlink(missing_ok=True)
            raise
        logger.info(f"Run report saved to {config.report_path}")
    return report
