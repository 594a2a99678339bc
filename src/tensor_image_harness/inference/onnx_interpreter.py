"""ONNX Runtime tensor interpreter."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import onnxruntime as ort
from loguru import logger
from onnxruntime.capi.onnxruntime_pybind11_state import (
    EPFail,
    Fail,
    InvalidArgument,
    InvalidGraph,
    InvalidProtobuf,
    NoSuchFile,
    RuntimeException,
)

from tensor_image_harness.exceptions import (
    ByteSizeMismatchError,
    DelegateError,
    InferenceError,
    InterpreterError,
    ModelLoadError,
)
from tensor_image_harness.inference.base import BaseTensorInterpreter
from tensor_image_harness.inference.delegate import DelegateConfig
from tensor_image_harness.schemas.tensor import TensorInfo

# ONNX element type -> (numpy dtype, short tag)
_ELEMENT_TYPES: dict[str, tuple[type[np.generic], str]] = {
    "tensor(float16)": (np.float16, "f16"),
    "tensor(float)": (np.float32, "f32"),
    "tensor(uint8)": (np.uint8, "u8"),
    "tensor(uint32)": (np.uint32, "u32"),
    "tensor(int8)": (np.int8, "i8"),
    "tensor(int32)": (np.int32, "i32"),
    "tensor(double)": (np.float64, "f64"),
    "tensor(int64)": (np.int64, "i64"),
    "tensor(uint16)": (np.uint16, "u16"),
    "tensor(int16)": (np.int16, "i16"),
    "tensor(uint64)": (np.uint64, "u64"),
    "tensor(bool)": (np.bool_, "bool"),
}

UNKNOWN_DTYPE = "???"

_RUN_ERRORS = (Fail, InvalidArgument, RuntimeException, EPFail, RuntimeError)


def _resolve_shape(shape: list[int | str | None]) -> tuple[int, ...]:
    """Replace symbolic or unknown dimensions with 1.

    A single image is fed per run, so free axes are batch-like.
    """
    return tuple(d if isinstance(d, int) and d >= 0 else 1 for d in shape)


def _describe(
    node: ort.NodeArg,
) -> tuple[TensorInfo, np.dtype | None]:  # type: ignore[type-arg]
    """Describe a graph input or output.

    Element types without a fixed-width numpy counterpart (string,
    bfloat16, ...) are tagged ``???`` and have no byte size.
    """
    shape = _resolve_shape(node.shape)
    if node.type not in _ELEMENT_TYPES:
        info = TensorInfo(
            name=node.name, shape=shape, dtype=UNKNOWN_DTYPE, byte_size=None
        )
        return info, None

    np_type, tag = _ELEMENT_TYPES[node.type]
    dtype = np.dtype(np_type)
    byte_size = int(np.prod(shape, dtype=np.int64)) * dtype.itemsize
    info = TensorInfo(name=node.name, shape=shape, dtype=tag, byte_size=byte_size)
    return info, dtype


class ONNXTensorInterpreter(BaseTensorInterpreter):
    """Run a model with ONNX Runtime, optionally through an execution provider.

    The session is created, with the delegate attached and tensors
    allocated, in the constructor. Inputs are staged with
    :meth:`set_input` and consumed by :meth:`invoke`.

    Args:
        model_path: Path to the ``.onnx`` file.
        delegate: Execution provider to attach. Defaults to CPU only.
    """

    def __init__(
        self,
        model_path: str | Path,
        delegate: DelegateConfig | None = None,
    ) -> None:
        model_path = Path(model_path)
        delegate = delegate or DelegateConfig()

        if not model_path.is_file():
            raise ModelLoadError(f"model file '{model_path}' does not exist")

        providers = delegate.to_providers(ort.get_available_providers())

        try:
            self._session: ort.InferenceSession | None = ort.InferenceSession(
                str(model_path), providers=providers
            )
        except (InvalidProtobuf, NoSuchFile) as e:
            raise ModelLoadError(f"failed to load model file '{model_path}': {e}") from e
        except EPFail as e:
            raise DelegateError(
                f"failed to attach execution provider '{delegate.provider}': {e}"
            ) from e
        except (Fail, InvalidGraph, InvalidArgument, RuntimeException) as e:
            raise InterpreterError(f"failed to create interpreter: {e}") from e

        logger.info(f"Loaded model file '{model_path}'")

        attached = self._session.get_providers()
        if delegate.provider is not None and delegate.provider not in attached:
            raise DelegateError(
                f"execution provider '{delegate.provider}' was not attached; "
                f"session is using {', '.join(attached)}"
            )
        if delegate.provider is not None:
            logger.info(f"Attached execution provider '{delegate.provider}'")

        self._inputs = [_describe(node) for node in self._session.get_inputs()]
        self._outputs = [_describe(node) for node in self._session.get_outputs()]
        self._feeds: dict[str, np.ndarray] = {}  # type: ignore[type-arg]
        self._results: list[np.ndarray] | None = None  # type: ignore[type-arg]

    @property
    def providers(self) -> list[str]:
        """Execution providers the session is using, in priority order."""
        return self._require_session().get_providers()

    def input_details(self) -> list[TensorInfo]:
        return [info for info, _ in self._inputs]

    def output_details(self) -> list[TensorInfo]:
        return [info for info, _ in self._outputs]

    def set_input(self, index: int, data: bytes | bytearray | memoryview) -> None:
        self._require_session()
        info, dtype = self._inputs[index]
        if dtype is None or info.byte_size is None:
            raise ByteSizeMismatchError(
                f"input tensor '{info.name}' has an element type with no "
                "fixed byte size"
            )
        size = memoryview(data).nbytes
        if size != info.byte_size:
            raise ByteSizeMismatchError(
                f"input tensor '{info.name}' holds {info.byte_size} bytes, got {size}"
            )
        # Copy, so the caller's buffer can be released straight away.
        array = np.frombuffer(data, dtype=dtype).reshape(info.shape).copy()
        self._feeds[info.name] = array
        self._results = None

    def invoke(self) -> None:
        session = self._require_session()
        missing = [info.name for info, _ in self._inputs if info.name not in self._feeds]
        if missing:
            raise InferenceError(f"input tensors not set: {', '.join(missing)}")
        try:
            self._results = session.run(None, self._feeds)
        except _RUN_ERRORS as e:
            raise InferenceError(f"model execution failed: {e}") from e

    def get_output(self, index: int) -> np.ndarray:  # type: ignore[type-arg]
        self._require_session()
        if self._results is None:
            raise InferenceError("no output available, invoke() has not run")
        return np.ascontiguousarray(self._results[index])

    def close(self) -> None:
        self._session = None
        self._feeds.clear()
        self._results = None

    def _require_session(self) -> ort.InferenceSession:
        if self._session is None:
            raise InterpreterError("interpreter is closed")
        return self._session
