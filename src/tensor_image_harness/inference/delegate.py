"""Execution-provider selection for ONNX Runtime.

An execution provider plays the part of a hardware delegate: nodes it
accepts run on the accelerator, everything else falls back to the CPU
provider, which is always appended last.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, Field

from tensor_image_harness.exceptions import DelegateError

CPU_PROVIDER = "CPUExecutionProvider"

PROVIDER_ALIASES: dict[str, str] = {
    "cpu": CPU_PROVIDER,
    "qnn": "QNNExecutionProvider",
    "cuda": "CUDAExecutionProvider",
    "tensorrt": "TensorrtExecutionProvider",
    "coreml": "CoreMLExecutionProvider",
    "openvino": "OpenVINOExecutionProvider",
}

# QNN on the Hexagon tensor processor (HTP) backend.
DEFAULT_PROVIDER_OPTIONS: dict[str, dict[str, str]] = {
    "QNNExecutionProvider": {"backend_path": "libQnnHtp.so"},
}


class DelegateConfig(BaseModel, frozen=True):
    """Which execution provider to attach, and its backend options.

    ``name`` may be an alias (``qnn``, ``cuda``, ...) or a full ONNX Runtime
    provider name. ``None`` runs on the CPU provider alone. ``options``
    are merged over the provider's defaults.
    """

    name: str | None = None
    options: dict[str, str] = Field(default_factory=dict)

    @property
    def provider(self) -> str | None:
        """Full ONNX Runtime provider name, or ``None`` for no delegate."""
        if self.name is None:
            return None
        return PROVIDER_ALIASES.get(self.name.lower(), self.name)

    def provider_options(self) -> dict[str, str]:
        provider = self.provider
        if provider is None:
            return {}
        return {**DEFAULT_PROVIDER_OPTIONS.get(provider, {}), **self.options}

    def to_providers(
        self, available: Iterable[str]
    ) -> list[str | tuple[str, dict[str, Any]]]:
        """Build the ``providers`` argument for ``ort.InferenceSession``.

        Args:
            available: Providers compiled into the installed ONNX Runtime.

        Raises:
            DelegateError: If the provider is not available, or options
                were given without a provider.
        """
        provider = self.provider
        if provider is None:
            if self.options:
                raise DelegateError("delegate options given without a delegate")
            return [CPU_PROVIDER]

        available = list(available)
        if provider not in available:
            raise DelegateError(
                f"execution provider '{provider}' is not available; "
                f"installed providers: {', '.join(available) or 'none'}"
            )

        if provider == CPU_PROVIDER:
            return [(CPU_PROVIDER, self.provider_options())]
        return [(provider, self.provider_options()), CPU_PROVIDER]


def parse_delegate_options(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a dict.

    Raises:
        ValueError: If a pair has no ``=`` or an empty key.
    """
    options: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValueError(f"expected KEY=VALUE, got {pair!r}")
        options[key] = value.strip()
    return options
