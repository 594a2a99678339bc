"""Run a single image through an ONNX model and write the result as an image."""

__version__ = "0.0.1"
