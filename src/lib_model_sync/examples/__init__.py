"""Example configuration helpers for ``lib_model_sync``."""

from .generate import SAMPLE_MODELS_YAML, ExampleSpec, generate_examples

__all__ = [
    "SAMPLE_MODELS_YAML",
    "ExampleSpec",
    "generate_examples",
]
