"""Example model configuration generation helpers.

Purpose
-------
Produce a ready-to-commit sample of the model configuration in both supported
formats so teams can seed a repository, and supply the bundled catalogue used
as the local data source.

Contents
    - ``SAMPLE_MODELS_YAML``: the sample catalogue in the indentation format.
    - ``ExampleSpec``: dataclass capturing a relative path and text content.
    - ``generate_examples``: write ``models.yaml`` and ``models.json``.
    - ``_build_specs`` / ``_write_examples`` / ``_should_write`` /
      ``_ensure_parent``: tiny helpers that narrate how files are written.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..adapters.decoders.yaml_subset import decode_yaml_subset
from ..application.normalize import normalize_records

SAMPLE_MODELS_YAML = """\
# Models tracked by the registry, one entry per model. Nested sections are
# limited to `metrics` and `files`; they run until the next entry, so keep
# them at the end of each model.
models:
  - id: churn-predictor
    name: Customer Churn Predictor
    version: 2.1.0
    description: Gradient boosted classifier predicting 90-day customer churn.
    framework: XGBoost
    status: production
    owner: data-science
    createdAt: "2024-01-15T10:30:00.000Z"
    updatedAt: "2024-06-02T08:00:00.000Z"
    metrics:
      accuracy: 0.91
      latency: 12
    files:
      modelCard: models/churn/MODEL_CARD.md
      trainingScript: models/churn/train.py
      featureScript: models/churn/features.py
      inferenceScript: models/churn/predict.py
      modelFile: models/churn/model.json
  - id: fraud-detector
    name: Transaction Fraud Detector
    version: 1.4.2
    description: Sequence model scoring card transactions for fraud risk.
    framework: PyTorch
    status: staging
    owner: risk-ml
    createdAt: "2024-02-20T14:00:00.000Z"
    updatedAt: "2024-05-28T16:45:00.000Z"
    metrics:
      accuracy: 0.97
      latency: 35
    files:
      modelCard: models/fraud/MODEL_CARD.md
      trainingScript: models/fraud/train.py
  - id: demand-forecast
    name: Weekly Demand Forecast
    version: 0.9.0
    description: Store-level demand forecast used for replenishment planning.
    framework: Prophet
    status: development
    owner: supply-chain
    createdAt: "2024-04-03T09:00:00.000Z"
    updatedAt: "2024-04-30T11:20:00.000Z"
    metrics:
      latency: 220
  - id: sentiment-classifier
    name: Review Sentiment Classifier
    version: 3.0.1
    description: Fine-tuned transformer labelling product reviews.
    framework: Transformers
    status: archived
    owner: nlp-platform
    createdAt: "2023-09-11T07:10:00.000Z"
    updatedAt: "2024-03-01T12:00:00.000Z"
    metrics:
      accuracy: 0.88
      latency: 48
    files:
      modelCard: models/sentiment/MODEL_CARD.md
"""


@dataclass(slots=True)
class ExampleSpec:
    """Describe a single example file to be written to disk.

    Attributes
    ----------
    relative_path:
        Path relative to the destination directory.
    content:
        File contents (UTF-8 text).
    """

    relative_path: Path
    content: str


def generate_examples(destination: str | Path, *, force: bool = False) -> list[Path]:
    """Write ``models.yaml`` and ``models.json`` describing the sample catalogue.

    Parameters
    ----------
    destination:
        Directory that will receive the files (created when missing).
    force:
        When ``True`` existing files are overwritten; otherwise they are skipped.

    Returns
    -------
    list[Path]
        File paths written during this invocation.

    Examples
    --------
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> sorted(path.name for path in generate_examples(tmp.name))
    ['models.json', 'models.yaml']
    >>> generate_examples(tmp.name)
    []
    >>> tmp.cleanup()
    """

    return _write_examples(Path(destination), _build_specs(), force)


def _write_examples(destination: Path, specs: Iterator[ExampleSpec], force: bool) -> list[Path]:
    """Write all ``specs`` under *destination* honouring the *force* flag."""

    written: list[Path] = []
    for spec in specs:
        path = destination / spec.relative_path
        if not _should_write(path, force):
            continue
        _ensure_parent(path)
        path.write_text(spec.content, encoding="utf-8")
        written.append(path)
    return written


def _should_write(path: Path, force: bool) -> bool:
    """Return ``True`` when *path* should be written respecting *force*."""

    return force or not path.exists()


def _ensure_parent(path: Path) -> None:
    """Create parent directories for *path* when missing."""

    path.parent.mkdir(parents=True, exist_ok=True)


def _build_specs() -> Iterator[ExampleSpec]:
    """Yield the YAML sample and its strict JSON equivalent.

    The JSON document is derived from the YAML so both files always describe
    the same models.
    """

    yield ExampleSpec(Path("models.yaml"), SAMPLE_MODELS_YAML)
    models = normalize_records(decode_yaml_subset(SAMPLE_MODELS_YAML))
    document = {"models": [model.to_dict() for model in models]}
    yield ExampleSpec(Path("models.json"), json.dumps(document, indent=2) + "\n")
