"""
Dataset loaders and result writer for entailment benchmarks.
"""

import os
from typing import Any, Dict, List, Optional

from datasets import load_dataset

from .schema import EntailmentDecision, EntailmentPair, ErrorKind, Result
from ..utils.logger import get_logger

logger = get_logger("data")

LABELS = ("yes", "no")


class DatasetLoader:
    """Base class for dataset loaders."""

    def load(self, source: str) -> Result[List[EntailmentPair]]:
        """Load a dataset and convert it to entailment pairs."""
        raise NotImplementedError

    def get_config(self) -> Dict[str, Any]:
        """Get dataset configuration."""
        raise NotImplementedError


def _field(line: str) -> Optional[str]:
    """Return the content after the ``X:`` prefix of a record line."""
    index = line.find(":")
    if index < 0:
        return None
    return line[index + 1:].strip()


class TextDatasetLoader(DatasetLoader):
    """Loader for the plain text format.

    Records are three lines separated by a blank line::

        <id> T: <text>
        <id> H: <hypothesis>
        <id> A: <label>
    """

    def load(self, source: str) -> Result[List[EntailmentPair]]:
        """Read every record of a text dataset."""
        if not os.path.exists(source):
            logger.error("Dataset file not found: %s", source)
            return Result([], ErrorKind.NOT_FOUND, f"file not found: {source}")

        pairs = []
        with open(source, "r", encoding="utf-8") as f:
            record = []
            for line in f:
                line = line.rstrip("\r\n")
                if line.strip():
                    record.append(line)
                    continue
                self._flush(record, pairs)
                record = []
            self._flush(record, pairs)

        return Result(pairs)

    def _flush(self, record: List[str], pairs: List[EntailmentPair]):
        if not record:
            return
        pair = self.parse_record(record)
        if pair is not None:
            pairs.append(pair)

    def parse_record(self, lines: List[str]) -> Optional[EntailmentPair]:
        """Convert the lines of one record into a pair."""
        if len(lines) < 2:
            logger.warning("Skipping incomplete record: %r", lines)
            return None

        first = lines[0]
        if " " not in first:
            logger.warning("Skipping record without identifier: %r", first)
            return None

        text = _field(first)
        hypothesis = _field(lines[1])
        if text is None or hypothesis is None:
            logger.warning("Skipping malformed record: %r", lines)
            return None

        label = None
        if len(lines) > 2:
            label = _field(lines[2])
            if label is None:
                logger.warning("Skipping record with malformed label: %r", lines)
                return None
            label = label.lower() or None
            if label is not None and label not in LABELS:
                logger.warning("Skipping record with unknown label %r: %r", label, lines[0])
                return None

        return EntailmentPair(
            id=first[:first.index(" ")],
            text=text,
            hypothesis=hypothesis,
            label=label,
        )

    def get_config(self) -> Dict[str, Any]:
        return {"format": "text", "fields": ["T", "H", "A"]}


class GlueRTELoader(DatasetLoader):
    """Loader for the GLUE RTE dataset."""

    LABELS = {0: "yes", 1: "no"}

    def __init__(self, split: str = "validation"):
        self.split = split

    def load(self, source: str = "nyu-mll/glue") -> Result[List[EntailmentPair]]:
        """Load GLUE RTE dataset."""
        dataset = load_dataset(source, "rte", split=self.split)
        pairs = []

        for item in dataset:
            pair = EntailmentPair(
                id=str(item["idx"]),
                text=item["sentence1"],
                hypothesis=item["sentence2"],
                label=self.LABELS.get(item["label"]),
            )
            pairs.append(pair)

        return Result(pairs)

    def get_config(self) -> Dict[str, Any]:
        return {"format": "rte", "split": self.split}


def get_dataset_loader(name: str, **kwargs) -> DatasetLoader:
    """Get dataset loader by name."""
    loaders = {
        "text": TextDatasetLoader,
        "rte": GlueRTELoader,
    }

    if name not in loaders:
        raise ValueError(f"Unknown dataset format: {name}. Available: {list(loaders.keys())}")

    return loaders[name](**kwargs)


def format_result(pair: EntailmentPair, decision: EntailmentDecision) -> str:
    """Render one result block."""
    model = decision.model.value if decision.model is not None else ""
    lines = [
        f"{pair.id} T: {pair.text}",
        f"{pair.id} H: {pair.hypothesis}",
        f"{pair.id} A: {pair.label or ''}",
        f"Entailment: {decision.decision.value}",
        f"Model: {model}",
    ]

    justification = decision.justification_lines()
    if justification:
        lines.append("Justification:")
        lines.extend(justification)

    return "\n".join(lines) + "\n\n"


def write_results(results: List[tuple], path: str):
    """Write (pair, decision) results to a text file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    logger.info("Writing results to file %s", path)
    with open(path, "w", encoding="utf-8") as f:
        for pair, decision in results:
            f.write(format_result(pair, decision))
