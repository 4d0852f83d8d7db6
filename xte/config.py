"""
Configuration store for the entailment system.

The store is a plain text file of ``key = value`` lines (``#`` starts a
comment). Files ending in ``.yaml``/``.yml`` are read with PyYAML instead.
"""

import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel

from .utils.logger import get_logger

logger = get_logger("config")

KNOWLEDGE_BASES = ("WN", "WKT", "WKP", "WBT")

THRESHOLD_KEY = "tedthreshold"


class EntailmentConfig(BaseModel):
    """Typed view of the configuration store."""

    # Lexical resources
    wnpath: Optional[str] = None
    synonyms: Optional[str] = None
    antonyms: Optional[str] = None
    hypernyms: Optional[str] = None

    # One definitions graph per knowledge base
    wngraph: Optional[str] = None
    wktgraph: Optional[str] = None
    wkpgraph: Optional[str] = None
    wbtgraph: Optional[str] = None

    # Gloss corpora used for IDF gating
    wncorpus: Optional[str] = None
    wktcorpus: Optional[str] = None
    wkpcorpus: Optional[str] = None
    wbtcorpus: Optional[str] = None

    tedthreshold: float = 0.0

    # Similarity service
    similarity: str = "indra"
    indra_url: str = "http://alphard.fim.uni-passau.de:8916/relatedness"
    indra_corpus: str = "wiki-2018"
    indra_model: str = "W2V"
    indra_language: str = "EN"
    indra_score_function: str = "COSINE"
    similarity_timeout: float = 30.0
    similarity_retries: int = 3
    sentence_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    spacy_model: str = "en_core_web_sm"

    # Experiment tracking
    use_wandb: bool = False
    wandb_project: str = "xte"

    def graph_path(self, knowledge_base: str) -> Optional[str]:
        """Get the definitions graph file for a knowledge base."""
        return getattr(self, f"{_check_kb(knowledge_base).lower()}graph")

    def corpus_path(self, knowledge_base: str) -> Optional[str]:
        """Get the gloss corpus file for a knowledge base."""
        return getattr(self, f"{_check_kb(knowledge_base).lower()}corpus")


def _check_kb(knowledge_base: str) -> str:
    kb = knowledge_base.upper()
    if kb not in KNOWLEDGE_BASES:
        raise ValueError(f"Unknown knowledge base: {knowledge_base}. Available: {list(KNOWLEDGE_BASES)}")
    return kb


def _is_yaml(path: Path) -> bool:
    return path.suffix.lower() in (".yaml", ".yml")


def parse_params(content: str) -> Dict[str, str]:
    """Parse ``key = value`` lines into a dictionary."""
    params = {}
    for number, line in enumerate(content.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            logger.warning("Ignoring malformed configuration line %d: %r", number, line)
            continue
        key, value = stripped.split("=", 1)
        params[key.strip()] = value.strip()
    return params


def read_params(path: str) -> Dict[str, Any]:
    """Read the raw parameters of a configuration file."""
    config_path = Path(path)
    with open(config_path, "r", encoding="utf-8") as f:
        content = f.read()

    if _is_yaml(config_path):
        return yaml.safe_load(content) or {}
    return parse_params(content)


def read_config(path: str) -> EntailmentConfig:
    """Load and validate a configuration file."""
    params = read_params(path)
    config = EntailmentConfig(**params)
    logger.debug("Loaded configuration from %s", path)
    return config


def write_threshold(path: str, threshold: float):
    """Rewrite the learned tree edit distance threshold in place."""
    config_path = Path(path)
    with open(config_path, "r", encoding="utf-8") as f:
        content = f.read()

    if _is_yaml(config_path):
        data = yaml.safe_load(content) or {}
        data[THRESHOLD_KEY] = threshold
        content = yaml.safe_dump(data, sort_keys=False)
    else:
        line = f"{THRESHOLD_KEY} = {threshold}\n"
        pattern = re.compile(rf"^{THRESHOLD_KEY}\s*=.*\n?", re.MULTILINE)
        if pattern.search(content):
            content = pattern.sub(lambda _: line, content, count=1)
        else:
            if content and not content.endswith("\n"):
                content += "\n"
            content += line

    with open(config_path, "w", encoding="utf-8") as f:
        f.write(content)

    logger.info("Threshold %s written to %s", threshold, path)
