"""
Data schema shared by the entailment components.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, List, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class EntailmentPair:
    """A (text, hypothesis) pair as loaded from a dataset."""
    id: str
    text: str
    hypothesis: str
    label: Optional[str] = None


class ModelName(str, Enum):
    STRUCTURAL_SIMILARITY = "StructuralSimilarity"
    GRAPH_NAVIGATION = "GraphNavigation"


class Decision(str, Enum):
    YES = "yes"
    NO = "no"
    PENDING = "pending"


@dataclass
class EntailmentDecision:
    """Outcome of a model (or the context veto) for a single pair."""
    decision: Decision
    model: Optional[ModelName] = None
    justification: Optional[str] = None

    def justification_lines(self) -> List[str]:
        """Split the justification into one sentence per line."""
        if self.justification is None:
            return []
        return [line for line in self.justification.split("\n") if line]


@dataclass(frozen=True)
class Token:
    lemma: str
    pos: str


@dataclass(frozen=True)
class Phrase:
    """A token span matching a (possibly multi-word) dictionary entry."""
    text: str
    pos: str


@dataclass(frozen=True)
class ScoredPair:
    term1: str
    term2: str
    score: float


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    SERVICE_UNAVAILABLE = "ServiceUnavailable"
    MALFORMED_INPUT = "MalformedInput"


@dataclass
class Result(Generic[T]):
    """A payload plus the kind of error that produced it, if any."""
    value: T
    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None
