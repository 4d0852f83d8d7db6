"""
Search paths over the definitions graph.

Paths share their prefixes in an arena: each step stores the index of the
step before it, so extending a path never copies its history. Identical
(parent, step) extensions are interned, which makes two paths equal exactly
when their tail indices are equal.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Role(str, Enum):
    SOURCE = "source"
    SUPERTYPE = "supertype"
    ROLE = "role"
    SYNONYM = "synonym"
    HEAD = "head"
    SUPERTYPE_HEAD = "supertype head"
    TARGET = "target"
    DEAD_END = "dead end"


@dataclass(frozen=True)
class PathStep:
    """One hop of a path.

    ``detail`` holds the X of "supertype of X" and "synonym of X", and the
    role label (e.g. ``has_diff_event``) of role steps.
    """
    concept: str
    pos: str
    role: Role
    detail: str = ""

    def __str__(self) -> str:
        if self.role in (Role.SUPERTYPE, Role.SYNONYM):
            return f"{self.concept}#{self.pos};{self.role.value} of {self.detail}"
        if self.role == Role.ROLE:
            return f"{self.concept};{self.detail}"
        return f"{self.concept}#{self.pos};{self.role.value}"


class PathArena:
    """Append-only store of path steps with parent back-references."""

    def __init__(self):
        self.nodes: List[PathStep] = []
        self.parents: List[Optional[int]] = []
        self.lengths: List[int] = []
        self._index: Dict[Tuple[Optional[int], PathStep], int] = {}

    def _add(self, parent: Optional[int], step: PathStep) -> int:
        key = (parent, step)
        if key in self._index:
            return self._index[key]

        self.nodes.append(step)
        self.parents.append(parent)
        self.lengths.append(1 if parent is None else self.lengths[parent] + 1)
        index = len(self.nodes) - 1
        self._index[key] = index
        return index

    def root(self, step: PathStep) -> int:
        """Start a new one-step path."""
        return self._add(None, step)

    def extend(self, path: int, step: PathStep) -> int:
        """Get the path that continues ``path`` with ``step``."""
        return self._add(path, step)

    def last(self, path: int) -> PathStep:
        return self.nodes[path]

    def length(self, path: int) -> int:
        return self.lengths[path]

    def steps(self, path: int) -> List[PathStep]:
        """Materialize a path from its first step to its last."""
        steps = []
        index: Optional[int] = path
        while index is not None:
            steps.append(self.nodes[index])
            index = self.parents[index]
        steps.reverse()
        return steps
