"""
Definitions graph used by the graph navigation model.

Each synset carries its labels, its supertypes and the semantic roles of its
definition, keyed by the supertype they are attached to.
"""

import json
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, Union

from ..utils.logger import get_logger

logger = get_logger("knowledge")

NOUN_NAMESPACE = "noun"
VERB_NAMESPACE = "verb"

HAS_SUPERTYPE = "has_supertype"


@dataclass(frozen=True)
class NestedRole:
    """A reified (subject, predicate, object) triple used as a role object."""
    subject: str
    predicate: str
    object: str


@dataclass(frozen=True)
class RoleTriple:
    supertype: str
    predicate: str
    object: Union[str, NestedRole]


@dataclass
class Synset:
    id: str
    namespace: str
    labels: List[str] = field(default_factory=list)
    supertypes: List[str] = field(default_factory=list)
    roles: List[RoleTriple] = field(default_factory=list)


def _label(word: str) -> str:
    return word.replace(" ", "_").lower()


class DefinitionGraph:
    """In-memory definitions graph for one knowledge base."""

    def __init__(self, name: str):
        self.name = name
        self.synsets: Dict[str, Synset] = {}
        self.label_index = defaultdict(list)

    def add_synset(self, synset_id: str, namespace: str, labels: List[str],
                   supertypes: List[str] = None, roles: List[RoleTriple] = None) -> Synset:
        """Add a synset to the definitions graph."""
        synset = Synset(
            id=synset_id,
            namespace=namespace,
            labels=[_label(label) for label in labels],
            supertypes=[s.replace(" ", "_") for s in supertypes or []],
            roles=list(roles or []),
        )
        self.synsets[synset_id] = synset
        for label in synset.labels:
            self.label_index[(namespace, label)].append(synset)
        return synset

    def synsets_by_label(self, word: str, namespace: str) -> List[Synset]:
        """Get all synsets that contain a given word as a label."""
        return list(self.label_index.get((namespace, _label(word)), []))

    def supertypes_of(self, synsets: List[Synset]) -> List[str]:
        """Get all the supertypes of a set of synsets."""
        return [supertype for synset in synsets for supertype in synset.supertypes]

    def synsets_by_supertype(self, synsets: List[Synset], supertype: str) -> List[Synset]:
        """Select the synsets that have a specific supertype."""
        supertype = supertype.replace(" ", "_")
        return [synset for synset in synsets if supertype in synset.supertypes]

    def synonyms_of(self, synset: Synset) -> List[str]:
        """Get all the labels of a synset."""
        return [label.replace("_", " ") for label in synset.labels]

    def roles_by_supertype(self, synsets: List[Synset], supertype: str) -> List[Tuple[str, str]]:
        """Get all the (role text, role label) pairs linked to a supertype."""
        supertype = supertype.replace(" ", "_")
        roles = [(supertype.replace("_", " "), HAS_SUPERTYPE)]

        for synset in synsets:
            for role in synset.roles:
                if role.supertype.replace(" ", "_") != supertype:
                    continue
                if isinstance(role.object, NestedRole):
                    roles.append((role.object.subject.replace("_", " "), role.predicate))
                    roles.append((role.object.object, role.object.predicate))
                else:
                    roles.append((role.object, role.predicate))

        return roles

    def roles_grouped_by_supertype(self, synsets: List[Synset],
                                   supertypes: List[str]) -> Dict[str, List[Tuple[str, str]]]:
        """For each supertype, get all the roles linked to it."""
        grouped: Dict[str, List[Tuple[str, str]]] = {}
        for supertype in supertypes:
            roles = self.roles_by_supertype(synsets, supertype)
            grouped.setdefault(supertype, []).extend(roles)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        synsets = []
        for synset in self.synsets.values():
            roles = []
            for role in synset.roles:
                obj = role.object
                if isinstance(obj, NestedRole):
                    obj = {"subject": obj.subject, "predicate": obj.predicate, "object": obj.object}
                roles.append({"supertype": role.supertype, "predicate": role.predicate, "object": obj})
            synsets.append({
                "id": synset.id,
                "pos": synset.namespace,
                "labels": synset.labels,
                "supertypes": synset.supertypes,
                "roles": roles,
            })
        return {"name": self.name, "synsets": synsets}

    def save(self, path: str):
        """Save definitions graph to file."""
        with open(path, 'w', encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefinitionGraph":
        """Create from dictionary format."""
        graph = cls(data.get("name", ""))

        for entry in data.get("synsets", []):
            roles = []
            for role in entry.get("roles", []):
                obj = role["object"]
                if isinstance(obj, dict):
                    obj = NestedRole(obj["subject"], obj["predicate"], obj["object"])
                roles.append(RoleTriple(role["supertype"], role["predicate"], obj))

            graph.add_synset(
                entry["id"],
                entry.get("pos", NOUN_NAMESPACE),
                entry.get("labels", []),
                entry.get("supertypes", []),
                roles,
            )

        return graph

    @classmethod
    def load(cls, path: str) -> "DefinitionGraph":
        """Load definitions graph from file."""
        with open(path, 'r', encoding="utf-8") as f:
            data = json.load(f)

        graph = cls.from_dict(data)
        logger.info("Loaded definitions graph %s with %d synsets", graph.name, len(graph.synsets))
        return graph
