"""
Lexical resources and the definitions graph.
"""

from .lexicon import Lexicon, TableLexicon, WordNetLexicon, IDFCalculator
from .knowledge import DefinitionGraph, NestedRole, RoleTriple, NOUN_NAMESPACE, VERB_NAMESPACE

__all__ = [
    "Lexicon", "TableLexicon", "WordNetLexicon", "IDFCalculator",
    "DefinitionGraph", "NestedRole", "RoleTriple", "NOUN_NAMESPACE", "VERB_NAMESPACE",
]
