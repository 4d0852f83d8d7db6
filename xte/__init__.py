"""
XTE: Explainable Textual Entailment

Decides whether a hypothesis is entailed by a text, combining a tree edit
distance model with a navigation of definition graphs that produces a
human-readable justification.
"""

__version__ = "0.1.0"
__author__ = "XTE Team"
