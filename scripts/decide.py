#!/usr/bin/env python3
"""
Decides a single text-hypothesis pair and prints the justification.
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.config import KNOWLEDGE_BASES
from xte.pipeline import EntailmentPipeline
from xte.utils.logger import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Decide whether a hypothesis is entailed by a text")
    parser.add_argument("--config", type=str, required=True,
                       help="Path to the configuration file")
    parser.add_argument("--kb", type=str, choices=list(KNOWLEDGE_BASES), default="WN",
                       help="Knowledge base used by graph navigation")
    parser.add_argument("--text", type=str, required=True,
                       help="Text")
    parser.add_argument("--hypothesis", type=str, required=True,
                       help="Hypothesis")

    args = parser.parse_args()
    setup_logging()

    pipeline = EntailmentPipeline.from_config(args.config)
    print(pipeline.decide_one(args.text, args.hypothesis, args.kb))


if __name__ == "__main__":
    main()
