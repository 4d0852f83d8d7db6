#!/usr/bin/env python3
"""
Decides every pair of a dataset and reports precision, recall and F-measure.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from xte.config import KNOWLEDGE_BASES
from xte.pipeline import EntailmentPipeline
from xte.utils.logger import setup_logging


def main():
    parser = argparse.ArgumentParser(description="Evaluate the entailment pipeline on a dataset")
    parser.add_argument("--config", type=str, required=True,
                       help="Path to the configuration file")
    parser.add_argument("--input", type=str, required=True,
                       help="Dataset file in the T/H/A text format")
    parser.add_argument("--output", type=str, default="reports/results.txt",
                       help="Output file for the decisions")
    parser.add_argument("--kb", type=str, choices=list(KNOWLEDGE_BASES), default="WN",
                       help="Knowledge base used by graph navigation")
    parser.add_argument("--metrics", type=str, default=None,
                       help="Optional JSON file for the metrics")
    parser.add_argument("--log_file", type=str, default=None,
                       help="Optional log file")

    args = parser.parse_args()
    setup_logging(log_path=args.log_file)

    print("Setting up pipeline...")
    pipeline = EntailmentPipeline.from_config(args.config)

    print(f"Evaluating {args.input} with knowledge base {args.kb}...")
    metrics = pipeline.decide_dataset(args.input, args.output, args.kb)
    if not metrics:
        print(f"Could not read {args.input}, nothing was written")
        sys.exit(1)

    if args.metrics:
        with open(args.metrics, 'w') as f:
            json.dump(metrics, f, indent=2)
        print(f"Metrics saved to {args.metrics}")

    print(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
