"""
End-to-end entailment pipeline: routing, context veto, model decision,
dataset evaluation and threshold training.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import wandb
from tqdm import tqdm

from .config import EntailmentConfig, read_config, write_threshold
from .data.datasets import TextDatasetLoader, get_dataset_loader, write_results
from .data.preprocessing import Preprocessor, SpacyPreprocessor
from .data.schema import Decision, EntailmentDecision, EntailmentPair, ModelName
from .evaluation.metrics import format_summary, metrics_for
from .models.factory import ModelFactory
from .models.graph_navigation import GraphNavigationModel
from .models.router import ModelRouter
from .reasoning.context import ContextVeto
from .reasoning.similarity import SimilarityScorer, create_scorer
from .rules.knowledge import DefinitionGraph
from .rules.lexicon import IDFCalculator, Lexicon, TableLexicon, WordNetLexicon
from .utils.logger import get_logger

logger = get_logger("pipeline")

DEFAULT_KB = "WN"


@dataclass(frozen=True)
class EntailmentContext:
    """Shared resources, built once and read-only afterwards."""
    config: EntailmentConfig
    config_path: Optional[str]
    preprocessor: Preprocessor
    lexicon: Lexicon
    scorer: SimilarityScorer


def build_lexicon(config: EntailmentConfig) -> Lexicon:
    """Use the table files when configured, WordNet otherwise."""
    if config.synonyms or config.antonyms or config.hypernyms:
        return TableLexicon.from_files(config.synonyms, config.antonyms, config.hypernyms)
    return WordNetLexicon()


def build_context(config_path: str) -> EntailmentContext:
    """Load every shared resource named in a configuration file."""
    config = read_config(config_path)

    preprocessor = SpacyPreprocessor(config.spacy_model, wordnet_path=config.wnpath)

    return EntailmentContext(
        config=config,
        config_path=config_path,
        preprocessor=preprocessor,
        lexicon=build_lexicon(config),
        scorer=create_scorer(config),
    )


class EntailmentPipeline:
    """Decides entailment for single pairs and whole datasets."""

    def __init__(self, context: EntailmentContext):
        self.context = context
        self.config = context.config
        self.router = ModelRouter(context.preprocessor)
        self.veto = ContextVeto(context.preprocessor, context.lexicon)
        self.structural = ModelFactory.create_model("structural_similarity", preprocessor=context.preprocessor,
                                                     threshold=context.config.tedthreshold)
        self._navigators: Dict[str, GraphNavigationModel] = {}

        if self.config.use_wandb:
            wandb.init(project=self.config.wandb_project, config=self.config.model_dump())

    @classmethod
    def from_config(cls, config_path: str) -> "EntailmentPipeline":
        return cls(build_context(config_path))

    def navigator(self, knowledge_base: str) -> GraphNavigationModel:
        """Get the graph navigation model of a knowledge base, loading its graph once."""
        kb = knowledge_base.upper()
        if kb not in self._navigators:
            graph_path = self.config.graph_path(kb)
            if not graph_path:
                raise ValueError(f"No definitions graph configured for knowledge base {kb}")

            graph = DefinitionGraph.load(graph_path)
            idf = IDFCalculator.from_file(self.config.corpus_path(kb))
            preprocessor = self.context.preprocessor.with_idf(idf)

            self._navigators[kb] = ModelFactory.create_model(
                "graph_navigation",
                preprocessor=preprocessor,
                lexicon=self.context.lexicon,
                graph=graph,
                scorer=self.context.scorer,
            )
        return self._navigators[kb]

    def decide(self, text: str, hyp: str, knowledge_base: str = DEFAULT_KB) -> EntailmentDecision:
        """Route the pair, apply the context veto, then run the chosen model."""
        strategy = self.router.choose_strategy(text, hyp)

        veto = self.veto.check_context(text, hyp)
        if veto.decision == Decision.NO:
            veto.model = strategy
            return veto

        if strategy == ModelName.GRAPH_NAVIGATION:
            return self.navigator(knowledge_base).decide(text, hyp)
        return self.structural.decide(text, hyp)

    def decide_one(self, text: str, hyp: str, knowledge_base: str = DEFAULT_KB) -> str:
        """Decide a single pair and describe the outcome."""
        decision = self.decide(text, hyp, knowledge_base)

        output = f"Using model '{decision.model.value}'\nEntailment: {decision.decision.value}"
        if decision.justification:
            output += "\nJustification:\n" + "\n".join(decision.justification_lines())
        return output

    def decide_pairs(self, pairs: List[EntailmentPair],
                     knowledge_base: str = DEFAULT_KB) -> List[Tuple[EntailmentPair, EntailmentDecision]]:
        results = []
        for pair in tqdm(pairs, desc="Deciding"):
            results.append((pair, self.decide(pair.text, pair.hypothesis, knowledge_base)))
        return results

    def decide_dataset(self, input_path: str, output_path: str,
                       knowledge_base: str = DEFAULT_KB) -> Dict[str, Dict[str, Any]]:
        """Decide every pair of a dataset file, write the results and print the summary."""
        dataset = TextDatasetLoader().load(input_path)
        if not dataset.ok:
            logger.error("Skipping %s, dataset could not be loaded: %s", input_path, dataset.message)
            return {}

        pairs = dataset.value
        logger.info("Deciding %d pairs with knowledge base %s", len(pairs), knowledge_base)

        results = self.decide_pairs(pairs, knowledge_base)
        write_results(results, output_path)

        print(format_summary(results))

        metrics = {"overall": metrics_for(results)}
        for model in ModelName:
            metrics[model.value] = metrics_for(results, model)

        if self.config.use_wandb:
            wandb.log({f"{section}/{key}": value
                       for section, values in metrics.items() for key, value in values.items()})

        return metrics

    def train(self, dataset_path: str, dataset_format: str = "text", **loader_kwargs) -> Tuple[float, float]:
        """Learn the structural similarity threshold and store it in the configuration."""
        loader = get_dataset_loader(dataset_format, **loader_kwargs)
        result = loader.load(dataset_path)
        if not result.ok:
            logger.error("Training data could not be loaded: %s", result.message)
            raise ValueError(f"Training data could not be loaded ({result.error.value}): {result.message}")

        logger.info("Training on %d pairs from %s", len(result.value), loader.get_config())
        threshold, f1 = self.structural.train(result.value, self.config.model_dump())

        if self.context.config_path:
            write_threshold(self.context.config_path, threshold)

        return threshold, f1
