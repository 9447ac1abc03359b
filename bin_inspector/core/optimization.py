import logging
from typing import Iterable, List

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.backends.records import FunctionRecord
from bin_inspector.errors import ClassifierUnavailable
from bin_inspector.ml.classifier import OptimizationClassifier

logger = logging.getLogger(__name__)


def optimization_score(labels: List[int]) -> int:
    """Percentage of functions labelled optimized; 0 when nothing was classified."""
    if not labels:
        return 0
    # half-up, in integers: 1 of 8 scores 13
    return (200 * sum(labels) + len(labels)) // (2 * len(labels))


def infer_opt(session: AnalysisSession, ranked: Iterable[FunctionRecord], classifier: OptimizationClassifier) -> int:
    """
    Classify the flattened disassembly of each ranked function.

    A function the classifier fails on is left out of the score.
    """
    labels = []
    for fcn in ranked:
        if not fcn.name:
            continue
        disas = session.flat_disassembly(fcn.name).replace("\n", " ")
        try:
            labels.append(classifier.classify(disas))
        except ClassifierUnavailable as e:
            logger.warning(f"Skipping {fcn.name}: {e}")
    score = optimization_score(labels)
    logger.info(f"Optimization estimate {score}% over {len(labels)} function(s)")
    return score
