import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Dict, Optional

import torch

from bin_inspector import config
from bin_inspector.errors import ClassifierUnavailable
from .model import OptimizationLstm
from .vocab import encode_tokens, load_vocab

logger = logging.getLogger(__name__)

VOCAB_FILE = "vocab.json"
CONFIG_FILE = "config.json"
MODEL_FILE = "model.pt"


class OptimizationClassifier(ABC):
    """Labels a function's disassembly as unoptimized (0) or optimized (1)."""

    @abstractmethod
    def classify(self, text: str) -> int:
        pass


class LstmOptimizationClassifier(OptimizationClassifier):
    def __init__(self, model: OptimizationLstm, vocab: Dict[str, int], device: str = "cpu", sequence_length: int = 64):
        self.device = torch.device(device)
        self.model = model.to(self.device)
        self.model.eval()
        self.vocab = vocab
        self.sequence_length = sequence_length

    @classmethod
    def from_assets(
        cls,
        asset_dir: Optional[str] = None,
        device: Optional[str] = None,
        sequence_length: Optional[int] = None,
    ) -> "LstmOptimizationClassifier":
        """
        Load vocab.json, config.json and model.pt from ``asset_dir``.

        Args:
            asset_dir: Artifact directory; defaults to ``config.asset_dir()``.
            device: torch device string; defaults to config.yaml.
            sequence_length: Token window; defaults to config.yaml.

        Raises:
            ClassifierUnavailable: an artifact is missing or does not load.
        """
        asset_dir = asset_dir or config.asset_dir()
        device = device or config.classifier_device()
        sequence_length = sequence_length or config.sequence_length()
        try:
            vocab = load_vocab(os.path.join(asset_dir, VOCAB_FILE))
            with open(os.path.join(asset_dir, CONFIG_FILE)) as f:
                model_conf = json.load(f)
            model = OptimizationLstm(
                vocab_size=int(model_conf["vocab_size"]),
                embedding_dim=int(model_conf["embedding_dim"]),
                lstm_dim=int(model_conf["lstm_dim"]),
                num_classes=int(model_conf.get("num_classes", 2)),
            )
            state = torch.load(os.path.join(asset_dir, MODEL_FILE), map_location=device, weights_only=True)
            model.load_state_dict(state)
        except (OSError, ValueError, KeyError, TypeError, RuntimeError) as e:
            raise ClassifierUnavailable(f"Cannot load classifier from {asset_dir}: {e}") from e
        logger.info(f"Loaded optimization classifier from {asset_dir} ({len(vocab)} words)")
        return cls(model, vocab, device=device, sequence_length=sequence_length)

    def classify(self, text: str) -> int:
        tokens = encode_tokens(
            text, self.vocab, self.sequence_length, limit=self.model.embedding.num_embeddings
        )
        try:
            with torch.no_grad():
                batch = torch.tensor([tokens], dtype=torch.long, device=self.device)
                logits = self.model(batch)[0, 0]
                label = int(torch.argmax(torch.softmax(logits, dim=-1)).item())
        except RuntimeError as e:
            raise ClassifierUnavailable(f"Classifier inference failed: {e}") from e
        return 1 if label else 0
