"""
Token encoding for the optimization classifier.

Disassembly text is split on whitespace and each word mapped through the
training vocabulary. Index 0 pads, index 1 stands for any word the
vocabulary does not know.
"""
import json
from typing import Dict, List, Optional

PAD_INDEX = 0
OOV_INDEX = 1


def load_vocab(path: str) -> Dict[str, int]:
    with open(path) as f:
        vocab = json.load(f)
    if not isinstance(vocab, dict):
        raise ValueError(f"{path}: expected a word -> index mapping")
    return {str(word): int(idx) for word, idx in vocab.items()}


def encode_tokens(text: str, vocab: Dict[str, int], sequence_length: int = 64, limit: Optional[int] = None) -> List[int]:
    """
    Map ``text`` to exactly ``sequence_length`` indices.

    Args:
        text: Whitespace separated disassembly.
        vocab: word -> index mapping.
        sequence_length: Output length; longer input is truncated, shorter padded.
        limit: If given, indices >= limit are treated as unknown words.
    """
    encoded = []
    for word in text.split():
        idx = vocab.get(word, OOV_INDEX)
        if limit is not None and idx >= limit:
            idx = OOV_INDEX
        encoded.append(idx)
    encoded = encoded[:sequence_length]
    encoded.extend([PAD_INDEX] * (sequence_length - len(encoded)))
    return encoded
