import torch
from torch import nn


class OptimizationLstm(nn.Module):
    """
    Embedding followed by two LSTMs over the same embedded sequence; the
    second one starts from the final state of the first. A linear head scores
    every time step.
    """

    def __init__(self, vocab_size: int, embedding_dim: int, lstm_dim: int, num_classes: int = 2):
        super().__init__()
        self.embedding = nn.Embedding(vocab_size, embedding_dim)
        self.lstm_a = nn.LSTM(embedding_dim, lstm_dim, batch_first=True)
        self.lstm_b = nn.LSTM(embedding_dim, lstm_dim, batch_first=True)
        self.output = nn.Linear(lstm_dim, num_classes)

    def forward(self, tokens: torch.Tensor) -> torch.Tensor:
        # tokens: (batch, seq) -> logits: (batch, seq, num_classes)
        emb = self.embedding(tokens)
        _, state = self.lstm_a(emb)
        out, _ = self.lstm_b(emb, state)
        return self.output(out)
