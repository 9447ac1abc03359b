import json
import os
import tempfile
import unittest

import torch

from bin_inspector.backends.records import FunctionRecord
from bin_inspector.core.optimization import infer_opt, optimization_score
from bin_inspector.errors import ClassifierUnavailable
from bin_inspector.ml.classifier import LstmOptimizationClassifier
from bin_inspector.ml.model import OptimizationLstm
from bin_inspector.ml.vocab import OOV_INDEX, PAD_INDEX, encode_tokens
from r2pipe_mock import FixedClassifier, R2PipeMock, make_session


class FailingClassifier:
    def classify(self, text: str) -> int:
        raise ClassifierUnavailable("model went away")


class TestOptimizationScore(unittest.TestCase):
    def test_mean_of_labels(self):
        self.assertEqual(optimization_score([1, 1, 0, 0]), 50)
        self.assertEqual(optimization_score([1, 1, 1]), 100)
        self.assertEqual(optimization_score([1, 0, 0]), 33)

    def test_halves_round_up(self):
        self.assertEqual(optimization_score([1] + [0] * 7), 13)
        self.assertEqual(optimization_score([1, 1, 1] + [0] * 5), 38)

    def test_empty_subset(self):
        self.assertEqual(optimization_score([]), 0)


class TestInferOpt(unittest.TestCase):
    def setUp(self):
        self.pipe = R2PipeMock(disasm={"f": "push\nmov\nret", "g": "ret"})
        self.ranked = [FunctionRecord(name="f", addr=1, cc=4), FunctionRecord(name="g", addr=2, cc=1)]

    def test_disassembly_flattened_to_one_line(self):
        classifier = FixedClassifier([1, 0])
        self.assertEqual(infer_opt(make_session(self.pipe), self.ranked, classifier), 50)
        self.assertEqual(classifier.seen, ["push mov ret", "ret"])

    def test_no_functions(self):
        self.assertEqual(infer_opt(make_session(self.pipe), [], FixedClassifier([])), 0)

    def test_failed_functions_left_out(self):
        self.assertEqual(infer_opt(make_session(self.pipe), self.ranked, FailingClassifier()), 0)


class TestEncodeTokens(unittest.TestCase):
    def test_pad_and_unknown(self):
        vocab = {"push": 2, "mov": 3, "ret": 4}
        encoded = encode_tokens("push  mov\tcall ret", vocab, sequence_length=6)
        self.assertEqual(encoded, [2, 3, OOV_INDEX, 4, PAD_INDEX, PAD_INDEX])

    def test_truncate(self):
        self.assertEqual(len(encode_tokens("mov " * 100, {"mov": 2})), 64)

    def test_limit(self):
        self.assertEqual(encode_tokens("mov ret", {"mov": 2, "ret": 9}, 2, limit=5), [2, OOV_INDEX])


class TestLstmClassifier(unittest.TestCase):
    def _write_assets(self, asset_dir):
        torch.manual_seed(0)
        model = OptimizationLstm(vocab_size=8, embedding_dim=4, lstm_dim=6)
        torch.save(model.state_dict(), os.path.join(asset_dir, "model.pt"))
        with open(os.path.join(asset_dir, "vocab.json"), "w") as f:
            json.dump({"push": 2, "mov": 3, "ret": 4}, f)
        with open(os.path.join(asset_dir, "config.json"), "w") as f:
            json.dump({"vocab_size": 8, "embedding_dim": 4, "lstm_dim": 6}, f)

    def test_loads_and_classifies(self):
        with tempfile.TemporaryDirectory() as asset_dir:
            self._write_assets(asset_dir)
            classifier = LstmOptimizationClassifier.from_assets(asset_dir, device="cpu", sequence_length=64)
            self.assertIn(classifier.classify("push mov ret unknownword"), (0, 1))
            self.assertIn(classifier.classify(""), (0, 1))

    def test_missing_assets(self):
        with tempfile.TemporaryDirectory() as asset_dir:
            with self.assertRaises(ClassifierUnavailable):
                LstmOptimizationClassifier.from_assets(asset_dir, device="cpu")

    def test_incomplete_config(self):
        with tempfile.TemporaryDirectory() as asset_dir:
            self._write_assets(asset_dir)
            with open(os.path.join(asset_dir, "config.json"), "w") as f:
                json.dump({"vocab_size": 8}, f)
            with self.assertRaises(ClassifierUnavailable):
                LstmOptimizationClassifier.from_assets(asset_dir, device="cpu")


if __name__ == "__main__":
    unittest.main()
