import unittest

from bin_inspector.backends.records import FunctionRecord
from bin_inspector.core.flattening import (
    JumpType,
    check_flat_cfg,
    find_dispatcher,
    is_flattened,
    parse_block_graph,
    rank_functions,
)
from r2pipe_mock import R2PipeMock, make_session

FLATTENED = """flowchart TD
    A --> D
    B --> D
    C --> D
    D --> A
    D --> B
    D --> C: case_2
"""

BRANCHING = """A --> D
B --> D: true
C --> D
D --> A
"""


class TestParseBlockGraph(unittest.TestCase):
    def test_edges_and_jump_types(self):
        graph = parse_block_graph("0x10 --> 0x20\n  0x20 --> 0x30: false\n0x20 --> 0x40 : true\n")
        self.assertEqual(list(graph.nodes), ["0x10", "0x20", "0x30", "0x40"])
        self.assertEqual(graph.edges["0x10", "0x20"]["jump"], JumpType.UNCONDITIONAL)
        self.assertEqual(graph.edges["0x20", "0x30"]["jump"], JumpType.CONDITIONAL)
        self.assertEqual(graph.edges["0x20", "0x40"]["jump"], JumpType.CONDITIONAL)

    def test_malformed_lines_skipped(self):
        graph = parse_block_graph('flowchart TD\n0x10["mov"]\n --> 0x20\n0x30 --> \n0x40 --> 0x50\n')
        self.assertEqual(list(graph.edges), [("0x40", "0x50")])

    def test_empty(self):
        self.assertEqual(parse_block_graph("").number_of_nodes(), 0)
        self.assertIsNone(find_dispatcher(parse_block_graph("")))
        self.assertFalse(is_flattened(parse_block_graph("")))


class TestDispatcher(unittest.TestCase):
    def test_max_in_degree(self):
        self.assertEqual(find_dispatcher(parse_block_graph(FLATTENED)), "D")

    def test_tie_goes_to_first_node(self):
        graph = parse_block_graph("X --> A\nY --> A\nX --> B\nY --> B\n")
        self.assertEqual(find_dispatcher(graph), "A")

    def test_accepted(self):
        self.assertTrue(is_flattened(parse_block_graph(FLATTENED)))

    def test_conditional_fan_in_rejected(self):
        self.assertFalse(is_flattened(parse_block_graph(BRANCHING)))

    def test_conditional_back_edge_not_enough(self):
        self.assertFalse(is_flattened(parse_block_graph("A --> D\nB --> D\nC --> D\nD --> A: x\n")))

    def test_target_outside_window(self):
        text = "n1 --> n2\nn3 --> n4\nn5 --> n6\na --> D\nb --> D\nc --> D\nD --> n6\n"
        graph = parse_block_graph(text)
        self.assertEqual(find_dispatcher(graph), "D")
        self.assertFalse(is_flattened(graph, window=5))
        self.assertTrue(is_flattened(graph, window=6))


class TestCheckFlatCfg(unittest.TestCase):
    def test_rank_functions(self):
        records = [
            FunctionRecord(name="a", addr=1, cc=3),
            FunctionRecord(name="b", addr=2, cc=10),
            FunctionRecord(name="c", addr=3, cc=1),
            FunctionRecord(name="d", addr=4, cc=7),
        ]
        self.assertEqual([f.name for f in rank_functions(records, top=2)], ["b", "d"])
        self.assertEqual([f.name for f in rank_functions(records, top=25)], ["b", "d", "a", "c"])
        self.assertEqual(rank_functions([], top=25), [])

    def test_flagged_once_in_rank_order(self):
        pipe = R2PipeMock(graphs={"flat": FLATTENED, "branchy": BRANCHING, "flat2": FLATTENED})
        ranked = [
            FunctionRecord(name="flat2", addr=3, cc=30),
            FunctionRecord(name="branchy", addr=2, cc=20),
            FunctionRecord(name="flat", addr=1, cc=10),
            FunctionRecord(name="empty", addr=4, cc=5),
        ]
        self.assertEqual(check_flat_cfg(make_session(pipe), ranked), ["flat2", "flat"])

    def test_same_function_listed_twice(self):
        pipe = R2PipeMock(graphs={"flat": FLATTENED})
        ranked = [FunctionRecord(name="flat", addr=1, cc=10), FunctionRecord(name="flat", addr=1, cc=10)]
        self.assertEqual(check_flat_cfg(make_session(pipe), ranked), ["flat"])


if __name__ == "__main__":
    unittest.main()
