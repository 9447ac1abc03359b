import unittest

from bin_inspector.core.syscalls import find_signal_wrappers, find_strip, sensitive_syscalls
from bin_inspector.errors import QueryError, RenameFailed
from r2pipe_mock import R2PipeMock, make_session


def stripped_pipe(**overrides):
    script = dict(
        syscalls=[
            {"name": "ptrace", "addr": 0x401010},
            {"name": "sigaction", "addr": 0x402010},
        ],
        enclosing={0x401010: "f1", 0x402010: "f2"},
        xrefs={"f2": [{"fcn_name": "g", "fcn_addr": 0x403000, "from": 0x403008}]},
        disasm={"f1": "mov\nsyscall\nret", "f2": "mov\nsyscall\nret", "g": "push\nmov\ncall\npop\nret"},
    )
    script.update(overrides)
    return R2PipeMock(**script)


class TestFindStrip(unittest.TestCase):
    def test_renames_sites_and_signal_wrapper(self):
        pipe = stripped_pipe()
        self.assertEqual(find_strip(make_session(pipe)), ["f1_ptrace", "f2_sigaction", "g_signal"])
        self.assertEqual(pipe.renames, [("f1", "f1_ptrace"), ("f2", "f2_sigaction"), ("g", "g_signal")])

    def test_rerun_does_not_stack_suffixes(self):
        pipe = stripped_pipe()
        session = make_session(pipe)
        first = find_strip(session)
        second = find_strip(session)
        self.assertEqual(first, second)
        self.assertEqual(len(pipe.renames), 3)
        self.assertFalse(any("_ptrace_ptrace" in name or "_signal_signal" in name for name in second))

    def test_two_sites_in_one_function(self):
        pipe = R2PipeMock(
            syscalls=[
                {"name": "ptrace", "addr": 0x401010},
                {"name": "prctl", "addr": 0x401040},
            ],
            enclosing={0x401010: "f", 0x401040: "f"},
            disasm={"f": "svc\nsvc\nret"},
        )
        session = make_session(pipe)
        self.assertEqual(find_strip(session), ["f_ptrace", "f_ptrace_prctl"])
        self.assertEqual(pipe.renames, [("f", "f_ptrace"), ("f_ptrace", "f_ptrace_prctl")])
        self.assertEqual(find_strip(session), ["f_ptrace_prctl"])
        self.assertEqual(len(pipe.renames), 2)

    def test_caller_with_trap_is_not_a_wrapper(self):
        pipe = stripped_pipe(
            xrefs={"f2": [
                {"fcn_name": "h", "fcn_addr": 0x404000, "from": 0x404010},
                {"fcn_name": "g", "fcn_addr": 0x403000, "from": 0x403008},
            ]},
            disasm={"g": "push\ncall\nret", "h": "mov\nsvc\nret"},
        )
        self.assertEqual(find_strip(make_session(pipe)), ["f1_ptrace", "f2_sigaction", "g_signal"])
        self.assertNotIn(("h", "h_signal"), pipe.renames)

    def test_wrappers_deduplicated_and_sorted_by_address(self):
        pipe = stripped_pipe(
            syscalls=[{"name": "rt_sigaction", "addr": 0x402010}],
            xrefs={"f2": [
                {"fcn_name": "w2", "fcn_addr": 0x405000, "from": 0x405010},
                {"fcn_name": "w1", "fcn_addr": 0x403000, "from": 0x403008},
                {"fcn_name": "w2", "fcn_addr": 0x405000, "from": 0x405040},
                {"fcn_name": None, "fcn_addr": None, "from": 0x406000},
            ]},
            disasm={"w1": "ret", "w2": "ret"},
        )
        self.assertEqual(find_strip(make_session(pipe)), ["f2_rt_sigaction", "w1_signal", "w2_signal"])

    def test_arch_prefixed_and_unrelated_syscalls_ignored(self):
        pipe = stripped_pipe(syscalls=[
            {"name": "arch_prctl", "addr": 0x401010},
            {"name": "write", "addr": 0x402010},
        ])
        session = make_session(pipe)
        self.assertEqual(sensitive_syscalls(session), [])
        self.assertEqual(find_strip(session), [])
        self.assertEqual(pipe.renames, [])

    def test_signal_wrappers_for_unknown_function(self):
        pipe = stripped_pipe()
        self.assertEqual(find_signal_wrappers(make_session(pipe), "nothing"), [])

    def test_refused_rename_is_fatal(self):
        pipe = stripped_pipe(refuse_renames=True)
        with self.assertRaises(RenameFailed):
            find_strip(make_session(pipe))

    def test_unresolvable_site_is_a_query_error(self):
        pipe = stripped_pipe(enclosing={})
        with self.assertRaises(QueryError):
            find_strip(make_session(pipe))


if __name__ == "__main__":
    unittest.main()
