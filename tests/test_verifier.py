import os
import subprocess
import unittest
from unittest.mock import patch

from lok_core.board import Board
from lok_core.errors import VerifierError
from lok_core.verifier import (
    CellSnapshot,
    CommandVerifier,
    find_verifier_exe,
    parse_verdict,
    snapshot_to_arg,
)


class DummyProc:
    def __init__(self, out: str, returncode: int = 0, err: str = ''):
        self.stdout = out
        self.stderr = err
        self.returncode = returncode


class TestVerdictParsing(unittest.TestCase):
    def test_given_ok_line_when_parsing_then_success(self):
        self.assertIsNone(parse_verdict("ok\n"))
        self.assertIsNone(parse_verdict("  ok extra ignored"))

    def test_given_fail_line_when_parsing_then_detail_returned_verbatim(self):
        self.assertEqual(parse_verdict("fail path broken at 1,2"), "path broken at 1,2")
        self.assertEqual(parse_verdict("fail"), "")

    def test_given_garbage_when_parsing_then_verifier_error(self):
        for line in ("", "OK", "maybe", "1 2 3"):
            with self.subTest(line=line):
                with self.assertRaises(VerifierError):
                    parse_verdict(line)

    def test_given_snapshot_when_encoded_then_dimensions_then_cell_records(self):
        snap = (CellSnapshot(0, 0, 'L', True, 0), CellSnapshot(1, 2, 'O', False, 3))
        self.assertEqual(snapshot_to_arg(3, 2, snap), "3,2;0,0,L,1,0;1,2,O,0,3")
        self.assertEqual(snapshot_to_arg(1, 1, ()), "1,1")


class TestCommandVerifier(unittest.TestCase):
    def test_given_injected_runner_when_verifying_then_exe_and_arg_forwarded(self):
        seen = []

        def run(exe, arg, timeout):
            seen.append((exe, arg, timeout))
            return "fail nope"

        board = Board.from_text("LO_\nL_O")
        verifier = CommandVerifier('judge', width=3, height=2, timeout=1.5, run_proc=run)
        board.verifier = verifier
        board.blacken(0, 0)
        self.assertEqual(board.commit_and_check_solution(), "nope")
        self.assertEqual(seen, [('judge', "3,2;0,0,L,1,0;0,1,O,0,0;1,0,L,0,0;1,2,O,0,0", 1.5)])

    def test_given_subprocess_ok_when_verifying_then_success(self):
        verifier = CommandVerifier('judge', width=1, height=1)
        with patch('lok_core.verifier.subprocess.run', return_value=DummyProc("ok\n")) as run:
            self.assertIsNone(verifier.verify((CellSnapshot(0, 0, 'A', False, 0),)))
        cmd = run.call_args[0][0]
        self.assertEqual(cmd, ['judge', '--snapshot', '1,1;0,0,A,0,0'])

    def test_given_nonzero_exit_when_verifying_then_verifier_error(self):
        verifier = CommandVerifier('judge', width=1, height=1)
        with patch('lok_core.verifier.subprocess.run', return_value=DummyProc("", returncode=3, err="boom")):
            with self.assertRaises(VerifierError) as ctx:
                verifier.verify(())
        self.assertIn('boom', str(ctx.exception))

    def test_given_timeout_when_verifying_then_verifier_error(self):
        verifier = CommandVerifier('judge', width=1, height=1, timeout=0.1)
        exc = subprocess.TimeoutExpired(cmd='judge', timeout=0.1)
        with patch('lok_core.verifier.subprocess.run', side_effect=exc):
            with self.assertRaises(VerifierError):
                verifier.verify(())

    def test_given_missing_exe_when_verifying_then_verifier_error(self):
        verifier = CommandVerifier('judge', width=1, height=1)
        with patch('lok_core.verifier.subprocess.run', side_effect=FileNotFoundError('judge')):
            with self.assertRaises(VerifierError):
                verifier.verify(())


class TestFindVerifierExe(unittest.TestCase):
    def test_given_configured_exe_executable_when_resolving_then_configured_wins(self):
        with patch('lok_core.verifier.shutil.which', return_value='/usr/bin/lok_verifier'), \
             patch('lok_core.verifier.os.path.isfile', return_value=True), \
             patch('lok_core.verifier.os.access', return_value=True):
            self.assertEqual(find_verifier_exe('/opt/judge'), '/opt/judge')

    def test_given_configured_exe_missing_when_resolving_then_falls_back_to_path(self):
        def isfile(path):
            return path == '/usr/bin/lok_verifier'

        with patch('lok_core.verifier.shutil.which', return_value='/usr/bin/lok_verifier'), \
             patch('lok_core.verifier.os.path.isfile', side_effect=isfile), \
             patch('lok_core.verifier.os.access', return_value=True):
            self.assertEqual(find_verifier_exe('/missing/judge'), '/usr/bin/lok_verifier')

    def test_given_env_var_only_when_resolving_then_environment_not_consulted(self):
        with patch.dict(os.environ, {'LOK_VERIFIER_EXE': '/opt/judge'}), \
             patch('lok_core.verifier.shutil.which', return_value=None), \
             patch('lok_core.verifier.os.path.isfile', return_value=True), \
             patch('lok_core.verifier.os.access', return_value=True):
            self.assertIsNone(find_verifier_exe())

    def test_given_nothing_configured_when_resolving_then_none(self):
        env = {k: v for k, v in os.environ.items() if k != 'LOK_VERIFIER_EXE'}
        with patch.dict(os.environ, env, clear=True), \
             patch('lok_core.verifier.shutil.which', return_value=None):
            self.assertIsNone(find_verifier_exe())

    def test_given_exe_on_path_when_resolving_then_path_result(self):
        env = {k: v for k, v in os.environ.items() if k != 'LOK_VERIFIER_EXE'}
        with patch.dict(os.environ, env, clear=True), \
             patch('lok_core.verifier.shutil.which', return_value='/usr/bin/lok_verifier'), \
             patch('lok_core.verifier.os.path.isfile', return_value=True), \
             patch('lok_core.verifier.os.access', return_value=True):
            self.assertEqual(find_verifier_exe(), '/usr/bin/lok_verifier')


if __name__ == '__main__':
    unittest.main()
