"""
Tests for the qrng-range command line (cli.py). The source call is patched
out, so nothing here touches the network.

Run:
    python -m pytest tests/test_cli.py -v
"""

import io
import unittest
from unittest import mock

import cli
from rng.errors import SourceFailureError


def fake_source(*replies):
    calls = []
    replies = iter(replies)

    async def fetch(length, profile, client=None):
        calls.append((length, profile.kind))
        reply = next(replies)
        if isinstance(reply, Exception):
            raise reply
        return reply(length) if callable(reply) else reply

    return fetch, calls


def run(argv, fetch):
    out, err = io.StringIO(), io.StringIO()
    with mock.patch.object(cli, "fetch_raw", fetch):
        code = cli.main(argv, out=out, err=err)
    return code, out.getvalue(), err.getvalue()


class TestCli(unittest.TestCase):

    def test_minimum_defaults_to_zero(self):
        fetch, calls = fake_source([0, 1, 1, 0])
        code, out, _ = run(["1", "4"], fetch)
        self.assertEqual(code, 0)
        self.assertEqual(out, "0\n1\n1\n0\n")
        self.assertEqual(calls, [(4, "uint8")])

    def test_hex_arguments_and_base(self):
        fetch, calls = fake_source([0x10, 0x1F, 0xFF])
        code, out, _ = run(["-b", "16", "0x10", "0x1F", "3"], fetch)
        self.assertEqual(code, 0)
        # 0xFF is above maximum and folds to 0x10 + (0xFF - 0x20) % 16
        self.assertEqual(out.split(), ["10", "1F", "1F"])

    def test_base_two(self):
        fetch, _ = fake_source([5])
        code, out, _ = run(["--base", "2", "0", "7", "1"], fetch)
        self.assertEqual((code, out), (0, "101\n"))

    def test_uint16_source_for_larger_maximum(self):
        fetch, calls = fake_source([300])
        code, out, _ = run(["1000", "1"], fetch)
        self.assertEqual((code, out), (0, "300\n"))
        self.assertEqual(calls, [(1, "uint16")])

    def test_amount_zero_is_a_no_op(self):
        fetch, calls = fake_source()
        code, out, _ = run(["10", "0"], fetch)
        self.assertEqual((code, out, calls), (0, "", []))

    def test_invalid_range(self):
        fetch, calls = fake_source()
        for argv in (["5", "5", "1"], ["6", "5", "1"], ["0", "1"]):
            code, _, err = run(argv, fetch)
            self.assertEqual(code, 1, argv)
        self.assertEqual(calls, [])

    def test_maximum_too_large(self):
        fetch, _ = fake_source()
        code, _, err = run(["0x1" + "0" * 2048, "1"], fetch)
        self.assertEqual(code, 1)
        self.assertIn("blocks", err)

    def test_malformed_number(self):
        fetch, _ = fake_source()
        code, _, err = run(["0xZZ", "1"], fetch)
        self.assertEqual(code, 1)
        self.assertIn("invalid digit", err)

    def test_huge_minimum_above_maximum(self):
        fetch, calls = fake_source()
        code, _, err = run(["0x" + "F" * 4000, "1", "1"], fetch)
        self.assertEqual(code, 1)
        self.assertIn("0xFFF", err)
        self.assertEqual(calls, [])

    def test_too_many_numbers(self):
        fetch, _ = fake_source()
        code, _, _ = run(["1", "2", "3", "4"], fetch)
        self.assertEqual(code, 1)

    def test_bad_base_exits_with_usage_error(self):
        fetch, _ = fake_source()
        with mock.patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit) as ctx:
                run(["-b", "17", "10", "1"], fetch)
        self.assertEqual(ctx.exception.code, 1)

    def test_source_failure_keeps_partial_output(self):
        fetch, calls = fake_source(lambda n: [1] * n, SourceFailureError("success=false"))
        code, out, err = run(["0", "1", "1030"], fetch)
        self.assertEqual(code, 2)
        self.assertEqual(out.count("\n"), 1024)
        self.assertIn("6 samples not delivered", err)
        self.assertEqual([c[0] for c in calls], [1024, 6])


if __name__ == "__main__":
    unittest.main(verbosity=2)
