"""
Tests for the raw sample source client (sources/qrng.py), against an
httpx.MockTransport instead of the live service.

Run:
    python -m pytest tests/test_qrng_source.py -v
"""

import json
import unittest

import httpx

from rng.errors import SourceFailureError
from rng.profile import select_profile
from sources.qrng import fetch_raw, parse_response

U8 = select_profile(255)
U16 = select_profile(65535)
HEX3 = select_profile(0x10000)      # 3-byte blocks


def mock_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseResponse(unittest.TestCase):

    def test_uint8(self):
        self.assertEqual(parse_response({"success": True, "data": [0, 7, 255]}, 3, U8), [0, 7, 255])

    def test_hex16_case_insensitive(self):
        payload = {"success": True, "data": ["00ff0a", "FFFFFF", "0A0b0C"]}
        self.assertEqual(parse_response(payload, 3, HEX3), [0xFF0A, 0xFFFFFF, 0x0A0B0C])

    def test_hex16_block_length_is_exact(self):
        for bad in ("ff", "0ff", "00ff0a0", "0000ff0a"):
            with self.assertRaises(SourceFailureError, msg=bad):
                parse_response({"success": True, "data": [bad]}, 1, HEX3)

    def test_success_false(self):
        with self.assertRaises(SourceFailureError):
            parse_response({"success": False}, 1, U8)

    def test_missing_success(self):
        with self.assertRaises(SourceFailureError):
            parse_response({"data": [1]}, 1, U8)

    def test_wrong_length(self):
        with self.assertRaises(SourceFailureError):
            parse_response({"success": True, "data": [1, 2]}, 3, U8)

    def test_out_of_range(self):
        with self.assertRaises(SourceFailureError):
            parse_response({"success": True, "data": [256]}, 1, U8)
        with self.assertRaises(SourceFailureError):
            parse_response({"success": True, "data": [65536]}, 1, U16)

    def test_malformed_values(self):
        for bad in (["zz"], [None], [True], [1.5]):
            with self.assertRaises(SourceFailureError, msg=bad):
                parse_response({"success": True, "data": bad}, 1, U16)
        with self.assertRaises(SourceFailureError):
            parse_response({"success": True, "data": [12]}, 1, HEX3)

    def test_not_an_object(self):
        with self.assertRaises(SourceFailureError):
            parse_response([1, 2, 3], 3, U8)


class TestFetchRaw(unittest.IsolatedAsyncioTestCase):

    async def test_query_params_uint16(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"success": True, "data": [1, 65535]})

        async with mock_client(handler) as cli:
            out = await fetch_raw(2, U16, client=cli)
        self.assertEqual(out, [1, 65535])
        self.assertEqual(seen, {"length": "2", "type": "uint16"})

    async def test_query_params_hex16(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"success": True, "data": ["abcdef"]})

        async with mock_client(handler) as cli:
            out = await fetch_raw(1, HEX3, client=cli)
        self.assertEqual(out, [0xABCDEF])
        self.assertEqual(seen, {"length": "1", "type": "hex16", "size": "3"})

    async def test_http_error(self):
        async with mock_client(lambda request: httpx.Response(503)) as cli:
            with self.assertRaises(SourceFailureError):
                await fetch_raw(1, U8, client=cli)

    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with mock_client(handler) as cli:
            with self.assertRaises(SourceFailureError):
                await fetch_raw(1, U8, client=cli)

    async def test_not_json(self):
        async with mock_client(lambda request: httpx.Response(200, text="<html>")) as cli:
            with self.assertRaises(SourceFailureError):
                await fetch_raw(1, U8, client=cli)

    async def test_reported_failure(self):
        body = json.dumps({"success": False, "message": "quota"})
        async with mock_client(lambda request: httpx.Response(200, text=body)) as cli:
            with self.assertRaises(SourceFailureError):
                await fetch_raw(1, U8, client=cli)

    async def test_length_limits(self):
        for length in (0, 1025):
            with self.assertRaises(ValueError):
                await fetch_raw(length, U8)


if __name__ == "__main__":
    unittest.main(verbosity=2)
