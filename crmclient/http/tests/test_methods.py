import sys
import json
from unittest.mock import MagicMock, AsyncMock, patch

# Mock js and pyodide modules before importing crmclient
if "js" not in sys.modules:
    sys.modules["js"] = MagicMock()
if "pyodide" not in sys.modules:
    sys.modules["pyodide"] = MagicMock()
if "pyodide.ffi" not in sys.modules:
    sys.modules["pyodide.ffi"] = MagicMock()

import asyncio
import unittest
from crmclient.http.client import Http


class FakeHeaders(dict):
    def entries(self):
        return list(self.items())


def make_response(status=200, body="", content_type="application/json"):
    response = MagicMock(status=status, statusText="")
    response.headers = FakeHeaders({"Content-Type": content_type})
    response.text = AsyncMock(return_value=body)
    return response


class TestHttpMethods(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        # Patch to_js to return the input so we can inspect it
        self.to_js_patcher = patch('crmclient.http.client.to_js', side_effect=lambda value, **kwargs: value)
        self.to_js_patcher.start()

    async def asyncTearDown(self):
        self.to_js_patcher.stop()

    def _resolved(self, response):
        future = asyncio.Future()
        future.set_result(response)
        return future

    async def test_verbs(self):
        http = Http(base_url="https://api.test")
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            for verb in ("get", "post", "put", "patch", "delete"):
                await getattr(http, verb)("/things")
                args, kwargs = mock_fetch.call_args
                self.assertEqual(args[0], "https://api.test/things")
                self.assertEqual(kwargs.get("method"), verb.upper())

    async def test_base_url_joining(self):
        http = Http(base_url="https://api.test/")
        self.assertEqual(http._get_full_url("/clients"), "https://api.test/clients")
        self.assertEqual(http._get_full_url("clients"), "https://api.test/clients")
        self.assertEqual(http._get_full_url("https://other.test/x"), "https://other.test/x")

    async def test_json_body_is_serialized(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.post("/clients", {"name": "Acme"})

            args, kwargs = mock_fetch.call_args
            self.assertEqual(json.loads(kwargs.get("body")), {"name": "Acme"})

    async def test_get_sends_no_body(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.request("GET", "/clients", data={"ignored": True})

            args, kwargs = mock_fetch.call_args
            self.assertNotIn("body", kwargs)

    async def test_post_without_data_sends_no_body(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.post("/logout")

            args, kwargs = mock_fetch.call_args
            self.assertNotIn("body", kwargs)

    async def test_query_params(self):
        http = Http(base_url="https://api.test")
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.get("/search", params={"q": "a b"})

            args, kwargs = mock_fetch.call_args
            self.assertEqual(args[0], "https://api.test/search?q=a+b")

    async def test_default_and_request_headers_merge(self):
        http = Http(default_headers={"Content-Type": "application/json", "Accept": "application/json"})
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.get("/x", headers={"X-Trace": "1"})

            args, kwargs = mock_fetch.call_args
            self.assertEqual(kwargs["headers"], {
                "Content-Type": "application/json",
                "Accept": "application/json",
                "X-Trace": "1",
            })
        # Defaults are not polluted by per-request headers
        self.assertNotIn("X-Trace", http.default_headers)

    async def test_explicit_empty_default_headers(self):
        http = Http(default_headers={})
        self.assertEqual(http.default_headers, {})
        self.assertEqual(Http().default_headers, {"Content-Type": "application/json"})

        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response())

            await http.get("/x")

            args, kwargs = mock_fetch.call_args
            self.assertEqual(kwargs["headers"], {})

    async def test_json_response_is_parsed(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response(body='{"id": 42, "tags": ["a"]}'))

            result = await http.get("/clients/42")

            self.assertEqual(result["data"], {"id": 42, "tags": ["a"]})
            self.assertEqual(result["status"], 200)
            self.assertEqual(result["headers"], {"Content-Type": "application/json"})

    async def test_empty_and_text_bodies(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response(status=204, body=""))
            result = await http.delete("/clients/1")
            self.assertIsNone(result["data"])

            mock_fetch.return_value = self._resolved(make_response(body="pong", content_type="text/plain"))
            result = await http.get("/ping")
            self.assertEqual(result["data"], "pong")

    async def test_invalid_json_falls_back_to_text(self):
        http = Http()
        with patch('crmclient.http.client.fetch', new_callable=MagicMock) as mock_fetch:
            mock_fetch.return_value = self._resolved(make_response(body="<html>oops</html>"))

            result = await http.get("/broken")

            self.assertEqual(result["data"], "<html>oops</html>")

if __name__ == '__main__':
    unittest.main()
