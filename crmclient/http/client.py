import json
import asyncio
import inspect
import urllib.parse
from js import fetch, console, Object
from pyodide.ffi import to_js
from typing import Dict, Any, Optional, Callable

from .exceptions import HttpError, TransportError, AuthenticationError

class Http:
    """
        A Pyodide HTTP client modelled on axios.
        Wraps the browser fetch API with base URL resolution, default headers, a per-request
        timeout and request/response/error interceptor chains.
    """

    def __init__(self, base_url: str = "", default_headers: Dict[str, str] = None,
                 timeout: int = 0, with_credentials: bool = False):
        """
        Initialize the HTTP client.

        Args:
            base_url: The base URL to prepend to all request URLs
            default_headers: Default headers to include with every request
            timeout: Default request timeout in milliseconds (0 means no timeout)
            with_credentials: Whether to send cookies with cross-origin requests
        """
        self.base_url = base_url
        self.timeout = timeout
        self.with_credentials = with_credentials
        self.default_headers = dict(default_headers) if default_headers is not None else {
            "Content-Type": "application/json"
        }
        self.interceptors = {
            "request": [],
            "response": [],
            "error": []
        }

    def _get_full_url(self, url: str) -> str:
        """Combine base URL with the provided endpoint URL"""
        if url.startswith("http://") or url.startswith("https://"):
            return url
        return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"

    def _prepare_headers(self, headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Merge default headers with request-specific headers"""
        result = dict(self.default_headers)
        if headers:
            result.update(headers)
        return result

    def _prepare_data(self, data: Any, headers: Dict[str, str]) -> Any:
        """Serialize the body according to the request content type"""
        if data is None:
            return None

        content_type = headers.get("Content-Type", "").lower()
        if "application/json" in content_type:
            return json.dumps(data)
        return data

    async def request(self, method: str, url: str,
                      data: Any = None,
                      params: Dict[str, str] = None,
                      headers: Dict[str, str] = None,
                      timeout: int = None,
                      with_credentials: bool = None) -> Dict[str, Any]:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.)
            url: The URL to send the request to
            data: Data to include in the request body
            params: URL parameters to include in the request
            headers: Headers to include in the request
            timeout: Request timeout in milliseconds (overrides instance default, 0 disables it)
            with_credentials: Whether to send cookies with cross-origin requests (overrides instance default)

        Returns:
            Response dict with data, status, statusText, headers and config

        Raises:
            TransportError: No response was received
            AuthenticationError: The server answered 401
            HttpError: Any other failed status, or an interceptor failure
        """
        full_url = self._get_full_url(url)

        if params:
            separator = "&" if "?" in full_url else "?"
            full_url = f"{full_url}{separator}{urllib.parse.urlencode(params)}"

        request_headers = self._prepare_headers(headers)

        config = {
            "method": method.upper(),
            "headers": request_headers
        }

        should_use_credentials = self.with_credentials if with_credentials is None else with_credentials
        if should_use_credentials:
            config["credentials"] = "include"

        if method.upper() not in ["GET", "HEAD"] and data is not None:
            config["body"] = self._prepare_data(data, request_headers)

        active_timeout = self.timeout if timeout is None else timeout

        # Interceptors receive and return a dict like {"url": ..., "config": ...}
        current_request = {"url": full_url, "config": config}
        try:
            for interceptor in list(self.interceptors["request"]):
                returned = await self._run_interceptor(interceptor, current_request)
                current_request = returned if returned is not None else current_request
                if not isinstance(current_request, dict) or "url" not in current_request or "config" not in current_request:
                    raise ValueError("Request interceptor must return a dictionary with 'url' and 'config' keys, or None.")
        except Exception as e:
            error = await self._handle_error(HttpError, {
                "message": f"Request interceptor error: {str(e)}",
                "original_error": e,
                "phase": "request_interceptor",
                "config": config
            })
            raise error from e

        try:
            response = await self._send(current_request, active_timeout)
        except asyncio.TimeoutError as e:
            error = await self._handle_error(TransportError, {
                "message": f"Request timed out after {active_timeout}ms",
                "original_error": e,
                "phase": "timeout",
                "config": current_request["config"]
            })
            raise error from e
        except Exception as e:
            error = await self._handle_error(TransportError, {
                "message": f"Request execution error: {str(e)}",
                "original_error": e,
                "phase": "request_execution",
                "config": current_request["config"]
            })
            raise error from e

        # The status is known once fetch resolves, even if the body cannot be read
        try:
            result = await self._parse_response(response, current_request)
        except Exception as e:
            result = self._build_result(response, current_request, None)
            if result["status"] < 400:
                error = await self._handle_error(HttpError, {
                    "message": f"Failed to read response body: {str(e)}",
                    "original_error": e,
                    "phase": "response_body",
                    "response": result,
                    "config": current_request["config"]
                })
                raise error from e
            console.warn(f"Failed to read error response body: {str(e)}")

        if result["status"] >= 400:
            error_class = AuthenticationError if result["status"] == 401 else HttpError
            raise await self._handle_error(error_class, {
                "message": f"Request failed with status code {result['status']}",
                "response": result,
                "config": current_request["config"],
                "phase": "http_status_error"
            })

        try:
            for interceptor in list(self.interceptors["response"]):
                returned = await self._run_interceptor(interceptor, result)
                result = returned if returned is not None else result
        except Exception as e:
            error = await self._handle_error(HttpError, {
                "message": f"Response interceptor error: {str(e)}",
                "original_error": e,
                "phase": "response_interceptor",
                "response": result,
                "config": current_request["config"]
            })
            raise error from e

        return result

    async def _send(self, request: Dict[str, Any], timeout: int):
        """Hand the request to fetch, bounded by the timeout when one is set"""
        config = dict(request["config"])
        config["headers"] = to_js(config["headers"], dict_converter=Object.fromEntries)

        pending = fetch(request["url"], **config)
        if timeout and timeout > 0:
            return await asyncio.wait_for(pending, timeout / 1000)
        return await pending

    async def _parse_response(self, response, request: Dict[str, Any]) -> Dict[str, Any]:
        """Read the response body and build the result dict"""
        content_type = (response.headers.get("Content-Type") or "").lower()
        text = await response.text()

        data = None
        if text:
            if "application/json" in content_type:
                try:
                    data = json.loads(text)
                except json.JSONDecodeError as parse_error:
                    console.warn(f"Failed to parse response body: {parse_error}")
                    data = text
            else:
                data = text

        return self._build_result(response, request, data)

    def _build_result(self, response, request: Dict[str, Any], data: Any) -> Dict[str, Any]:
        return {
            "data": data,
            "status": response.status,
            "statusText": response.statusText,
            "headers": {str(key): str(value) for key, value in response.headers.entries()},
            "config": request["config"],
            "url": request["url"]
        }

    async def _handle_error(self, error_class, error_data: Dict[str, Any]) -> HttpError:
        """
            Run every error interceptor once, then build the exception to raise.
            Error interceptors observe the failure, they cannot recover from it.
        """
        for error_interceptor in list(self.interceptors["error"]):
            try:
                await self._run_interceptor(error_interceptor, error_data)
            except Exception as inner_e:
                console.error(f"Error within error interceptor itself: {str(inner_e)}")
        return error_class(error_data)

    async def _run_interceptor(self, interceptor_func, data):
        """Helper to run an interceptor, supporting both sync and async functions."""
        result = interceptor_func(data)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def get(self, url: str, params: Dict[str, str] = None,
                  headers: Dict[str, str] = None, timeout: int = None,
                  with_credentials: bool = None) -> Dict[str, Any]:
        """Perform a GET request"""
        return await self.request("GET", url, params=params, headers=headers,
                                  timeout=timeout, with_credentials=with_credentials)

    async def post(self, url: str, data: Any = None, params: Dict[str, str] = None,
                   headers: Dict[str, str] = None, timeout: int = None,
                   with_credentials: bool = None) -> Dict[str, Any]:
        """Perform a POST request"""
        return await self.request("POST", url, data=data, params=params, headers=headers,
                                  timeout=timeout, with_credentials=with_credentials)

    async def put(self, url: str, data: Any = None, params: Dict[str, str] = None,
                  headers: Dict[str, str] = None, timeout: int = None,
                  with_credentials: bool = None) -> Dict[str, Any]:
        """Perform a PUT request"""
        return await self.request("PUT", url, data=data, params=params, headers=headers,
                                  timeout=timeout, with_credentials=with_credentials)

    async def patch(self, url: str, data: Any = None, params: Dict[str, str] = None,
                    headers: Dict[str, str] = None, timeout: int = None,
                    with_credentials: bool = None) -> Dict[str, Any]:
        """Perform a PATCH request"""
        return await self.request("PATCH", url, data=data, params=params, headers=headers,
                                  timeout=timeout, with_credentials=with_credentials)

    async def delete(self, url: str, data: Any = None, params: Dict[str, str] = None,
                     headers: Dict[str, str] = None, timeout: int = None,
                     with_credentials: bool = None) -> Dict[str, Any]:
        """Perform a DELETE request"""
        return await self.request("DELETE", url, data=data, params=params, headers=headers,
                                  timeout=timeout, with_credentials=with_credentials)

    # Interceptors management
    def add_request_interceptor(self, fn: Callable) -> None:
        """Add a request interceptor function (can be async)"""
        if callable(fn):
            self.interceptors["request"].append(fn)

    def add_response_interceptor(self, fn: Callable) -> None:
        """Add a response interceptor function (can be async)"""
        if callable(fn):
            self.interceptors["response"].append(fn)

    def add_error_interceptor(self, fn: Callable) -> None:
        """Add an error interceptor function (can be async)"""
        if callable(fn):
            self.interceptors["error"].append(fn)

    def remove_request_interceptor(self, fn: Callable) -> None:
        """Remove a request interceptor function"""
        try:
            self.interceptors["request"].remove(fn)
        except ValueError:
            pass # Function not found

    def remove_response_interceptor(self, fn: Callable) -> None:
        """Remove a response interceptor function"""
        try:
            self.interceptors["response"].remove(fn)
        except ValueError:
            pass # Function not found

    def remove_error_interceptor(self, fn: Callable) -> None:
        """Remove an error interceptor function"""
        try:
            self.interceptors["error"].remove(fn)
        except ValueError:
            pass # Function not found

    def clear_interceptors(self) -> None:
        """Clear all interceptors"""
        self.interceptors = {
            "request": [],
            "response": [],
            "error": []
        }
