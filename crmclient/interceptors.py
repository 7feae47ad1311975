from typing import Any, Dict, Optional

REDACTED = "[REDACTED]"


def redact_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    """Copy of `headers` with the bearer credential masked, safe to log."""
    redacted = {}
    for name, value in (headers or {}).items():
        if name.lower() == "authorization" and value:
            scheme = str(value).split(" ", 1)[0]
            redacted[name] = f"{scheme} {REDACTED}" if " " in str(value) else REDACTED
        else:
            redacted[name] = value
    return redacted


def _describe_request(url: Optional[str], config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    config = config or {}
    return {
        "method": config.get("method"),
        "url": url,
        "headers": redact_headers(config.get("headers")),
        "body": REDACTED if config.get("body") is not None else None,
    }


def bearer_token_interceptor(session, console):
    """Outbound hook: attach the session credential and log the target URL."""

    def attach_token(request):
        token = session.token
        if token:
            request["config"]["headers"]["Authorization"] = f"Bearer {token}"
        console.log(f"Making request to: {request['url']}")
        return request

    return attach_token


def response_logger(console):
    """Inbound hook for successful exchanges."""

    def log_response(response):
        console.log(f"Response received: {response['status']}")
        return response

    return log_response


def error_logger(console):
    """Inbound hook for failures: dump whatever the failure carries."""

    def log_error(error_data):
        response = error_data.get("response")
        if response is None:
            console.error(f"API Error: {error_data.get('message')}")
            return error_data

        request = _describe_request(response.get("url"), error_data.get("config"))
        console.error(
            f"API Error: {response.get('status')} {response.get('statusText', '')} "
            f"data={response.get('data')!r} headers={response.get('headers')!r} request={request!r}"
        )
        return error_data

    return log_error


def unauthorized_interceptor(session):
    """
        Invalidate-on-401 policy.

        A 401 means the stored credential is no longer accepted: it is dropped and
        the session's invalidation subscribers fire. There is no refresh or retry,
        and the failure still reaches the caller.
    """

    def invalidate_on_401(error_data):
        response = error_data.get("response")
        if response is not None and response.get("status") == 401:
            session.invalidate()
        return error_data

    return invalidate_on_401
