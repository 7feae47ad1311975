import os
from typing import Dict, Mapping, Optional

DEFAULT_BASE_URL = "https://crmappback-production-9545.up.railway.app"
BASE_URL_ENV = "CRM_API_URL"
DEFAULT_TIMEOUT = 10000

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


def resolve_base_url(environ: Optional[Mapping[str, str]] = None) -> str:
    """Environment override if set, the hosted backend otherwise. The address is not validated."""
    environ = os.environ if environ is None else environ
    return environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL


class ApiConfig:
    """Settings shared by every request sent through the API client."""

    def __init__(self,
                 base_url: str,
                 default_headers: Dict[str, str] = None,
                 timeout: int = DEFAULT_TIMEOUT,
                 with_credentials: bool = False):
        """
        Args:
            base_url: Address of the CRM backend
            default_headers: Headers sent with every request
            timeout: Per-request timeout in milliseconds
            with_credentials: Whether to send cookies with cross-origin requests
        """
        self.base_url = base_url
        self.default_headers = dict(default_headers if default_headers is not None else DEFAULT_HEADERS)
        self.timeout = timeout
        self.with_credentials = with_credentials

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ApiConfig":
        return cls(resolve_base_url(environ), **overrides)

    def __repr__(self):
        return (f"ApiConfig(base_url={self.base_url!r}, timeout={self.timeout}, "
                f"with_credentials={self.with_credentials})")
