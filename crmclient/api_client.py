from typing import Optional
from js import console as browser_console

from crmclient.config import ApiConfig
from crmclient.http import Http
from crmclient.interceptors import (
    bearer_token_interceptor,
    error_logger,
    response_logger,
    unauthorized_interceptor,
)
from crmclient.services import AuthAPI, ClientAPI, InvoiceAPI
from crmclient.session import Session


def create_http_client(session: Session, config: Optional[ApiConfig] = None, console=None) -> Http:
    """
    Build the shared request pipeline.

    Args:
        session: Session whose credential is attached to every request
        config: Pipeline settings, read from the environment when omitted
        console: Logging sink, the browser console by default

    Returns:
        An Http client with the auth interceptors registered
    """
    config = config or ApiConfig.from_env()
    console = console or browser_console

    http = Http(
        base_url=config.base_url,
        default_headers=config.default_headers,
        timeout=config.timeout,
        with_credentials=config.with_credentials,
    )
    console.log(f"API Base URL: {config.base_url}")

    http.add_request_interceptor(bearer_token_interceptor(session, console))
    http.add_response_interceptor(response_logger(console))
    http.add_error_interceptor(error_logger(console))
    http.add_error_interceptor(unauthorized_interceptor(session))
    return http


class ApiClient:
    """Entry point for the CRM backend: one pipeline shared by the auth, clients and invoices calls."""

    def __init__(self, session: Session, config: Optional[ApiConfig] = None, console=None):
        self.session = session
        self.http = create_http_client(session, config, console)
        self.auth = AuthAPI(self.http, session)
        self.clients = ClientAPI(self.http)
        self.invoices = InvoiceAPI(self.http)
