from .api_client import ApiClient, create_http_client
from .config import ApiConfig
from .http import Http, HttpError, TransportError, AuthenticationError
from .session import Session

__version__ = "0.1.0"

get_version = lambda: __version__
