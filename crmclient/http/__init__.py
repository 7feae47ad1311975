from .client import Http
from .exceptions import HttpError, TransportError, AuthenticationError
