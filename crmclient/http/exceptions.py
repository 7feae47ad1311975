class HttpError(Exception):
    """Exception raised when a request through the Http client fails"""

    def __init__(self, error_data):
        self.message = error_data.get("message", "HTTP Error")
        self.response = error_data.get("response")
        self.config = error_data.get("config")
        self.phase = error_data.get("phase", "unknown")
        self.original_error = error_data.get("original_error")
        super().__init__(self.message)

    @property
    def status(self):
        if self.response is None:
            return None
        return self.response.get("status")

    @property
    def data(self):
        if self.response is None:
            return None
        return self.response.get("data")


class TransportError(HttpError):
    """No response was received (network failure or timeout)"""
    pass


class AuthenticationError(HttpError):
    """The server answered 401 Unauthorized"""
    pass
