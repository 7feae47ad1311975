from collections.abc import Mapping

from crmclient.http import Http
from crmclient.session import Session

# Body fields the backend may use to hand back the bearer token on login
TOKEN_FIELDS = ("token", "access_token")


def extract_token(data):
    if not isinstance(data, Mapping):
        return None
    for field in TOKEN_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value:
            return value
    return None


class AuthAPI:
    """Account endpoints. Keeps the session credential in step with login and logout."""

    def __init__(self, http: Http, session: Session):
        self.http = http
        self.session = session

    async def register(self, user_data):
        response = await self.http.post("/register", user_data)
        return response["data"]

    async def login(self, credentials):
        """
        Authenticate with the backend.

        The response body is returned as-is. When it carries a token, the token
        becomes the session credential.
        """
        response = await self.http.post("/login", credentials)
        data = response["data"]

        token = extract_token(data)
        if token:
            self.session.set_token(token)
        return data

    async def logout(self):
        """End the server session. The local credential is dropped even when the call fails."""
        try:
            response = await self.http.post("/logout")
        finally:
            self.session.clear()
        return response["data"]

    async def me(self):
        response = await self.http.get("/me")
        return response["data"]

    async def reset_password(self, password_data):
        response = await self.http.post("/reset-password", password_data)
        return response["data"]
