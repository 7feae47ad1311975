from typing import Callable, List, Optional
from js import console

from crmclient.storage import raw_local_storage

TOKEN_KEY = "auth_token"


class Session:
    """
        Holds the bearer credential of the signed-in user.

        The application creates one Session and hands it to the API client. The
        credential lives in a single storage slot, so only one account can be
        signed in at a time. Subscribers registered with `on_invalidated` are
        notified when the server rejects the credential.
    """

    def __init__(self, storage=None, key: str = TOKEN_KEY):
        """
        Args:
            storage: Object with save/load/remove, defaults to the raw localStorage slot
            key: Storage key of the credential slot
        """
        self.storage = storage if storage is not None else raw_local_storage
        self.key = key
        self._invalidation_callbacks: List[Callable] = []

    @property
    def token(self) -> Optional[str]:
        return self.storage.load(self.key)

    def set_token(self, token: str) -> None:
        self.storage.save(self.key, token)

    def clear(self) -> None:
        self.storage.remove(self.key)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def on_invalidated(self, callback: Callable) -> Callable:
        """Subscribe to session invalidation. Returns the callback so it can be used as a decorator."""
        if callable(callback):
            self._invalidation_callbacks.append(callback)
        return callback

    def off_invalidated(self, callback: Callable) -> None:
        if callback in self._invalidation_callbacks:
            self._invalidation_callbacks.remove(callback)

    def invalidate(self) -> None:
        """Drop the credential, then notify every subscriber once."""
        try:
            self.clear()
        finally:
            for callback in list(self._invalidation_callbacks):
                try:
                    callback()
                except Exception as e:
                    console.error(f"Error in session invalidation callback: {str(e)}")
