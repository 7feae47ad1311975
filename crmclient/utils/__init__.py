from .runtime import is_server_side
