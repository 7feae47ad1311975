from js import window

LOGIN_PATH = "/login"


def redirect_on_invalidation(path: str = LOGIN_PATH):
    """Build a Session.on_invalidated subscriber that sends the browser to `path`."""
    def redirect():
        window.location.href = path
    return redirect
