"""Exception types shared across clients and services."""


class TokenError(Exception):
    """Base class for token acquisition and persistence failures."""


class AuthorizationRequired(Exception):
    """
    Raised when no token is stored and the user must grant consent.

    This is a signal rather than a failure, so it deliberately does not derive
    from ``TokenError``.
    """

    def __init__(self, authorization_url: str) -> None:
        super().__init__("No stored token; authorization is required.")
        self.authorization_url = authorization_url


__all__ = ["AuthorizationRequired", "TokenError"]
