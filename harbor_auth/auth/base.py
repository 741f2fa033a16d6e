from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Auth(Protocol):
    """Operations every auth backend offers.

    Backends that cannot provide an operation raise ``NotImplementedError``
    from it rather than leaving it out.
    """

    async def login(self, username: str, password: str) -> tuple[str, bool]:
        """Authenticate and return ``(token, success)``."""
        ...

    async def logout(self, username: str, token: str) -> bool:
        """Invalidate ``token``. Returns the backend's success flag."""
        ...

    async def is_authenticated(self, username: str, token: str) -> bool:
        """Check whether ``token`` is still valid for ``username``."""
        ...

    async def get_user(self) -> Any: ...

    async def get_token(self) -> str: ...
