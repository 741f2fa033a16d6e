import importlib.metadata
import json
import logging
import platform
import sys
from collections.abc import Mapping
from functools import cached_property
from types import MappingProxyType
from typing import NoReturn, TypeVar

import httpx
import pydantic
from pydantic import BaseModel

from .auth.base import Auth
from .types import LoginRequest, LoginResponse, StatusResponse, TokenRequest
from .validation import is_alpha, is_present, is_valid_password

ModelT = TypeVar("ModelT", bound=BaseModel)

log = logging.getLogger(__name__)


class HarborAuthError(Exception):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(HarborAuthError):
    """Input rejected locally, nothing was sent."""


class TransportError(HarborAuthError):
    """The request did not complete (connection, DNS, timeout)."""


class HTTPStatusError(HarborAuthError):
    """The service answered with anything but 200."""


class ReadError(HarborAuthError):
    """The status was 200 but the body could not be read."""


class ParseError(HarborAuthError):
    """The body is not a valid payload. Only raised with ``strict_responses``."""


class NotSupportedError(HarborAuthError, NotImplementedError):
    pass


PASSWORD_LENGTH_MESSAGE = "Password is either less than the minimum or over the maximum number of characters"
USERNAME_MESSAGE = "Usernames must be alphabetical"
EMPTY_TOKEN_MESSAGE = "Empty token"


class HarborAuthClient:
    """Client for the Harbor auth service token endpoints.

    Every call opens its own HTTP connection and nothing is kept between
    calls, so one instance can be shared freely.
    """

    PYTHON_VERSION = f"{'.'.join(map(str, sys.version_info[:3]))}"
    try:
        LIBRARY_VERSION = importlib.metadata.version("harbor-auth-client")
    except importlib.metadata.PackageNotFoundError:
        LIBRARY_VERSION = "unknown"

    OS_NAME = platform.system()
    OS_VERSION = platform.release()

    HEADERS = (
        ("Content-Type", "application/json"),
        (
            "User-Agent",
            " ".join(
                (
                    f"harbor-auth-client/{LIBRARY_VERSION}",
                    f"python/{PYTHON_VERSION}",
                    f"{OS_NAME}/{OS_VERSION}",
                )
            ),
        ),
    )

    LOGIN_PATH = "/v1/auth/gettoken"
    LOGOUT_PATH = "/v1/auth/destroytoken"
    CHECK_PATH = "/v1/auth/checktoken"

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        strict_responses: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not url:
            raise ValueError("Auth service URL must not be empty")
        self.url = url.rstrip("/")
        self.timeout = httpx.Timeout(timeout)
        self.strict_responses = strict_responses
        self._transport = transport

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.url!r})"

    @cached_property
    def headers(self) -> Mapping[str, str]:
        return MappingProxyType(dict(self.HEADERS))

    async def login(self, username: str, password: str) -> tuple[str, bool]:
        """Exchange credentials for a token.

        Returns the token and the service's ``success`` flag.
        """
        if not is_valid_password(password):
            raise ValidationError(PASSWORD_LENGTH_MESSAGE)
        if not is_alpha(username):
            raise ValidationError(USERNAME_MESSAGE)

        body = await self._post(
            self.LOGIN_PATH,
            LoginRequest(username=username, password=password),
            model=LoginResponse,
        )
        return body.token, body.success

    async def logout(self, username: str, token: str) -> bool:
        self._check_token_request(username, token)
        body = await self._post(
            self.LOGOUT_PATH,
            TokenRequest(username=username, token=token),
            model=StatusResponse,
        )
        return body.success

    async def is_authenticated(self, username: str, token: str) -> bool:
        # Same payload as logout, only the endpoint differs
        self._check_token_request(username, token)
        body = await self._post(
            self.CHECK_PATH,
            TokenRequest(username=username, token=token),
            model=StatusResponse,
        )
        return body.success

    async def get_user(self) -> NoReturn:
        raise NotSupportedError("get_user is not supported by the Harbor auth client")

    async def get_token(self) -> NoReturn:
        raise NotSupportedError("get_token is not supported by the Harbor auth client")

    @staticmethod
    def _check_token_request(username: str, token: str) -> None:
        if not is_alpha(username):
            raise ValidationError(USERNAME_MESSAGE)
        if not is_present(token):
            raise ValidationError(EMPTY_TOKEN_MESSAGE)

    async def _post(self, path: str, payload: BaseModel, *, model: type[ModelT]) -> ModelT:
        """POST ``payload`` as JSON and parse a 200 response into ``model``.

        Raises TransportError, HTTPStatusError or ReadError depending on
        where the exchange failed.
        """
        url = f"{self.url}/{path.lstrip('/')}"
        log.debug("POST %s", url)

        async with httpx.AsyncClient(headers=self.headers, timeout=self.timeout, transport=self._transport) as client:
            try:
                async with client.stream("POST", url, json=payload.model_dump()) as response:
                    log.debug("POST %s -> %d", url, response.status_code)
                    if response.status_code != 200:
                        raise HTTPStatusError(
                            f"Invalid Status Code: {response.status_code} {response.reason_phrase}",
                            response.status_code,
                        )
                    try:
                        content = await response.aread()
                    except httpx.HTTPError as e:
                        raise ReadError(f"Failed to read response body: {e}", response.status_code) from e
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise TransportError(str(e) or e.__class__.__name__) from e

        return self._parse(content, model)

    def _parse(self, content: bytes, model: type[ModelT]) -> ModelT:
        """Parse a response body.

        Keys match field names case-insensitively. A BOM or a NaN/Infinity
        literal makes the document unreadable. Unless ``strict_responses`` is
        set, an unreadable document gives the model defaults and every absent
        or mistyped field keeps its default.
        """
        try:
            data = json.loads(content.decode("utf-8"), parse_constant=_reject_constant)
        except ValueError as e:
            if self.strict_responses:
                raise ParseError(f"Invalid JSON in response: {e}") from e
            log.debug("Ignoring unparsable %s body", model.__name__)
            return model()

        if not isinstance(data, dict):
            if self.strict_responses:
                raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
            return model()

        # Later keys win when several fold to the same field
        fields = {name.lower(): name for name in model.model_fields}
        data = {fields[k.lower()]: v for k, v in data.items() if k.lower() in fields}

        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            if self.strict_responses:
                raise ParseError(f"Invalid {model.__name__}: {e}") from e
            invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
            log.debug("Ignoring invalid %s fields: %s", model.__name__, ", ".join(sorted(map(str, invalid))))
            return model.model_validate({k: v for k, v in data.items() if k not in invalid})


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"Invalid JSON constant {name}")


def create_auth_client(
    url: str,
    timeout: float | None = None,
    strict_responses: bool = False,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Auth | None:
    """Build a client for ``url``, or return None when no URL is given."""
    if not url:
        return None
    return HarborAuthClient(url, timeout=timeout, strict_responses=strict_responses, transport=transport)
