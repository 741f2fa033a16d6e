from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenRequest(BaseModel):
    """Body shared by the destroy-token and check-token endpoints."""

    username: str
    token: str


class LoginResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    token: str = ""
    success: bool = False


class StatusResponse(BaseModel):
    model_config = ConfigDict(strict=True)

    success: bool = False
