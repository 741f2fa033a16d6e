from enum import Enum

import argclass


class Action(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    CHECK = "check"


class Parser(argclass.Parser):
    url: str = argclass.Argument(help="Harbor auth service base URL", required=True)
    action: Action = argclass.EnumArgument(Action, default=Action.CHECK, lowercase=True, help="Operation to perform")
    username: str = argclass.Argument(default="", help="Account name (letters only)")
    password: str = argclass.Argument(secret=True, default="", help="Account password, used by login")
    token: str = argclass.Argument(secret=True, default="", help="Token, used by logout and check")
    timeout: float = argclass.Argument(default=0.0, help="Request timeout in seconds, 0 waits forever")

    log_level: int = argclass.LogLevel
