import re

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 20

# Empty usernames pass, as the auth service decides what to do with them
ALPHA_PATTERN = re.compile(r"[A-Za-z]*")


def is_valid_password(password: str) -> bool:
    return PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH


def is_alpha(username: str) -> bool:
    return ALPHA_PATTERN.fullmatch(username) is not None


def is_present(token: str) -> bool:
    return len(token) > 0
