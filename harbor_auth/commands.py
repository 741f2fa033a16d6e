import logging
import sys

from harbor_auth.arguments import Action, Parser
from harbor_auth.client import HarborAuthError, create_auth_client

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_ERROR = 2


async def amain(parser: Parser) -> int:
    """Run the selected action and return the process exit code."""
    client = create_auth_client(parser.url, timeout=parser.timeout or None)
    if client is None:
        print("error: auth service URL is empty", file=sys.stderr)
        return EXIT_ERROR

    log.debug("Running %s against %r", parser.action.value, client)
    try:
        if parser.action == Action.LOGIN:
            token, success = await client.login(parser.username, str(parser.password))
            if success:
                print(token)
        elif parser.action == Action.LOGOUT:
            success = await client.logout(parser.username, str(parser.token))
            print("true" if success else "false")
        else:
            success = await client.is_authenticated(parser.username, str(parser.token))
            print("true" if success else "false")
    except HarborAuthError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK if success else EXIT_REJECTED
