import asyncio
import logging
import os
import sys

from harbor_auth.arguments import Parser
from harbor_auth.commands import amain


def main() -> None:
    parser = Parser(
        config_files=[os.getenv("HARBOR_AUTH_CONFIG", "~/.config/harbor-auth/client.ini")],
        auto_env_var_prefix="HARBOR_AUTH_",
    )
    parser.parse_args()

    logging.basicConfig(level=parser.log_level, format="[%(levelname)s] %(message)s", stream=sys.stderr)
    try:
        exit_code = asyncio.run(amain(parser))
    except KeyboardInterrupt:
        logging.info("Interrupted")
        exit_code = 130
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
