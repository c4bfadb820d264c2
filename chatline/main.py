"""chatline — terminal chat client entry point.

Reads OPENAI_API_KEY (and the other settings in chatline.config) from the
environment or a local .env file, then chats until 'exit'.
Run it with: chatline  (or python -m chatline.main)
"""

import argparse
import logging
import sys
from functools import partial

import httpx

from chatline.agent.dispatcher import dispatch
from chatline.agent.loop import run_session
from chatline.config import Settings, settings

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", force=True)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    if debug:
        logger.debug("DEBUG logging enabled — request and interpretation output active")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="chatline", description="Chat with an LLM from the terminal.")
    parser.add_argument("--debug", action="store_true", help="log requests, retries and latencies")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None, config: Settings | None = None) -> int:
    args = _parse_args(argv)
    if config is None:
        config = settings

    if not config.openai_api_key:
        print(
            "Error: OPENAI_API_KEY not set. Please set it in your environment variables.",
            file=sys.stderr,
        )
        return 1
    # Sent in an HTTP header, which only carries ASCII.
    if not config.openai_api_key.isascii():
        print(
            "Error: OPENAI_API_KEY contains non-ASCII characters. Please check the key.",
            file=sys.stderr,
        )
        return 1

    _configure_logging(args.debug or config.debug)
    logger.debug(f"endpoint={config.api_url}, model={config.chat_model}")

    with httpx.Client(timeout=config.request_timeout) as client:
        send = partial(
            dispatch,
            credential=config.openai_api_key,
            max_attempts=config.max_attempts,
            delay_ms=config.retry_delay_ms,
            client=client,
            url=config.api_url,
            model=config.chat_model,
        )
        run_session(send, max_length=config.max_message_length)

    return 0


if __name__ == "__main__":
    sys.exit(main())
