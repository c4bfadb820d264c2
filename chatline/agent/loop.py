"""Session loop — prompt, send, and report until the user exits."""

import logging
import time
from datetime import datetime
from enum import Enum
from typing import Callable

from chatline.agent.interpreter import ApiError, Completion, interpret
from chatline.agent.session import SessionState, format_statistics, format_transcript
from chatline.config import settings

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
PROMPT = "> "
INVALID_MESSAGE = "Error: Please enter a valid message."


class Step(str, Enum):
    """How a single line of input was handled."""

    EXIT = "exit"
    REJECTED = "rejected"
    API_ERROR = "api_error"
    COMPLETED = "completed"
    MALFORMED = "malformed"


def validate_message(message: str, max_length: int) -> str | None:
    """Return the error to show the user, or None if the message can be sent."""
    if not message.strip():
        return INVALID_MESSAGE
    try:
        message.encode("utf-8")
    except UnicodeEncodeError:
        # Lone surrogates, e.g. undecodable bytes read under a C locale.
        return INVALID_MESSAGE
    if len(message) > max_length:
        return "Error: Message too long. Please enter a shorter message."
    return None


def _print_completion(completion: Completion) -> None:
    print(f"Bot: {completion.reply}")
    print(f"Response Tokens: {completion.usage.completion_tokens}")
    print(f"Prompt Tokens: {completion.usage.prompt_tokens}")
    print(f"Total Tokens: {completion.usage.total_tokens}")


def _print_report(state: SessionState, moment: datetime) -> None:
    print()
    print(format_statistics(state.stats))
    print()
    print(format_transcript(state.transcript, moment))
    print()


def process_message(
    state: SessionState,
    message: str,
    send: Callable[[str], str],
    *,
    max_length: int | None = None,
    clock: Callable[[], float] = time.perf_counter,
    now: Callable[[], datetime] = datetime.now,
) -> Step:
    """
    Run one line of input through validation, dispatch and interpretation.
    Only a Completion touches the transcript and statistics.
    """
    if message.strip() == EXIT_COMMAND:
        return Step.EXIT

    if max_length is None:
        max_length = settings.max_message_length
    error = validate_message(message, max_length)
    if error:
        print(error)
        return Step.REJECTED

    t0 = clock()
    body = send(message)
    elapsed = clock() - t0
    logger.debug(f"dispatch returned {len(body)} chars in {elapsed:.3f}s")

    result = interpret(body)
    if isinstance(result, ApiError):
        logger.debug(f"api error: {result.message}")
        print(f"Bot Error: {result.message}")
        return Step.API_ERROR

    if isinstance(result, Completion):
        _print_completion(result)
        state.record_exchange(message, result.reply, elapsed)
        step = Step.COMPLETED
    else:
        # Malformed
        logger.debug(f"malformed response: {result.detail}")
        print("Bot: Sorry, I didn't understand the response. Please try again.")
        print(f"({result.detail})")
        step = Step.MALFORMED

    _print_report(state, now())
    return step


def run_session(
    send: Callable[[str], str],
    *,
    read: Callable[[str], str] = input,
    state: SessionState | None = None,
    **turn_options,
) -> SessionState:
    """Prompt until the user types exit (or closes input). Returns the final state."""
    state = state if state is not None else SessionState()

    print(f"Chatbot (type '{EXIT_COMMAND}' to quit):")
    while True:
        try:
            message = read(PROMPT)
        except (KeyboardInterrupt, EOFError):
            print()
            break
        except UnicodeDecodeError as e:
            logger.debug(f"undecodable input: {e}")
            print(INVALID_MESSAGE)
            continue

        if process_message(state, message, send, **turn_options) is Step.EXIT:
            break

    print("Goodbye!")
    logger.debug(f"session ended after {state.stats.exchanges} exchange(s)")
    return state
