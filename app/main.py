"""
Console Front End for SupportBank

A read-eval-print loop over the command surface. Everything it shows
comes from CommandDispatcher; this file only reads lines and prints.

Run with:
    python -m app.main
"""

import sys

from supportbank.audit import configure_file_logging
from supportbank.commands import CommandDispatcher
from supportbank.config import get_settings, validate_all_settings
from supportbank.orchestrator import create_session


def main() -> int:
    """Main application entry point."""
    status = validate_all_settings()
    failed = [name for name, ok in status.items() if ok is False]
    if failed:
        for name in failed:
            print(f"Invalid configuration for {name}: {status[f'{name}_error']}", file=sys.stderr)
        return 2

    settings = get_settings()
    configure_file_logging(settings.logging.file_path, settings.logging.level)

    session = create_session()
    dispatcher = CommandDispatcher(session)
    for line in dispatcher.start().lines:
        print(line)

    while True:
        try:
            user_input = input(">> ")
        except EOFError:
            user_input = ""

        try:
            outcome = dispatcher.dispatch(user_input)
        except Exception as e:
            session.audit_logger.log_error(
                error_type=type(e).__name__,
                error_message=str(e),
                details={"command": user_input},
                correlation_id=dispatcher.session_id,
            )
            raise

        for line in outcome.lines:
            print(line)
        if outcome.terminate:
            return 0


if __name__ == "__main__":
    sys.exit(main())
