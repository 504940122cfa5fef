"""
Command Dispatch

Maps the text command surface onto a LedgerSession and renders the
console lines for each outcome. It never prints; the caller decides
where the lines go.

Commands:
    Import File <path>
    Export File <path>
    List All
    List <account>
    (empty line)          ends the session
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from supportbank.audit import create_correlation_id
from supportbank.models.results import ErrorKind, ExportResult, ImportResult, QueryOutcome
from supportbank.models.transaction import RepairIssue
from supportbank.orchestrator import LedgerSession


USAGE = (
    "Usage: 'Import File <File Name>', 'Export File <File Name>', "
    "'List <Account>' or 'List All', or enter a blank string to exit."
)
FAREWELL = "Thank you for using SupportBank."
INVALID_COMMAND = "Invalid command."

IMPORT_PREFIX = "Import File "
EXPORT_PREFIX = "Export File "
LIST_PREFIX = "List "
LIST_ALL = "List All"


class CommandOutcome(BaseModel):
    """Console lines produced by one command."""

    lines: list[str] = Field(default_factory=list)
    terminate: bool = Field(
        default=False,
        description="Should the command loop stop?"
    )


def describe_repair(issue: RepairIssue) -> str:
    """Console line for one repaired field."""
    source = issue.source.label if issue.source else "input"
    return f"Error in {source} file. {issue.message}"


class CommandDispatcher:
    """
    Parses one line of user input and runs it against a session.

    Matching is exact and case-sensitive. "List All" always means the
    balance listing, so an account literally named "All" cannot be listed.
    """

    def __init__(self, session: LedgerSession):
        self._session = session
        self._audit_logger = session.audit_logger
        self._session_id = create_correlation_id()

    def start(self) -> CommandOutcome:
        """Open the session and return the usage banner."""
        self._audit_logger.log_session_started(self._session_id)
        return CommandOutcome(lines=[USAGE])

    def dispatch(self, command: str) -> CommandOutcome:
        """Run one command. Never raises for bad input or failed I/O."""
        correlation_id = create_correlation_id()
        self._audit_logger.log_command_received(command, correlation_id)

        if command == "":
            self._audit_logger.log_session_ended(self._session_id)
            return CommandOutcome(lines=[FAREWELL], terminate=True)

        if command == LIST_ALL:
            return self._render_query(self._session.list_all(correlation_id))

        if command.startswith(LIST_PREFIX):
            name = command[len(LIST_PREFIX):]
            return self._render_query(self._session.list_account(name, correlation_id))

        if command.startswith(IMPORT_PREFIX):
            path = command[len(IMPORT_PREFIX):]
            return self._render_import(self._session.import_file(path, correlation_id=correlation_id))

        if command.startswith(EXPORT_PREFIX):
            path = command[len(EXPORT_PREFIX):]
            return self._render_export(self._session.export_file(path, correlation_id))

        self._audit_logger.log_invalid_command(command, correlation_id)
        return CommandOutcome(lines=[INVALID_COMMAND])

    def _render_query(self, outcome: QueryOutcome) -> CommandOutcome:
        if outcome.success:
            return CommandOutcome(lines=outcome.lines)
        if outcome.error_kind == ErrorKind.EMPTY_LEDGER:
            return CommandOutcome(lines=["Please import a file first."])
        return CommandOutcome(lines=["Not a valid user!"])

    def _render_import(self, result: ImportResult) -> CommandOutcome:
        if not result.success:
            return CommandOutcome(lines=[self._failure_line(result.error_kind, result.path, "read")])

        lines = [describe_repair(issue) for issue in result.issues]
        lines.append(f"Imported {result.transactions_applied} transactions from {result.path}.")
        return CommandOutcome(lines=lines)

    def _render_export(self, result: ExportResult) -> CommandOutcome:
        if not result.success:
            return CommandOutcome(lines=[self._failure_line(result.error_kind, result.path, "write")])
        return CommandOutcome(
            lines=[f"Exported {result.transactions_written} transactions to {result.path}."]
        )

    @staticmethod
    def _failure_line(kind: Optional[ErrorKind], path: str, operation: str) -> str:
        if kind == ErrorKind.UNKNOWN_FORMAT:
            return "Unknown file type. Please use either CSV, JSON, XML."
        if kind == ErrorKind.MALFORMED_FILE:
            return f"The file could not be parsed: {path}"
        return f"There was an error trying to {operation} file: {path}"

    @property
    def session_id(self) -> UUID:
        return self._session_id
