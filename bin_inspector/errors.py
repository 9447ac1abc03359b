"""
Exception hierarchy for an inspection run.

Every error aborts the inspection of the current binary. The CLI and the MCP
server catch ``InspectionError`` at the top and report it.
"""


class InspectionError(Exception):
    """Base class for all inspection failures."""


class BackendUnavailable(InspectionError):
    """The analysis backend could not be spawned or the binary could not be opened."""


class MissingEntryPoint(InspectionError):
    """The backend could not locate an entry point for the binary."""


class AnalysisFailed(InspectionError):
    """The backend auto-analysis pass failed."""


class QueryError(InspectionError):
    """A backend query returned a shape the caller cannot parse."""

    def __init__(self, command: str, detail: str = ""):
        self.command = command
        self.detail = detail
        message = f"Unexpected response to '{command}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RenameFailed(InspectionError):
    """The backend refused to rename a function."""

    def __init__(self, new_name: str, old_name: str):
        self.new_name = new_name
        self.old_name = old_name
        super().__init__(f"Renaming '{old_name}' to '{new_name}' failed")


class ClassifierUnavailable(InspectionError):
    """The optimization classifier could not be loaded or run."""
