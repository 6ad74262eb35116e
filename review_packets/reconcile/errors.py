"""Errors that abort a reconciliation."""


class ReconcileError(Exception):
    """Base class: the whole reconciliation fails and no packets are produced."""


class SourceReadFailure(ReconcileError):
    """The file-record set could not be read or is structurally invalid."""


class InvalidRequest(ReconcileError):
    """An annotation request is missing its file id or line range."""
