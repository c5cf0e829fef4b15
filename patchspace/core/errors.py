# patchspace/core/errors.py

class WorkspaceError(Exception):
    """Base class for errors surfaced to the user by the workspace."""

class UnknownPathError(WorkspaceError):
    def __init__(self, path: str):
        super().__init__(f"No file at path: {path}")
        self.path = path

class BinaryFileError(WorkspaceError):
    """Raised when a binary record is opened for editing."""
    def __init__(self, path: str):
        super().__init__(f"Cannot open binary file in editor: {path}")
        self.path = path

class RequestInFlightError(WorkspaceError):
    """Raised when a chat request is submitted while another one is still pending."""
    def __init__(self):
        super().__init__("A request is already being processed. Please wait for it to finish.")
