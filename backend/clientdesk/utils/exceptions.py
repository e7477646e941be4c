class RemoteOperationError(Exception):
    """Raised when a call to the clients table fails, whatever the cause
    (network, validation or backend error)."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
