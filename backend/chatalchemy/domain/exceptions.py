"""Domain-specific exceptions — framework-independent."""


class IngestionError(Exception):
    """Base class for per-file ingestion failures.

    Every ingestion error is recoverable at the call site: the failing file
    is reported and skipped, the knowledge store is left untouched.
    """

    def __init__(self, file_name: str, message: str):
        self.file_name = file_name
        self.message = message
        super().__init__(f"{file_name}: {message}")


class SourceUnavailableError(IngestionError):
    """Raised when a file or backend dataset cannot be read."""


class DecodeError(IngestionError):
    """Raised when bytes cannot be parsed as the claimed format."""


class UnsupportedFormatError(IngestionError):
    """Raised when a file extension is not CSV, XLSX or XLS."""

    def __init__(self, file_name: str, extension: str = ""):
        self.extension = extension
        super().__init__(
            file_name,
            f"Unsupported file format '{extension or '?'}'. Please upload CSV or Excel files.",
        )


class NoValidDataError(IngestionError):
    """Raised when a file decoded cleanly but produced zero usable rows."""

    def __init__(self, file_name: str):
        super().__init__(file_name, "File contains no usable rows")


class ChatProviderError(Exception):
    """Raised when a chat provider returns an error.

    Provider-agnostic — works for OpenRouter, OpenAI, etc.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        self.message = message
        super().__init__(f"[{provider}] {status_code}: {message}")
