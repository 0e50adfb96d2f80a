class WorkerError(Exception):
    """Base error for all failures that abort an extraction task."""


class ConfigurationError(WorkerError):
    """Raised when configuration is invalid or incomplete."""


class MalformedPayload(WorkerError):
    """Raised when a queue envelope or extraction payload cannot be parsed."""


class UnsupportedFileType(WorkerError):
    """Raised when the input extension is not in the allow-list."""


class ConversionFailed(WorkerError):
    """Raised when the office-to-PDF conversion fails."""


class CorruptDocument(WorkerError):
    """Raised when a PDF cannot be opened or has no pages."""


class SplitFailed(WorkerError):
    """Raised when a PDF cannot be split into batches."""


class ModelInvocationFailed(WorkerError):
    """Raised when the layout analysis service call fails."""


class UsageLimitExceeded(ModelInvocationFailed):
    """Raised when the layout analysis service reports a usage limit."""


class MalformedModelResponse(WorkerError):
    """Raised when the layout analysis response does not match the schema."""


class StorageFailed(WorkerError):
    """Raised when an object store download or upload fails."""


class PersistenceFailed(WorkerError):
    """Raised when the task store cannot be read or written."""


class PublishFailed(WorkerError):
    """Raised when the downstream handoff cannot be enqueued."""


class QueueUnavailable(WorkerError):
    """Raised when the queue backend cannot be read from."""


class InvalidStatusTransition(RuntimeError):
    """Raised on a task status change the lifecycle does not allow."""
