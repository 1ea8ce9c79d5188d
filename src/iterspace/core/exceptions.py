"""Exception hierarchy for iterspace."""


class IterspaceError(Exception):
    """Base class for all iterspace errors."""


class SetupError(IterspaceError):
    """Versioning store could not be created. Not recoverable."""


class ConfigError(IterspaceError):
    """Invalid configuration."""


class NotInitializedError(IterspaceError):
    """No revision engine is attached to the workspace."""

    def __init__(self, message: str = "no repo initialized") -> None:
        super().__init__(message)


class OperationError(IterspaceError):
    """Engine-level failure of a single versioning operation."""


class EmptyCommitError(OperationError):
    """Nothing to commit."""


class CheckoutError(OperationError):
    """Branch switch failed or was refused."""


class ReferenceNotFoundError(OperationError):
    """A reference could not be resolved to a revision."""

    def __init__(self, ref: str) -> None:
        super().__init__(f"Cannot resolve reference: {ref}")
        self.ref = ref


class RewriteError(OperationError):
    """Content promotion onto the main line failed."""


class PurgeError(IterspaceError):
    """Version metadata exists but could not be removed."""


class ArchiveError(IterspaceError):
    """Archive build or extraction failed."""


class UnsafeArchiveError(ArchiveError):
    """Archive entry would be written outside the destination."""

    def __init__(self, name: str) -> None:
        super().__init__(f"illegal path: {name}")
        self.name = name


class PushError(IterspaceError):
    """Remote upload failed."""


class EncryptionError(PushError):
    """Payload could not be encrypted or decrypted."""
