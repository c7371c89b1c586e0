"""Exception classes for conman operations.

Every pipeline failure is a ``ConmanError``. The subclass tells which stage
failed (lookup, decode, validation, integrity, install) and its
``error_prefix`` makes that visible in the single message shown to the user.
"""


class ConmanError(Exception):
    """Base exception for conman operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the application that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


# Lookup


class TargetLookupError(ConmanError):
    """Raised when the trust service cannot provide a target."""

    error_prefix = "Lookup failed"


class TargetNotFoundError(TargetLookupError):
    """Raised when the trust repository has no target with that name."""


class TrustServiceError(TargetLookupError):
    """Raised when the trust service is unreachable or misbehaves."""


class ImagePullError(TargetLookupError):
    """Raised when the trusted container image pull fails."""

    error_prefix = "Image pull failed"


# Decode


class DescriptorDecodeError(ConmanError):
    """Raised when the custom payload cannot be unwrapped."""

    error_prefix = "Decode failed"


# Validation


class DescriptorValidationError(ConmanError):
    """Raised when a descriptor violates a structural invariant."""

    error_prefix = "Validation failed"


class NameMismatchError(DescriptorValidationError):
    """Raised when the embedded application name differs from the request."""


class IconTypeError(DescriptorValidationError):
    """Raised when the icon URL extension is not allowed."""


# Integrity


class IntegrityError(ConmanError):
    """Raised when fetched content cannot be trusted."""

    error_prefix = "Integrity check failed"


class ChecksumError(IntegrityError):
    """Raised when content cannot be checksum-verified."""


class ChecksumMismatchError(ChecksumError):
    """Raised when a computed digest differs from the expected one."""


class UnsupportedAlgorithmError(ChecksumError):
    """Raised when a digest algorithm is not supported locally."""


class OversizeError(IntegrityError):
    """Raised when a server announces more bytes than declared."""


class HTTPStatusError(IntegrityError):
    """Raised when a download answers with a non-success status."""


class DownloadError(IntegrityError):
    """Raised when the transport fails while downloading."""

    error_prefix = "Download failed"


# Install


class InstallError(ConmanError):
    """Raised when writing launch artifacts fails."""

    error_prefix = "Installation failed"


class ToolError(InstallError):
    """Raised when an external tool exits with a failure."""


class MissingToolError(ToolError):
    """Raised when a required external tool is not installed."""

    error_prefix = "Missing external dependency"
