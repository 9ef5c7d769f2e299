"""
MedChain error types.

Service functions raise these; the app-level handler in medchain.main
turns them into JSON responses with the attached status code.
"""

from typing import Any


class MedChainError(Exception):
    """Base exception for MedChain service errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None, body: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.body = body


class FileTooLargeError(MedChainError):
    """Raised when an upload exceeds the IPFS size limit."""

    status_code = 413


class IPFSUploadError(MedChainError):
    """Pinata rejected the pin request."""

    status_code = 502


class NFTMintError(MedChainError):
    status_code = 500


class AirdropError(MedChainError):
    status_code = 502


class InvalidAppointmentState(MedChainError):
    """Approve/reject called on an appointment that is no longer pending."""

    status_code = 409
