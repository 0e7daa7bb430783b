"""
Upload constraints - per-purpose byte budgets for file uploads
"""

from typing import Protocol

from stpapi.exceptions import UploadTooLargeError
from stpapi.multipart import MultipartFormDataPart
from stpapi.types import FilePurpose

# 0 means no limit
MAX_UPLOAD_BYTES: dict[FilePurpose, int] = {
    FilePurpose.IDENTITY_DOCUMENT: 4 * 1_000_000,
    FilePurpose.DISPUTE_EVIDENCE: 8 * 1_000_000,
    FilePurpose.UNKNOWN: 0,
}


def max_bytes_for_purpose(purpose: FilePurpose) -> int:
    return MAX_UPLOAD_BYTES.get(FilePurpose(purpose), 0)


class ImageConstraintPolicy(Protocol):
    """Fits upload data into a byte budget, e.g. by recompressing an image"""

    def fit(self, data: bytes, max_bytes: int, purpose: FilePurpose) -> bytes:
        ...


class RejectOversizePolicy:
    """Passes data through unchanged; raises UploadTooLargeError over budget"""

    def fit(self, data: bytes, max_bytes: int, purpose: FilePurpose) -> bytes:
        if max_bytes and len(data) > max_bytes:
            raise UploadTooLargeError(FilePurpose(purpose).value, len(data), max_bytes)
        return data


def upload_parts(
    data: bytes,
    purpose: FilePurpose,
    filename: str = "image.jpg",
    content_type: str = "image/jpeg",
) -> list[MultipartFormDataPart]:
    """The ``purpose`` and ``file`` parts of a file upload body"""
    return [
        MultipartFormDataPart(name="purpose", data=FilePurpose(purpose).value.encode("utf-8")),
        MultipartFormDataPart(
            name="file", data=data, filename=filename, content_type=content_type
        ),
    ]
