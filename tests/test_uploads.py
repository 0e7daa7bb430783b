"""
Tests for upload byte budgets
"""

import pytest

from stpapi.exceptions import UploadTooLargeError, ValidationError
from stpapi.types import FilePurpose
from stpapi.uploads import RejectOversizePolicy, max_bytes_for_purpose, upload_parts


def test_max_bytes_for_purpose():
    assert max_bytes_for_purpose(FilePurpose.IDENTITY_DOCUMENT) == 4_000_000
    assert max_bytes_for_purpose(FilePurpose.DISPUTE_EVIDENCE) == 8_000_000
    assert max_bytes_for_purpose(FilePurpose.UNKNOWN) == 0


def test_policy_passes_data_within_budget():
    data = b"x" * 10
    assert RejectOversizePolicy().fit(data, 10, FilePurpose.IDENTITY_DOCUMENT) == data


def test_policy_unlimited_budget():
    data = b"x" * 10
    assert RejectOversizePolicy().fit(data, 0, FilePurpose.UNKNOWN) == data


def test_policy_rejects_oversize():
    with pytest.raises(UploadTooLargeError) as exc_info:
        RejectOversizePolicy().fit(b"x" * 11, 10, FilePurpose.IDENTITY_DOCUMENT)

    assert isinstance(exc_info.value, ValidationError)
    assert exc_info.value.size == 11
    assert exc_info.value.purpose == "identity_document"


def test_upload_parts():
    purpose_part, file_part = upload_parts(b"\xff\xd8", FilePurpose.DISPUTE_EVIDENCE)

    assert purpose_part.name == "purpose"
    assert purpose_part.data == b"dispute_evidence"
    assert file_part.filename == "image.jpg"
    assert file_part.content_type == "image/jpeg"
