"""
multipart/form-data encoding for file uploads
"""

import secrets
from dataclasses import dataclass


@dataclass(frozen=True)
class MultipartFormDataPart:
    """One part of a multipart body"""

    name: str
    data: bytes
    filename: str | None = None
    content_type: str | None = None

    def header_bytes(self) -> bytes:
        disposition = f'Content-Disposition: form-data; name="{self.name}"'
        if self.filename is not None:
            disposition += f'; filename="{self.filename}"'
        lines = [disposition]
        if self.content_type is not None:
            lines.append(f"Content-Type: {self.content_type}")
        return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


def generate_boundary() -> str:
    """Random boundary token, unlikely to collide with payload content"""
    return f"Stripe-Python-Boundary-{secrets.token_hex(16)}"


def multipart_content_type(boundary: str) -> str:
    return f"multipart/form-data; boundary={boundary}"


def multipart_form_data(parts: list[MultipartFormDataPart], boundary: str) -> bytes:
    """
    Encode parts into a multipart/form-data body.

    Args:
        parts: Parts in the order they should appear
        boundary: Boundary token (without leading dashes)

    Returns:
        Body bytes
    """
    body = bytearray()
    for part in parts:
        body += f"--{boundary}\r\n".encode("utf-8")
        body += part.header_bytes()
        body += part.data
        body += b"\r\n"
    body += f"--{boundary}--\r\n".encode("utf-8")
    return bytes(body)
