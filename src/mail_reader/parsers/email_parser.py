#
# Copyright 2025 The Apache Software Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#

"""Email message parser for splitting raw messages into headers, body and parts."""

import base64
import binascii
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field

import structlog

from mail_reader.config import settings
from mail_reader.parsers.utils import LINE_BREAK_PATTERN

logger = structlog.get_logger(__name__)

MBOX_FROM_HEADER = "Mbox-From"

BOUNDARY_PATTERN = re.compile(r'boundary="?(.+?)"?(\s|$)')


class Headers(Mapping):
    """
    Read-only header mapping that keeps every occurrence of a header.

    A header seen once maps to its string value. A repeated header maps to
    the list of its values in file order.
    """

    def __init__(self, values: dict[str, list[str]] | None = None):
        self._values = {name: list(items) for name, items in (values or {}).items()}

    def __getitem__(self, name: str) -> str | list[str]:
        values = self._values[name]
        if len(values) == 1:
            return values[0]
        return list(values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def get_all(self, name: str) -> list[str]:
        """Return every value of a header in file order (empty if absent)."""
        return list(self._values.get(name, []))

    def get_first(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of a header, or default if absent."""
        values = self._values.get(name)
        return values[0] if values else default


@dataclass
class Mail:
    """A single-part message: headers plus a (transfer-decoded) body."""

    headers: Headers = field(default_factory=Headers)
    body: str = ""


@dataclass
class MultipartMail:
    """A multipart message: headers plus the raw text of each part.

    Parts keep their own header block and are parsed only when visited.
    """

    headers: Headers = field(default_factory=Headers)
    parts: list[str] = field(default_factory=list)


ParsedMail = Mail | MultipartMail


def extract_boundary(content_type: str) -> str | None:
    """
    Extract the boundary parameter from a multipart Content-Type value.

    Args:
        content_type: Content-Type header value

    Returns:
        The boundary string, or None if the header has no boundary parameter

    Example:
        >>> extract_boundary('multipart/mixed; boundary="abcdef"')
        'abcdef'
    """
    match = BOUNDARY_PATTERN.search(content_type)
    return match.group(1) if match else None


def split_multipart(body: str, boundary: str) -> list[str]:
    """
    Split a multipart body into its parts.

    The preamble before the first delimiter and the epilogue after the closing
    delimiter are dropped.

    Args:
        body: Multipart body text
        boundary: Boundary without the leading "--"

    Returns:
        Raw part strings, each stripped of surrounding whitespace
    """
    segments = body.split(f"--{boundary}")
    return [segment.strip() for segment in segments[1:-1]]


def _decode_base64(body: str) -> str:
    compact = "".join(body.split())
    try:
        decoded = base64.b64decode(compact.encode("utf-8"), validate=True)
    except binascii.Error as e:
        logger.warning("base64_decode_failed", error=str(e), body_length=len(body))
        return body

    return decoded.decode("utf-8", errors=settings.decode_errors)


def _decode_transfer_encoding(body: str, encoding: str | None) -> str:
    if not encoding:
        return body

    encoding = encoding.lower()
    if encoding == "base64":
        return _decode_base64(body)
    if encoding == "quoted-printable":
        # Quoted-printable is not decoded
        logger.debug("quoted_printable_passthrough", body_length=len(body))

    return body


def parse_mail(raw_message: bytes | str) -> ParsedMail:
    """
    Parse a raw email message into a Mail or MultipartMail.

    Headers are read up to the first blank line. A leading mbox "From " line
    is kept as the synthetic "Mbox-From" header, folded lines are unfolded
    and repeated headers are collected into lists. A base64 body is decoded.
    Multipart bodies are split on their boundary but the parts themselves are
    left unparsed.

    Args:
        raw_message: Message as bytes (decoded as UTF-8) or text

    Returns:
        MultipartMail if the message declares a multipart Content-Type with a
        boundary, Mail otherwise

    Raises:
        UnicodeDecodeError: If decoding fails under a strict decode_errors setting
    """
    if isinstance(raw_message, bytes):
        raw_message = raw_message.decode("utf-8", errors=settings.decode_errors)

    lines = LINE_BREAK_PATTERN.split(raw_message)
    values: dict[str, list[str]] = {}
    current_header = ""

    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1

        if not line.strip():
            break

        if line.startswith("From ") and not values:
            values[MBOX_FROM_HEADER] = [line.strip()]
        elif line.startswith((" ", "\t")):
            if current_header in values:
                values[current_header][-1] += " " + line.strip()
        elif ":" in line:
            key, value = line.split(":", 1)
            key = key.strip()
            current_header = key
            values.setdefault(key, []).append(value.strip())

    headers = Headers(values)
    body = "\n".join(lines[index:])
    body = _decode_transfer_encoding(body, headers.get_first("Content-Transfer-Encoding"))

    content_type = headers.get_first("Content-Type", "")
    if content_type.startswith("multipart/"):
        boundary = extract_boundary(content_type)
        if boundary is not None:
            parts = split_multipart(body, boundary)
            logger.debug("multipart_split", boundary=boundary, parts=len(parts))
            return MultipartMail(headers=headers, parts=parts)

        logger.debug("multipart_boundary_missing", content_type=content_type)

    return Mail(headers=headers, body=body)
