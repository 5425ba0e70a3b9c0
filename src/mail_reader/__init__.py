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


"""Random access to mbox archives and plain text extraction from MIME messages."""

# Configure structlog before any module emits log events
import mail_reader.logging_config  # noqa: F401
from mail_reader.errors import (
    MailReaderError,
    MessageNotFoundError,
    MessageRangeError,
    UnsupportedMailTypeError,
)
from mail_reader.extractors import extract_plain_text, html_to_plain_text, sanitize_text
from mail_reader.parsers.email_parser import Headers, Mail, MultipartMail, ParsedMail, parse_mail
from mail_reader.parsers.mbox_parser import MboxIndex, generate_toc
from mail_reader.parsers.utils import split_headers_and_body

__version__ = "0.1.0"

__all__ = [
    "MboxIndex",
    "generate_toc",
    "Headers",
    "Mail",
    "MultipartMail",
    "ParsedMail",
    "parse_mail",
    "split_headers_and_body",
    "extract_plain_text",
    "html_to_plain_text",
    "sanitize_text",
    "MailReaderError",
    "MessageNotFoundError",
    "MessageRangeError",
    "UnsupportedMailTypeError",
]
