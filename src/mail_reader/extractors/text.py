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

"""Plain text extraction from parsed messages."""

import re

import structlog

from mail_reader.errors import UnsupportedMailTypeError
from mail_reader.parsers.email_parser import Mail, MultipartMail, ParsedMail, parse_mail
from mail_reader.parsers.utils import split_headers_and_body

logger = structlog.get_logger(__name__)


# HTML cleanup patterns
SCRIPT_PATTERN = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>')
STYLE_PATTERN = re.compile(r'<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>')
BREAK_PATTERN = re.compile(r'<br\s*/?>')
PARAGRAPH_END_PATTERN = re.compile(r'</p>')
TAG_PATTERN = re.compile(r'<[^>]+>')
NUMERIC_ENTITY_PATTERN = re.compile(r'&#(\d+);')
WHITESPACE_PATTERN = re.compile(r'\s+')

# Entities decoded in this order, before numeric entities
HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&apos;", "'"),
    ("&#39;", "'"),
)

TEXT_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
)


def _replace_numeric_entity(match: re.Match) -> str:
    digits = match.group(1)
    # Longer digit runs cannot name a code point
    if len(digits) > 7:
        return match.group(0)

    code_point = int(digits)
    if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Decode the named HTML entities we know about, then numeric ones."""
    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)
    return NUMERIC_ENTITY_PATTERN.sub(_replace_numeric_entity, text)


def html_to_plain_text(html: str) -> str:
    """
    Convert HTML content to plain text.

    Script and style blocks are dropped, <br> becomes a newline and </p> a
    blank line. Remaining tags are removed and entities decoded. Runs of
    whitespace inside a line collapse to one space and at most one blank
    line is kept between paragraphs.

    Args:
        html: HTML content

    Returns:
        Plain text

    Example:
        >>> html_to_plain_text("<p>Hello, <b>world</b>!</p><br><br>How are you?")
        'Hello, world!\\n\\nHow are you?'
    """
    html = SCRIPT_PATTERN.sub("", html)
    html = STYLE_PATTERN.sub("", html)
    html = BREAK_PATTERN.sub("\n", html)
    html = PARAGRAPH_END_PATTERN.sub("\n\n", html)
    html = TAG_PATTERN.sub("", html)

    text = decode_entities(html)

    lines = [WHITESPACE_PATTERN.sub(" ", line).strip() for line in text.split("\n")]
    text = "\n".join(lines)
    text = re.sub(r'\n{3,}', '\n\n', text)

    return text.strip()


def sanitize_text(text: str) -> str:
    """
    Clean up plain text content.

    Only &nbsp;, &lt; and &gt; are decoded. Each line is trimmed and blank
    lines are removed entirely.

    Args:
        text: Plain text content

    Returns:
        Sanitized text
    """
    for entity, replacement in TEXT_ENTITIES:
        text = text.replace(entity, replacement)

    text = "\n".join(line.strip() for line in text.split("\n"))
    text = re.sub(r'\n{2,}', '\n', text)

    return text.strip()


def _convert(content_type: str, content: str) -> str | None:
    content_type = content_type.lower()
    if content_type.startswith("text/html"):
        return html_to_plain_text(content)
    if content_type.startswith("text/plain"):
        return sanitize_text(content)
    return None


def _process_part(part: str) -> str:
    headers, content = split_headers_and_body(part)
    content_type = headers.get("Content-Type", "")

    text = _convert(content_type, content)
    if text is not None:
        return text

    if content_type.lower().startswith("multipart/"):
        return extract_plain_text(parse_mail(part))

    # Non-text content, ignore
    logger.debug("part_skipped", content_type=content_type)
    return ""


def extract_plain_text(mail: ParsedMail) -> str:
    """
    Extract the plain text content of a parsed message.

    Multipart messages are walked recursively. Each part is parsed only when
    it is visited, HTML parts are converted to text and non-text parts are
    skipped. Text from several parts is separated by a blank line.

    Args:
        mail: Result of parse_mail

    Returns:
        Plain text content (empty if the message has no text part)

    Raises:
        UnsupportedMailTypeError: If mail is neither a Mail nor a MultipartMail
    """
    if isinstance(mail, Mail):
        headers, content = split_headers_and_body(mail.body)
        if not headers:
            # No embedded header block: an empty line is just a paragraph break
            content = mail.body
        content_type = headers.get("Content-Type") or mail.headers.get_first("Content-Type", "")

        text = _convert(content_type, content)
        if text is not None:
            return text
        return _process_part(mail.body)

    if isinstance(mail, MultipartMail):
        text_parts = []
        for part in mail.parts:
            text = _process_part(part)
            if text:
                text_parts.append(text)
        return "\n\n".join(text_parts)

    raise UnsupportedMailTypeError(f"Unsupported mail type: {type(mail).__name__}")
