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

"""Helpers shared by the message parser and the text extractor."""

import re

LINE_BREAK_PATTERN = re.compile(r"\r?\n")


def split_headers_and_body(part: str) -> tuple[dict[str, str], str]:
    """
    Split a message or MIME part into its local headers and body.

    The first empty line ends the header block. Unlike ``parse_mail`` this
    keeps only the last value of a repeated header and does not unfold
    continuation lines.

    Args:
        part: Raw text of a message or of one multipart part

    Returns:
        Tuple of (headers, body). When there is no empty line the headers are
        empty and the body is the input unchanged.

    Example:
        >>> split_headers_and_body("Subject: Test\\r\\n\\r\\nThis is the body.")
        ({'Subject': 'Test'}, 'This is the body.')
    """
    lines = LINE_BREAK_PATTERN.split(part)
    try:
        header_end = lines.index("")
    except ValueError:
        return {}, part

    headers = {}
    for line in lines[:header_end]:
        if ":" in line:
            key, value = line.split(":", 1)
            headers[key.strip()] = value.strip()

    body = "\n".join(lines[header_end + 1:])
    return headers, body
