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

"""Random access to the messages of an mbox file."""

import threading
from collections.abc import Generator
from pathlib import Path

import structlog

from mail_reader.errors import MessageNotFoundError, MessageRangeError
from mail_reader.parsers.email_parser import ParsedMail, parse_mail

logger = structlog.get_logger(__name__)

MBOX_DELIMITER = b"From "


def generate_toc(path: Path | str) -> dict[int, tuple[int, int]]:
    """
    Build the table of contents of an mbox file.

    Every line starting with "From " opens a new message. Bytes before the
    first such line belong to no message.

    Args:
        path: Path to mbox file

    Returns:
        Mapping of message number (starting at 1) to (start offset, length)

    Raises:
        FileNotFoundError: If mbox file doesn't exist
    """
    toc: dict[int, tuple[int, int]] = {}
    message_count = 0
    start_pos = 0
    current_pos = 0

    with open(path, "rb") as f:
        for line in f:
            if line.startswith(MBOX_DELIMITER):
                if message_count > 0:
                    toc[message_count] = (start_pos, current_pos - start_pos)
                message_count += 1
                start_pos = current_pos
            current_pos += len(line)

    if message_count > 0:
        toc[message_count] = (start_pos, current_pos - start_pos)

    logger.debug("toc_generated", path=str(path), messages=len(toc), size=current_pos)
    return toc


class MboxIndex:
    """
    Lazily indexed mbox mailbox.

    The table of contents is built on the first operation that needs it and
    is never refreshed, so changes made to the file afterwards are not seen.
    Messages are addressed by 1-based ordinal and returned as raw bytes.
    """

    def __init__(self, path: Path | str):
        """
        Initialize mailbox index.

        Args:
            path: Path to mbox file (the file is not read yet)
        """
        self._path = Path(path).resolve()
        self._toc: dict[int, tuple[int, int]] | None = None
        self._toc_lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Absolute path of the mbox file."""
        return self._path

    @property
    def table_of_contents(self) -> dict[int, tuple[int, int]]:
        """Copy of the table of contents, building it if necessary."""
        return dict(self._ensure_toc())

    def _ensure_toc(self) -> dict[int, tuple[int, int]]:
        if self._toc is None:
            with self._toc_lock:
                if self._toc is None:
                    try:
                        self._toc = generate_toc(self._path)
                    except OSError as e:
                        logger.error("toc_generation_failed", path=str(self._path), error=str(e))
                        raise
        return self._toc

    def get_message(self, key: int) -> bytes:
        """
        Read the raw bytes of one message.

        Args:
            key: Message number, starting at 1

        Returns:
            Message content, including its "From " line

        Raises:
            MessageNotFoundError: If no message has this number
        """
        toc = self._ensure_toc()
        if key not in toc:
            logger.debug("message_not_found", path=str(self._path), key=key, count=len(toc))
            raise MessageNotFoundError(key)

        start_pos, length = toc[key]
        with open(self._path, "rb") as f:
            f.seek(start_pos)
            return f.read(length)

    def __getitem__(self, key: int) -> bytes:
        return self.get_message(key)

    def __len__(self) -> int:
        return len(self._ensure_toc())

    def __iter__(self) -> Generator[bytes, None, None]:
        key = 1
        while key <= len(self):
            yield self.get_message(key)
            key += 1

    def iter_range(self, start: int, stop: int) -> Generator[bytes, None, None]:
        """
        Iterate over the messages numbered start to stop, both included.

        Args:
            start: First message number
            stop: Last message number

        Returns:
            Generator of raw message bytes

        Raises:
            MessageRangeError: If the range is reversed or outside [1, count]
        """
        count = len(self)
        if start > stop or start < 1 or stop > count:
            raise MessageRangeError(start, stop, count)

        return (self.get_message(key) for key in range(start, stop + 1))

    def mails(self) -> Generator[ParsedMail, None, None]:
        """
        Parse messages one at a time in mailbox order.

        Yields:
            Mail or MultipartMail for each message
        """
        for raw in self:
            yield parse_mail(raw)

    def message_ids(self) -> list[str]:
        """
        Extract all message IDs from the mailbox.

        Messages without a Message-ID header are skipped.

        Returns:
            List of message IDs in mailbox order
        """
        message_ids = []
        for mail in self.mails():
            message_id = (mail.headers.get_first("Message-ID") or "").strip()
            if message_id:
                message_ids.append(message_id)

        logger.debug("extracted_message_ids", path=str(self._path), count=len(message_ids))
        return message_ids

    def __repr__(self) -> str:
        return f"MboxIndex({str(self._path)!r})"
