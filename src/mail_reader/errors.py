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

"""Exceptions raised by mailbox access and mail text extraction."""


class MailReaderError(Exception):
    """Base exception for mail-reader errors."""


class MessageNotFoundError(MailReaderError, KeyError):
    """Raised when a message ordinal is not present in the mailbox index."""

    def __init__(self, key: int):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Message {self.key} not found in mailbox"


class MessageRangeError(MailReaderError, IndexError):
    """Raised when an ordinal range falls outside [1, count] or is reversed."""

    def __init__(self, start: int, stop: int, count: int):
        super().__init__(start, stop, count)
        self.start = start
        self.stop = stop
        self.count = count

    def __str__(self) -> str:
        return (
            f"Message range {self.start}..{self.stop} is outside "
            f"the mailbox bounds 1..{self.count}"
        )


class UnsupportedMailTypeError(MailReaderError, TypeError):
    """Raised when text extraction is given something other than a parsed mail."""
