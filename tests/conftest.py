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

"""Pytest fixtures for mail-reader tests."""

import pytest

FIRST_MESSAGE = (
    b"From a@b 1 Jan 1970\n"
    b"From: Alice <alice@example.com>\n"
    b"Subject: First\n"
    b"Message-ID: <one@example.com>\n"
    b"Content-Type: text/plain\n"
    b"\n"
    b"Hello from Alice\n"
)

SECOND_MESSAGE = (
    b"From a@b 1 Jan 1970\n"
    b"From: Bob <bob@example.com>\n"
    b"Subject: Second\n"
    b"Content-Type: multipart/alternative; boundary=\"XYZ\"\n"
    b"\n"
    b"This is a multi-part message in MIME format.\n"
    b"--XYZ\n"
    b"Content-Type: text/plain; charset=utf-8\n"
    b"\n"
    b"Hello plain\n"
    b"--XYZ\n"
    b"Content-Type: text/html; charset=utf-8\n"
    b"\n"
    b"<p>Hello <b>html</b></p>\n"
    b"--XYZ--\n"
    b"\n"
)

@pytest.fixture
def multipart_message():
    """A multipart/alternative message with a text/plain and a text/html part."""
    return SECOND_MESSAGE.decode("utf-8")


@pytest.fixture
def mbox_content():
    """Raw content of a two message mbox file."""
    return FIRST_MESSAGE + SECOND_MESSAGE


@pytest.fixture
def mbox_path(tmp_path, mbox_content):
    """Write the two message mbox file to a temporary directory."""
    path = tmp_path / "sample.mbox"
    path.write_bytes(mbox_content)
    return path


@pytest.fixture
def make_mbox(tmp_path):
    """Factory writing arbitrary bytes to a temporary mbox file."""
    def _make(content: bytes, name: str = "custom.mbox"):
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _make
