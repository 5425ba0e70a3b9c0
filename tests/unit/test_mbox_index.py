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

"""Unit tests for the mbox table of contents and random access."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from mail_reader.errors import MessageNotFoundError, MessageRangeError
from mail_reader.parsers import mbox_parser
from mail_reader.parsers.email_parser import Mail, MultipartMail
from mail_reader.parsers.mbox_parser import MboxIndex, generate_toc


class TestGenerateToc:
    """Tests for generate_toc function."""

    def test_one_entry_per_delimiter(self, mbox_path, mbox_content):
        """Test that every "From " line opens a message."""
        toc = generate_toc(mbox_path)
        delimiters = sum(
            1 for line in mbox_content.splitlines() if line.startswith(b"From ")
        )
        assert len(toc) == delimiters == 2
        assert sorted(toc) == [1, 2]

    def test_entries_are_offset_length_pairs(self, mbox_path):
        """Test that entries are (start, length) tuples of integers."""
        toc = generate_toc(mbox_path)
        assert all(
            isinstance(start, int) and isinstance(length, int)
            for start, length in toc.values()
        )

    def test_ranges_do_not_overlap(self, mbox_path):
        """Test that ranges are contiguous and ordered by message number."""
        toc = generate_toc(mbox_path)
        first_start, first_length = toc[1]
        second_start, second_length = toc[2]
        assert first_start == 0
        assert first_start + first_length <= second_start
        assert second_start + second_length == mbox_path.stat().st_size

    def test_header_lines_are_not_delimiters(self, make_mbox):
        """Test that "From:" headers do not start a message."""
        path = make_mbox(b"From x 1\nFrom: x@example.com\n\nbody\n")
        assert generate_toc(path) == {1: (0, 35)}

    def test_no_delimiters(self, make_mbox):
        """Test file without "From " lines."""
        path = make_mbox(b"Subject: hi\n\nNo delimiter here\n")
        assert generate_toc(path) == {}

    def test_empty_file(self, make_mbox):
        """Test empty file."""
        path = make_mbox(b"")
        assert generate_toc(path) == {}

    def test_leading_garbage_skipped(self, make_mbox):
        """Test that bytes before the first delimiter belong to no message."""
        path = make_mbox(b"junk\nFrom a 1\nbody\n")
        assert generate_toc(path) == {1: (5, 14)}

    def test_crlf_offsets(self, make_mbox):
        """Test byte offsets with CRLF line endings."""
        path = make_mbox(b"From a 1\r\nx\r\nFrom b 2\r\ny\r\n")
        assert generate_toc(path) == {1: (0, 13), 2: (13, 13)}

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            generate_toc(tmp_path / "missing.mbox")


class TestMboxIndexConstruction:
    """Tests for MboxIndex construction."""

    def test_path_is_absolute(self, mbox_path, monkeypatch):
        """Test that a relative path is resolved."""
        monkeypatch.chdir(mbox_path.parent)
        mbox = MboxIndex(mbox_path.name)
        assert mbox.path.is_absolute()
        assert mbox.path == mbox_path.resolve()

    def test_toc_is_lazy(self, mbox_path):
        """Test that the file is not indexed at construction."""
        mbox = MboxIndex(mbox_path)
        assert mbox._toc is None

        len(mbox)
        assert mbox._toc is not None

    def test_missing_file_fails_on_first_access(self, tmp_path):
        """Test that construction succeeds but access fails for a missing file."""
        mbox = MboxIndex(tmp_path / "missing.mbox")
        with pytest.raises(FileNotFoundError):
            len(mbox)

    def test_table_of_contents_is_a_copy(self, mbox_path):
        """Test that callers cannot alter the index."""
        mbox = MboxIndex(mbox_path)
        toc = mbox.table_of_contents
        toc.clear()
        assert len(mbox) == 2

    def test_toc_built_once_under_concurrency(self, mbox_path):
        """Test that concurrent first access builds the index only once."""
        mbox = MboxIndex(mbox_path)
        with patch.object(mbox_parser, "generate_toc", wraps=generate_toc) as spy:
            with ThreadPoolExecutor(max_workers=8) as executor:
                counts = list(executor.map(lambda _: len(mbox), range(32)))

        assert set(counts) == {2}
        assert spy.call_count == 1


class TestGetMessage:
    """Tests for reading messages by number."""

    def test_first_message(self, mbox_path, mbox_content):
        """Test reading the first message."""
        mbox = MboxIndex(mbox_path)
        message = mbox.get_message(1)
        assert isinstance(message, bytes)
        assert message.startswith(b"From a@b 1 Jan 1970\n")
        assert b"Subject: First" in message
        assert b"Subject: Second" not in message

    def test_getitem_matches_get_message(self, mbox_path):
        """Test that indexing and get_message agree."""
        mbox = MboxIndex(mbox_path)
        assert mbox[1] == mbox.get_message(1)
        assert mbox[len(mbox)] == mbox.get_message(2)

    def test_one_past_the_end(self, mbox_path):
        """Test that count + 1 is not found."""
        mbox = MboxIndex(mbox_path)
        with pytest.raises(MessageNotFoundError):
            mbox.get_message(len(mbox) + 1)

    @pytest.mark.parametrize("key", [0, -1, 3, 100])
    def test_out_of_range_keys(self, mbox_path, key):
        """Test that numbers outside 1..count raise a KeyError."""
        mbox = MboxIndex(mbox_path)
        with pytest.raises(KeyError) as exc_info:
            mbox[key]
        assert exc_info.value.key == key

    def test_empty_mailbox(self, make_mbox):
        """Test access to a mailbox without messages."""
        mbox = MboxIndex(make_mbox(b"no messages\n"))
        assert len(mbox) == 0
        assert list(mbox) == []
        with pytest.raises(MessageNotFoundError):
            mbox[1]

    def test_messages_reconstruct_file(self, mbox_path, mbox_content):
        """Test that the messages concatenated give back the file."""
        mbox = MboxIndex(mbox_path)
        assert b"".join(mbox) == mbox_content


class TestIteration:
    """Tests for sequential and range access."""

    def test_iteration_matches_indexed_access(self, mbox_path):
        """Test that iteration yields the same bytes as indexing."""
        mbox = MboxIndex(mbox_path)
        messages = list(mbox)
        assert len(messages) == len(mbox)
        for number, message in enumerate(messages, start=1):
            assert message == mbox[number]

    def test_iter_range_full(self, mbox_path):
        """Test iterating over the full range."""
        mbox = MboxIndex(mbox_path)
        assert list(mbox.iter_range(1, 2)) == [mbox[1], mbox[2]]

    def test_iter_range_single(self, mbox_path):
        """Test a range of one message."""
        mbox = MboxIndex(mbox_path)
        assert list(mbox.iter_range(2, 2)) == [mbox[2]]

    @pytest.mark.parametrize("start,stop", [(0, 1), (1, 3), (2, 1), (3, 3)])
    def test_iter_range_out_of_bounds(self, mbox_path, start, stop):
        """Test that invalid ranges raise immediately."""
        mbox = MboxIndex(mbox_path)
        with pytest.raises(MessageRangeError) as exc_info:
            mbox.iter_range(start, stop)

        assert isinstance(exc_info.value, IndexError)
        assert exc_info.value.count == 2

    def test_mails_are_parsed_lazily(self, mbox_path):
        """Test that mails() yields parsed messages in order."""
        mbox = MboxIndex(mbox_path)
        mails = list(mbox.mails())
        assert isinstance(mails[0], Mail)
        assert isinstance(mails[1], MultipartMail)
        assert mails[0].headers["Subject"] == "First"

    def test_message_ids(self, mbox_path):
        """Test that messages without Message-ID are skipped."""
        mbox = MboxIndex(mbox_path)
        assert mbox.message_ids() == ["<one@example.com>"]
