import io
import logging

import pytest

from bdecode.__main__ import HexBytes, main, printable


class TestPrintable:
    """Test conversion of decoded values for display."""

    def test_ascii_string(self):
        """Test that printable byte strings are shown as text."""
        assert printable(b"spam") == "spam"

    def test_binary_string(self):
        """Test that other byte strings are shown as hex."""
        value = printable(b"\x00\xff")
        assert isinstance(value, HexBytes)
        assert repr(value) == "hex(2 bytes):'00ff'"

    def test_nested(self):
        """Test that containers are converted recursively."""
        assert printable({b"a": [1, b"b"]}) == {"a": [1, "b"]}


class TestMain:
    """Test suite for the bdecode command line."""

    @pytest.fixture
    def torrent(self, tmp_path):
        path = tmp_path / "test.torrent"
        path.write_bytes(b"d8:announce3:url4:infod6:lengthi100eee")
        return path

    def test_dump_file(self, torrent, capsys):
        """Test pretty-printing a file."""
        assert main([str(torrent)]) == 0
        out = capsys.readouterr().out
        assert "'announce': 'url'" in out
        assert "'length': 100" in out

    def test_dump_stdin(self, monkeypatch, capsys):
        """Test reading from stdin with -."""
        stdin = io.TextIOWrapper(io.BytesIO(b"li1ei2ee"))
        monkeypatch.setattr("sys.stdin", stdin)
        assert main(["-"]) == 0
        assert capsys.readouterr().out.strip() == "[1, 2]"

    def test_dump_all(self, tmp_path, capsys):
        """Test decoding every concatenated value."""
        path = tmp_path / "multi.bin"
        path.write_bytes(b"i1ei2e")
        assert main(["--all", str(path)]) == 0
        assert capsys.readouterr().out.split() == ["1", "2"]

    def test_malformed_file(self, tmp_path, caplog):
        """Test that a malformed file is reported and fails the run."""
        path = tmp_path / "bad.torrent"
        path.write_bytes(b"d3:foo")
        with caplog.at_level(logging.ERROR):
            assert main([str(path)]) == 1
        assert "dict val" in caplog.text

    def test_missing_file(self, tmp_path, caplog):
        """Test that an unreadable file is reported and fails the run."""
        with caplog.at_level(logging.ERROR):
            assert main([str(tmp_path / "missing")]) == 1
        assert "missing" in caplog.text

    def test_strict(self, tmp_path):
        """Test that --strict rejects non-canonical input."""
        path = tmp_path / "padded.bin"
        path.write_bytes(b"i03e")
        assert main([str(path)]) == 0
        assert main(["--strict", str(path)]) == 1

    def test_max_depth(self, tmp_path):
        """Test the nesting limit flag, with 0 meaning unbounded."""
        path = tmp_path / "deep.bin"
        path.write_bytes(b"llllee" + b"ee")
        assert main(["--max-depth", "2", str(path)]) == 1
        assert main(["--max-depth", "0", str(path)]) == 0

    def test_empty_file(self, tmp_path, caplog, capsys):
        """Test that an empty file is not an error."""
        path = tmp_path / "empty.bin"
        path.write_bytes(b"")
        with caplog.at_level(logging.WARNING):
            assert main([str(path)]) == 0
        assert "empty input" in caplog.text
        assert capsys.readouterr().out == ""
