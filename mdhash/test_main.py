"""
Tests for the demo entry point.

Run tests with: pytest mdhash -v
"""

from mdhash.__main__ import main


def test_demo(capsys):
    assert main(["--fixed-iv", "demo"]) == 0
    out = capsys.readouterr().out
    assert "IV:       01101010" in out
    assert "Digest1:  10011000" in out
    assert "Comparing output digests:" in out


def test_demo_rejects_bad_bits(capsys):
    assert main(["demo", "0102", "0000"]) == 1
    assert "error:" in capsys.readouterr().err


def test_file(tmp_path, capsys):
    path = tmp_path / "sample.txt"
    path.write_bytes(b"sample file contents\n")
    assert main(["--fixed-iv", "file", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Initialization Vector: 6a09e667bb67ae853c6ef372a54ff53a510e527f" in out
    assert "Total bits compared: 160" in out


def test_describe():
    from mdhash.__main__ import describe
    from mdhash.config import BIT_PROFILE
    from mdhash.engine import HashEngine

    assert describe(HashEngine(BIT_PROFILE)) == "8 bits digest, 16 bits blocks, 3 rounds"
