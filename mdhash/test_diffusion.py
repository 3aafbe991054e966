"""
Unit tests for diffusion measurement.

Run tests with: pytest mdhash -v
"""

import pytest

from mdhash.config import BIT_PROFILE, BYTE_PROFILE, FILE_PROFILE
from mdhash.diffusion import flip_bit, length_diffusion, measure_diffusion, message_diffusion
from mdhash.engine import HashEngine
from mdhash.errors import InvalidInput

MESSAGE_1 = "01111010011111110100101111111011"
MESSAGE_2 = "11111010011111110100101111111011"


class TestMeasureDiffusion:
    """Bit-level comparison of two values."""

    def test_identical(self):
        report = measure_diffusion(b"\x12\x34", b"\x12\x34")
        assert report.different_bits == 0
        assert report.total_bits == 16
        assert report.percentage == 0.0

    def test_complement(self):
        report = measure_diffusion(b"\x00", b"\xff")
        assert report.different_bits == 8
        assert report.percentage == 100.0

    def test_shorter_side_padded_with_zeros(self):
        report = measure_diffusion(b"\xff", b"\xff\x00")
        assert report.total_bits == 16
        assert report.different_bits == 0

    def test_mismatched_lengths(self):
        report = measure_diffusion("1", b"\xff")
        assert report.bits1 == "10000000"
        assert report.different_bits == 7

    def test_empty_inputs(self):
        report = measure_diffusion(b"", "")
        assert report.total_bits == 0
        assert report.percentage == 0.0
        assert "Diffusion percentage: 0.00%" in report.render()

    def test_input_messages_one_bit_apart(self):
        report = measure_diffusion(MESSAGE_1, MESSAGE_2)
        assert report.total_bits == 32
        assert report.different_bits == 1
        assert report.markers == "^" + " " * 31

    def test_render(self):
        report = measure_diffusion("1100", "1010")
        assert report.render().splitlines() == [
            "Total bits compared: 4",
            "Different bits: 2",
            "Diffusion percentage: 50.00%",
            "Bit differences (^ marks different bits):",
            "1: 1100",
            "2: 1010",
            "    ^^ ",
        ]
        assert len(report.render(visual=False).splitlines()) == 3

    def test_as_dict(self):
        data = measure_diffusion("111", "000").as_dict()
        assert data["totalBits"] == 3
        assert data["differentBits"] == 3
        assert data["percentage"] == 100.0

    def test_invalid_value(self):
        with pytest.raises(InvalidInput):
            measure_diffusion("12", "00")


class TestFlipBit:

    def test_flip_bytes(self):
        assert flip_bit(b"\x00\x00", 0) == b"\x80\x00"
        assert flip_bit(b"\x00\x00", 15) == b"\x00\x01"

    def test_flip_bits(self):
        assert flip_bit("000", 2) == "001"

    def test_out_of_range(self):
        with pytest.raises(InvalidInput):
            flip_bit(b"\x00", 8)


class TestExperiments:
    """Diffusion of engine outputs."""

    def test_length_field_flip_in_bit_construction(self):
        engine = HashEngine(BIT_PROFILE, iv="01101010")
        report = length_diffusion(engine, MESSAGE_1)
        # 11001110 vs 11001111
        assert report.bits1 == "11001110"
        assert report.bits2 == "11001111"
        assert report.percentage > 10

    def test_length_diffusion_leaves_engine_untouched(self):
        engine = HashEngine(FILE_PROFILE)
        length_diffusion(engine, b"file content")
        assert engine.state == engine.initial_state

    def test_length_diffusion_partial_tail(self):
        engine = HashEngine(BYTE_PROFILE, iv=b"\x6a")
        report = length_diffusion(engine, b"\x01")
        assert report.bits1 == "00110011"
        assert report.bits2 == "11111001"

    def test_message_diffusion_uses_initial_state(self):
        engine = HashEngine(FILE_PROFILE, iv=bytes(20))
        engine.hash(b"unrelated")
        report = message_diffusion(b"abc", flip_bit(b"abc", 0), engine)
        assert report.total_bits == 160
        assert report.different_bits > 0

    def test_colliding_messages_show_no_diffusion(self):
        engine = HashEngine(BYTE_PROFILE, iv=b"\x6a")
        assert message_diffusion(MESSAGE_1, MESSAGE_2, engine).different_bits == 0
