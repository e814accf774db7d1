"""Tests for BitReader."""

import pytest

from qr_bits import BitReader, InsufficientBits


class TestBitReaderInit:
    def test_init(self):
        br = BitReader(bytes([0xFF, 0x00]))
        assert br.position == 0
        assert br.remaining == 16
        assert len(br) == 16

    def test_init_empty(self):
        br = BitReader(b"")
        assert br.remaining == 0

    def test_accepts_int_list(self):
        br = BitReader([0x12, 0x34])
        assert br.read_bits(16) == 0x1234


class TestBitReaderReadBits:
    def test_msb_first(self):
        br = BitReader(bytes([0b10110100]))
        assert [br.read_bits(1) for _ in range(8)] == [1, 0, 1, 1, 0, 1, 0, 0]

    def test_across_byte_boundary(self):
        br = BitReader(b"\xab\xcd")
        assert br.read_bits(4) == 0xA
        assert br.read_bits(8) == 0xBC
        assert br.read_bits(4) == 0xD
        assert br.remaining == 0

    def test_every_width_up_to_16(self):
        data = b"\xa5\x3c\x0f"
        stream = ''.join(format(b, '08b') for b in data)
        for n in range(17):
            br = BitReader(data)
            br.read_bits(3)
            assert br.read_bits(n) == int(stream[3:3 + n] or '0', 2)
            assert br.position == 3 + n

    def test_wide_read(self):
        br = BitReader(b"\xff" * 4)
        assert br.read_bits(32) == 0xFFFFFFFF

    def test_zero_bits(self):
        br = BitReader(b"\xff")
        assert br.read_bits(0) == 0
        assert br.position == 0

    def test_returns_python_int(self):
        assert type(BitReader(b"\xff\xff").read_bits(12)) is int

    def test_negative_count(self):
        with pytest.raises(ValueError):
            BitReader(b"\xff").read_bits(-1)


class TestBitReaderUnderflow:
    def test_failed_read_keeps_position(self):
        br = BitReader(b"\xff")
        br.read_bits(3)
        with pytest.raises(InsufficientBits):
            br.read_bits(6)
        assert br.position == 3
        assert br.read_bits(5) == 0b11111

    def test_empty(self):
        with pytest.raises(InsufficientBits):
            BitReader(b"").read_bits(1)

    def test_is_value_error(self):
        assert issubclass(InsufficientBits, ValueError)


class TestBitReaderReset:
    def test_reset_rereads_same_bits(self):
        br = BitReader(b"\x5a\xc3")
        first = br.read_bits(11)
        br.reset()
        assert br.position == 0
        assert br.read_bits(11) == first
