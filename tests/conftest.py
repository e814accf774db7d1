"""Pytest configuration and fixtures."""

import pytest


def pack(*fields):
    """Pack (value, width) fields MSB-first into bytes, zero padded to a whole byte."""
    bits = ''.join(format(value, f'0{width}b') for value, width in fields)
    bits += '0' * (-len(bits) % 8)
    return int(bits, 2).to_bytes(len(bits) // 8, 'big') if bits else b''


def byte_segment(raw, count_bits=8):
    """Fields of a byte mode segment carrying `raw`."""
    return [(4, 4), (len(raw), count_bits)] + [(b, 8) for b in raw]


@pytest.fixture
def numeric_012345():
    """Version 1 payload: one numeric segment "012345" and a terminator."""
    return pack((1, 4), (6, 10), (12, 10), (345, 10), (0, 4))
