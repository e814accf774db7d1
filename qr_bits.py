"""Bit-level cursor over an error-corrected QR data payload."""

import numpy as np


class InsufficientBits(ValueError):
    """Raised when a read asks for more bits than the payload has left."""


class BitReader:
    """MSB-first bit reader. Reads either succeed whole or leave the position alone."""
    def __init__(self, data):
        self.bits = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
        self.position = 0

    def __len__(self):
        return len(self.bits)

    @property
    def remaining(self):
        return len(self.bits) - self.position

    def read_bits(self, count):
        """Read the next `count` bits as an unsigned int (first bit read is the MSB)."""
        if count < 0:
            raise ValueError(f"Cannot read {count} bits")
        if count > self.remaining:
            raise InsufficientBits(f"Need {count} bits at {self.position}, have {self.remaining}")
        chunk = self.bits[self.position:self.position + count]
        # int() first: shifting a uint8 would wrap past 8 bits
        value = sum(int(b) << (count - 1 - i) for i, b in enumerate(chunk))
        self.position += count
        return value

    def reset(self):
        self.position = 0
