#!/usr/bin/env python3.11
"""
QR Payload Decoder - Pure Python
Turns the error-corrected data codewords of a QR symbol into text.
Usage: python3.11 qr_decode.py <payload.bin | hex> [version] [--debug]
"""

import os
from enum import IntEnum

from qr_bits import BitReader, InsufficientBits

# Global debug output directory (None = disabled)
DEBUG_DIR = None


# ============================================================================
# MODES
# ============================================================================

class Mode(IntEnum):
    """Mode indicator: the first 4 bits of every segment."""
    TERMINATOR = 0
    NUMERIC = 1
    ALPHANUMERIC = 2
    STRUCTURED_APPEND = 3
    BYTE = 4
    FNC1_FIRST = 5
    ECI = 7
    KANJI = 8
    FNC1_SECOND = 9


MODE_BITS = 4
SUPPORTED_MODES = (Mode.NUMERIC, Mode.ALPHANUMERIC, Mode.BYTE)

# mode -> (bits per symbol, count indicator bits for versions 1-9, 10-26, 27-40)
FIELD_WIDTHS = {
    Mode.NUMERIC: (10, (10, 12, 14)),
    Mode.ALPHANUMERIC: (11, (9, 11, 13)),
    Mode.BYTE: (8, (8, 16, 16)),
}

ALNUM = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"


class UnsupportedMode(ValueError):
    pass


class InvalidVersion(ValueError):
    pass


class TextConversionError(ValueError):
    pass


def parse_mode(code):
    """Map a 4-bit mode code to a Mode. Anything we cannot decode reads as TERMINATOR."""
    try:
        mode = Mode(code)
    except ValueError:
        return Mode.TERMINATOR
    return mode if mode in SUPPORTED_MODES else Mode.TERMINATOR


def version_group(version):
    """Index of the count-indicator width column: 0 for 1-9, 1 for 10-26, 2 for 27-40."""
    if 1 <= version <= 9:
        return 0
    if 10 <= version <= 26:
        return 1
    if 27 <= version <= 40:
        return 2
    raise InvalidVersion(f"QR version {version} outside 1-40")


def field_widths(mode, version):
    """Return (bits per symbol, character count indicator bits) for a segment."""
    if mode not in FIELD_WIDTHS:
        raise UnsupportedMode(f"No field widths for mode {mode!r}")
    symbol_bits, count_bits = FIELD_WIDTHS[mode]
    return symbol_bits, count_bits[version_group(version)]


# ============================================================================
# SEGMENT DECODING
# ============================================================================

def decode_numeric(reader, count, symbol_bits=10):
    """Numeric: 3 digits = 10 bits, 2 = 7 bits, 1 = 4 bits."""
    text = ""
    for _ in range(count // 3):
        # "145016" is packed as 145, 16: keep the zeros
        text += f"{reader.read_bits(symbol_bits):03d}"
    if count % 3 == 2:
        text += f"{reader.read_bits(7):02d}"
    elif count % 3 == 1:
        text += str(reader.read_bits(4))
    return text


def decode_alphanumeric(reader, count, symbol_bits=11):
    """Alphanumeric: 2 chars = 11 bits, 1 = 6 bits.

    Symbols pointing outside the 45-character table are dropped, the rest of the
    segment still decodes.
    """
    text = ""
    for _ in range(count // 2):
        val = reader.read_bits(symbol_bits)
        if val // 45 < len(ALNUM):
            text += ALNUM[val // 45] + ALNUM[val % 45]
    if count % 2:
        val = reader.read_bits(6)
        if val < len(ALNUM):
            text += ALNUM[val]
    return text


def decode_byte(reader, count, encoding, symbol_bits=8):
    """Byte: one 8-bit symbol per character, decoded as a whole run."""
    chars = bytes(reader.read_bits(symbol_bits) for _ in range(count))
    try:
        return chars.decode(encoding)
    except UnicodeDecodeError:
        return ""


class SegmentDecoder:
    """
    One decoding pass over a payload.

    Reads mode indicator, count indicator and symbols segment by segment until a
    terminator, an unsupported mode or the end of the data. The text encoding
    for byte segments is fixed when the decoder is built.
    """
    def __init__(self, reader, version, encoding="utf-8"):
        self.reader = reader
        self.version = version
        self.encoding = encoding
        self.text = ""
        self.segments = []
        self.stop_reason = None

    def read_mode(self):
        try:
            code = self.reader.read_bits(MODE_BITS)
        except InsufficientBits:
            self.stop_reason = "end of data"
            return Mode.TERMINATOR
        mode = parse_mode(code)
        if mode == Mode.TERMINATOR:
            self.stop_reason = "terminator" if code == 0 else f"unsupported mode {code}"
        return mode

    def decode_segment(self, mode):
        """Decode the body of one segment. Returns (count, text)."""
        symbol_bits, count_bits = field_widths(mode, self.version)
        count = self.reader.read_bits(count_bits)
        if mode == Mode.NUMERIC:
            return count, decode_numeric(self.reader, count, symbol_bits)
        elif mode == Mode.ALPHANUMERIC:
            return count, decode_alphanumeric(self.reader, count, symbol_bits)
        elif mode == Mode.BYTE:
            return count, decode_byte(self.reader, count, self.encoding, symbol_bits)
        raise UnsupportedMode(f"Cannot decode {mode.name} segment")

    def step(self):
        """Decode the next segment. Returns False once decoding has terminated."""
        start = self.reader.position
        mode = self.read_mode()
        if mode == Mode.TERMINATOR:
            return False
        try:
            count, text = self.decode_segment(mode)
        except InsufficientBits:
            self.stop_reason = f"{mode.name} segment truncated"
            return False
        except (UnsupportedMode, InvalidVersion) as e:
            self.stop_reason = str(e)
            return False

        self.text += text
        self.segments.append({'segment': len(self.segments), 'mode': mode.name, 'count': count,
                              'start_bit': start, 'end_bit': self.reader.position, 'text': text})
        return True

    def run(self):
        while self.step():
            pass
        return self.text


# ============================================================================
# TEXT ENCODING
# ============================================================================

# Russian payment QR codes (GOST R 56042) start with a service header; the 7th
# character selects the text encoding of the byte segments.
SELECTOR_INDEX = 6
ENCODING_SELECTORS = {'1': 'cp1251', '2': 'utf-8', '3': 'koi8_r'}
DEFAULT_ENCODING = 'utf-8'


def detect_encoding(reader, version):
    """Decode just far enough to read the encoding selector character."""
    reader.reset()
    decoder = SegmentDecoder(reader, version, DEFAULT_ENCODING)
    while decoder.step():
        if len(decoder.text) > SELECTOR_INDEX:
            return ENCODING_SELECTORS.get(decoder.text[SELECTOR_INDEX], DEFAULT_ENCODING)
    return DEFAULT_ENCODING


def normalize_text(text, encoding):
    """Round-trip the text through its encoding; fail rather than return mangled text."""
    try:
        return text.encode(encoding).decode(encoding)
    except UnicodeError as e:
        raise TextConversionError(f"Result is not valid {encoding}: {e}") from e


# ============================================================================
# MAIN
# ============================================================================

def decode_with_encoding(data, version):
    """Decode a payload. Returns (text, encoding the byte segments were read with)."""
    reader = BitReader(data)
    encoding = detect_encoding(reader, version)

    reader.reset()
    decoder = SegmentDecoder(reader, version, encoding)
    try:
        result = normalize_text(decoder.run(), encoding)
    except TextConversionError as e:
        _save_debug(data, version, encoding, decoder, f"[failed: {e}]")
        raise

    _save_debug(data, version, encoding, decoder, result)
    return result, encoding


def decode_payload(data, version):
    """Decode error-corrected QR payload bytes of the given symbol version to text."""
    return decode_with_encoding(data, version)[0]


def _save_debug(data, version, encoding, decoder, result):
    if DEBUG_DIR:
        from qr_debug import save_debug_all
        save_debug_all(DEBUG_DIR, data, version, encoding,
                       decoder.segments, decoder.stop_reason, result)


def load_payload(arg):
    """Payload from a binary file if `arg` names one, otherwise from a hex string."""
    if os.path.isfile(arg):
        with open(arg, 'rb') as f:
            return f.read()
    return bytes.fromhex(arg)


if __name__ == "__main__":
    import sys
    args = [a for a in sys.argv[1:] if not a.startswith('--')]
    flags = [a for a in sys.argv[1:] if a.startswith('--')]
    if not args:
        print(__doc__.strip())
        sys.exit(1)
    source = args[0]

    if '--debug' in flags:
        is_file = os.path.isfile(source)
        base = os.path.splitext(os.path.basename(source))[0] if is_file else "payload"
        DEBUG_DIR = os.path.join((os.path.dirname(source) if is_file else '') or '.', f"{base}_debug")
        os.makedirs(DEBUG_DIR, exist_ok=True)
        print(f"Debug output -> {DEBUG_DIR}/")

    try:
        version = int(args[1]) if len(args) > 1 else 1
        print(decode_payload(load_payload(source), version))
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
