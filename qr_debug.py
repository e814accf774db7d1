"""QR payload decode debug dump - saves intermediate results to disk."""

import os

from qr_bits import BitReader


def _save_text(debug_dir, name, text):
    """Save text file to debug_dir."""
    with open(os.path.join(debug_dir, name), 'w', encoding='utf-8') as f:
        f.write(text)


def _bit_string(bits, start, end, group=8):
    """Render bits[start:end] as '0'/'1' characters, space separated every `group` bits."""
    s = ''.join(bits[start:end].astype(str))
    return ' '.join(s[i:i+group] for i in range(0, len(s), group))


def _bit_dump(data, segments):
    """Hex of the payload followed by the bits each segment consumed."""
    bits = BitReader(data).bits
    lines = [f"Payload ({len(data)} bytes): {bytes(data).hex(' ')}", ""]
    for s in segments:
        lines.append(f"Segment {s['segment']} {s['mode']} bits {s['start_bit']}-{s['end_bit']}:")
        lines.append("  " + _bit_string(bits, s['start_bit'], s['end_bit']))
    end = segments[-1]['end_bit'] if segments else 0
    if end < len(bits):
        lines.append(f"Unused bits {end}-{len(bits)}:")
        lines.append("  " + _bit_string(bits, end, len(bits)))
    return '\n'.join(lines) + '\n'


def save_debug_all(debug_dir, data, version, encoding, segments, stop_reason, result):
    """Save all intermediate results to debug_dir."""
    if not debug_dir:
        return

    # 1: raw bits split per segment
    _save_text(debug_dir, "1_bits.txt", _bit_dump(data, segments))

    # 2: segment table
    seg_lines = []
    for s in segments:
        seg_lines.append(f"  Segment {s['segment']}: {s['mode']} x{s['count']}, "
                         f"bits {s['start_bit']}-{s['end_bit']} -> {s['text']!r}")
    seg_text = '\n'.join(seg_lines)
    _save_text(debug_dir, "2_segments.txt", seg_text + '\n')

    # 3: info + result
    info = (f"Version: {version}\nEncoding: {encoding}\n"
            f"Payload: {len(data)} bytes ({len(data) * 8} bits)\n"
            f"Segments: {len(segments)}\nStopped: {stop_reason}\n"
            f"\nSegments:\n{seg_text}\n"
            f"\nResult:\n{result}\n")
    _save_text(debug_dir, "3_info.txt", info)
