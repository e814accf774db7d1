#!/usr/bin/env python3.11
"""
QR Payload Decoder Web API
Run: python3.11 qr_web.py
POST http://<your-ip>:8080/decode with a payload upload or {"payload": "<hex>", "version": N}
"""

from flask import Flask, request, jsonify
from qr_decode import decode_with_encoding

app = Flask(__name__)


def read_request_payload():
    """Get (payload bytes, version) from a file upload or a JSON body."""
    if 'payload' in request.files:
        data = request.files['payload'].read()
        version = request.form.get('version')
    else:
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            raise ValueError('Expected a JSON object')
        if not body.get('payload'):
            raise ValueError('No payload given')
        data = bytes.fromhex(body['payload'])
        version = body.get('version')
    if version is None:
        raise ValueError('No version given')
    return data, int(version)


@app.route('/decode', methods=['POST'])
def decode():
    try:
        data, version = read_request_payload()
        print(f"[DECODE] {len(data)} bytes, version {version}", flush=True)

        result, encoding = decode_with_encoding(data, version)
        print(f"[DECODE] {encoding}: {result[:60]}...", flush=True)

        return jsonify({'success': True, 'result': result, 'encoding': encoding})

    except (ValueError, TypeError) as e:
        print(f"[DECODE] Error: {e}", flush=True)
        return jsonify({'success': False, 'error': str(e)})


if __name__ == '__main__':
    import socket

    # Get local IP
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(('8.8.8.8', 80))
        ip = s.getsockname()[0]
    except OSError:
        ip = '127.0.0.1'
    finally:
        s.close()

    port = 8080
    print("=" * 50)
    print("QR Payload Decoder Web API")
    print("=" * 50)
    print(f"\nPOST payloads to: http://{ip}:{port}/decode")
    print(f"Or on this computer: http://localhost:{port}/decode")
    print("\nPress Ctrl+C to stop\n")

    app.run(host='0.0.0.0', port=port, debug=False)
