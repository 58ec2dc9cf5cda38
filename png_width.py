"""Read the pixel width of a PNG straight from its base64 data URI.

Only the handful of base64 characters that cover the IHDR width field are
decoded, so no image library is needed.  A PNG starts with the 8 byte
signature, the 4 byte chunk length and the ``IHDR`` tag; the width follows
as a big-endian 32-bit integer at byte offset 16.  Base64 packs 6 bits per
character and the signature always encodes to ``iVBOR``, which makes the
width start 2 bits into the character 21 places after the marker.
"""

from __future__ import annotations

import base64
import binascii

from errors import DecodeError

PNG_MARKER = "iVBOR"
WIDTH_OFFSET = 21
WIDTH_CHARS = 7


def decode_png_width(uri: str) -> int:
    """Return the native pixel width stored in a base64 PNG data URI.

    Args:
        uri: String containing base64 encoded PNG data, usually a
            ``data:image/png;base64,...`` URI.

    Returns:
        int: Width from the IHDR chunk.

    Raises:
        DecodeError: If the PNG marker is missing or the header is not
            valid base64.
    """

    index = uri.find(PNG_MARKER)
    if index < 0:
        raise DecodeError("PNG signature not found in image URI")

    chunk = uri[index + WIDTH_OFFSET:index + WIDTH_OFFSET + WIDTH_CHARS]
    if len(chunk) != WIDTH_CHARS:
        raise DecodeError("PNG header truncated")

    # 7 characters carry 42 bits; pad so the decoder yields 5 whole bytes.
    try:
        data = base64.b64decode(chunk + "=", validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Malformed base64 in PNG header: {e}") from e

    # The field is misaligned by 2 bits: drop the top 2 of the first byte
    # and keep only the top 2 of the last one.
    width = (data[0] & 0b00111111) << 26
    width |= data[1] << 18
    width |= data[2] << 10
    width |= data[3] << 2
    width |= (data[4] & 0b11000000) >> 6
    return width
