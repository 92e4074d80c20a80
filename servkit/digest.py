"""String checksums: CRC-32 numbers and MD5 hex digests."""

import hashlib
import zlib


def hash_number(text: str) -> int:
    """Return the IEEE CRC-32 of the UTF-8 encoding of ``text``."""
    return zlib.crc32(text.encode("utf-8"))


def md5_hex(text: str) -> str:
    """Return the lower-case hex MD5 digest of the UTF-8 encoding of ``text``."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()