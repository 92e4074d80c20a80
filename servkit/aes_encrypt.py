"""AES encryption in CFB mode with the IV taken from the key."""

from __future__ import annotations

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

_BLOCK_SIZE = 16


class AesEncrypt:
    """Encrypts and decrypts strings with a key of at least 16 bytes.

    Keys of 32 bytes or more use AES-256, 24 or more AES-192, otherwise
    AES-128; the first 16 key bytes serve as the IV.
    """

    def __init__(self, key: str) -> None:
        raw = key.encode("utf-8")
        if len(raw) < 16:
            raise ValueError("the length of aes key shall not be less than 16")
        self.key = key
        if len(raw) >= 32:
            self._key = raw[:32]
        elif len(raw) >= 24:
            self._key = raw[:24]
        else:
            self._key = raw[:16]

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CFB(self._key[:_BLOCK_SIZE]))

    def encrypt(self, text: str | bytes) -> bytes:
        """Encrypt ``text`` and return the cipher bytes (same length as the input)."""
        data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
        encryptor = self._cipher().encryptor()
        return encryptor.update(data) + encryptor.finalize()

    def decrypt(self, data: bytes) -> str:
        """Decrypt ``data`` and return the plain text."""
        decryptor = self._cipher().decryptor()
        plain = decryptor.update(bytes(data)) + decryptor.finalize()
        return plain.decode("utf-8", errors="surrogateescape")