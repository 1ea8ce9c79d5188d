"""Encrypted upload of archives to a remote store."""

import logging
import os

import httpx
from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from iterspace.core.exceptions import EncryptionError, PushError

logger = logging.getLogger(__name__)

NONCE_SIZE = 12
DEFAULT_TIMEOUT = 30.0


def encrypt(data: bytes, key: bytes) -> bytes:
    """Encrypt with AES-GCM.

    Args:
        data: Plaintext.
        key: AES key of 16, 24 or 32 bytes.

    Returns:
        Random nonce followed by ciphertext and tag.
    """
    try:
        aead = AESGCM(key)
    except ValueError as e:
        raise EncryptionError(f"Encryption error: {e}") from e
    nonce = os.urandom(NONCE_SIZE)
    return nonce + aead.encrypt(nonce, data, None)


def decrypt(payload: bytes, key: bytes) -> bytes:
    """Reverse ``encrypt``."""
    if len(payload) < NONCE_SIZE:
        raise EncryptionError("Payload too short")
    try:
        aead = AESGCM(key)
        return aead.decrypt(payload[:NONCE_SIZE], payload[NONCE_SIZE:], None)
    except (ValueError, InvalidTag) as e:
        raise EncryptionError(f"Decryption error: {e!r}") from e


def build_target_url(remote_url: str, rel: str = "") -> str:
    """Join a base URL and a relative path with exactly one slash."""
    target = remote_url.rstrip("/")
    if rel:
        target += "/" + rel.lstrip("/")
    return target


def put_stream(
    remote_url: str, rel: str, data: bytes, timeout: float = DEFAULT_TIMEOUT
) -> None:
    """Upload bytes with an HTTP PUT.

    Raises:
        PushError: On transport errors or a status of 400 or above.
    """
    target = build_target_url(remote_url, rel)
    try:
        response = httpx.put(
            target,
            content=data,
            headers={"Content-Type": "application/octet-stream"},
            timeout=timeout,
        )
    except httpx.HTTPError as e:
        raise PushError(f"Push to {target} failed: {e}") from e

    if response.status_code >= 400:
        raise PushError(
            f"remote error: {response.status_code} {response.reason_phrase}"
        )
    logger.info(f"Push OK: {target}")


def put_stream_encrypted(
    remote_url: str,
    rel: str,
    data: bytes,
    key: bytes,
    timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Encrypt and upload bytes."""
    put_stream(remote_url, rel, encrypt(data, key), timeout=timeout)
