"""Remote storage for iterspace."""

from iterspace.remote.push import (
    decrypt,
    encrypt,
    put_stream,
    put_stream_encrypted,
)

__all__ = [
    "decrypt",
    "encrypt",
    "put_stream",
    "put_stream_encrypted",
]
