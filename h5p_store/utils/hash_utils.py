"""
Hash utility functions.
"""

import hashlib
import io
from typing import BinaryIO, Union

import mmh3


DEFAULT_CHUNK_SIZE = 1024 * 1024


def compute_stream_hash(
    stream: BinaryIO,
    method: str = "murmur3",
    seed: int = 42,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> str:
    """
    Compute a hash over everything left in a binary stream.

    Args:
        stream: Readable binary stream, consumed by this call
        method: Hash method ('sha256', 'murmur3')
        seed: Seed for MurmurHash
        chunk_size: Number of bytes read per iteration

    Returns:
        Hex string hash value, or "empty" for an empty stream
    """
    if method == "sha256":
        hasher = hashlib.sha256()
    elif method == "murmur3":
        # 128-bit variant, fed incrementally so large files never sit in memory
        hasher = mmh3.mmh3_x64_128(seed=seed)
    else:
        raise ValueError(f"Unsupported hash method: {method}")

    total = 0
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        hasher.update(chunk)
        total += len(chunk)

    if total == 0:
        return "empty"

    return hasher.digest().hex()


def compute_content_hash(content: Union[str, bytes], method: str = "murmur3", seed: int = 42) -> str:
    """
    Compute a hash for the given content.

    Gives the same value as compute_stream_hash over the same bytes.

    Args:
        content: Content to hash (str is encoded as UTF-8)
        method: Hash method ('sha256', 'murmur3')
        seed: Seed for MurmurHash

    Returns:
        String hash value
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    return compute_stream_hash(io.BytesIO(content), method=method, seed=seed)
