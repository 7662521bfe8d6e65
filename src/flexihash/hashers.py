"""Hash functions that place targets and resources on the ring."""

import hashlib
import zlib
from enum import StrEnum
from typing import Protocol

from .errors import InvalidArgumentError


class Hasher(Protocol):
    def hash(self, data: bytes) -> int: ...


class Crc32Hasher:
    """IEEE CRC-32, the default.

    ``zlib.crc32`` is deterministic across processes regardless of
    ``PYTHONHASHSEED``, so ring layouts agree between independent clients.
    """

    def hash(self, data: bytes) -> int:
        return zlib.crc32(data)

    def __repr__(self) -> str:
        return "Crc32Hasher()"


class Md5Hasher:
    """MD5 digest read as a 128-bit big-endian unsigned integer."""

    def hash(self, data: bytes) -> int:
        return int.from_bytes(hashlib.md5(data).digest(), "big")

    def __repr__(self) -> str:
        return "Md5Hasher()"


class HashAlgorithm(StrEnum):
    crc32 = "crc32"
    md5 = "md5"


_HASHERS: dict[HashAlgorithm, type] = {
    HashAlgorithm.crc32: Crc32Hasher,
    HashAlgorithm.md5: Md5Hasher,
}


def get_hasher(name: str) -> Hasher:
    try:
        algo = HashAlgorithm(name.lower())
    except (ValueError, AttributeError) as e:
        choices = ", ".join(a.value for a in HashAlgorithm)
        raise InvalidArgumentError(
            f"unknown hasher {name!r} (expected one of: {choices})"
        ) from e
    return _HASHERS[algo]()
