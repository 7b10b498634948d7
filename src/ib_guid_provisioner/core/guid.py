"""
GUID value type.

An InfiniBand GUID is a 64 bit unsigned integer.
Its text form looks like a MAC address with 8 bytes instead of 6:

  00:01:02:03:04:05:06:08

Parsing is case insensitive, formatting is always lowercase.
Ordering and addition follow unsigned integer semantics so that a range
start plus a VF index yields the GUID for that VF.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass

from ib_guid_provisioner.core.errors import GuidParseError

GUID_BITS = 64
GUID_MASK = (1 << GUID_BITS) - 1

_GUID_RE = re.compile(r"[0-9A-Fa-f]{2}(?::[0-9A-Fa-f]{2}){7}")

_SYSTEM_RANDOM = random.SystemRandom()


@dataclass(frozen=True, order=True)
class Guid:
    """
    64 bit hardware GUID.

    value is the unsigned integer, most significant byte first in text form.
    """

    value: int

    def __post_init__(self) -> None:
        if not 0 <= self.value <= GUID_MASK:
            raise ValueError(f"guid value out of 64 bit range: {self.value}")

    @classmethod
    def parse(cls, text: str) -> Guid:
        """Parse 8 colon separated hex byte groups."""
        if not isinstance(text, str) or not _GUID_RE.fullmatch(text):
            raise GuidParseError(f"invalid guid: {text!r}")
        return cls(int(text.replace(":", ""), 16))

    @classmethod
    def from_int(cls, value: int) -> Guid:
        """Build a GUID from an unsigned integer, rejecting values outside 64 bits."""
        if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value <= GUID_MASK:
            raise GuidParseError(f"guid value out of 64 bit range: {value!r}")
        return cls(value)

    @classmethod
    def from_bytes(cls, raw: bytes) -> Guid:
        if len(raw) != 8:
            raise GuidParseError(f"guid must be 8 bytes, got {len(raw)}")
        return cls(int.from_bytes(raw, "big"))

    def to_bytes(self) -> bytes:
        """Return the 8 byte big endian hardware address form."""
        return self.value.to_bytes(8, "big")

    def __add__(self, offset: int) -> Guid:
        if not isinstance(offset, int) or isinstance(offset, bool):
            return NotImplemented
        if offset < 0:
            raise ValueError("guid offset must be non negative")
        return Guid((self.value + offset) & GUID_MASK)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return ":".join(f"{b:02x}" for b in self.to_bytes())


def random_guid(rng: random.Random | None = None) -> Guid:
    """
    Draw a random GUID.

    The default source is a process wide SystemRandom.
    Tests may inject a seeded random.Random for reproducible values.
    """
    source = rng if rng is not None else _SYSTEM_RANDOM
    return Guid(source.getrandbits(GUID_BITS))
