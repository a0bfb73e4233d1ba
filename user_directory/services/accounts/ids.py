from __future__ import annotations

import secrets
import string
import time

_BASE36 = string.digits + string.ascii_lowercase
_HEX = "0123456789abcdef"
_GUID_PATTERN = "xxxxxxxx-xxxx-4xxx-yxxx-xxxxxxxxxxxx"


def to_base36(value: int) -> str:
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class IdentifierFactory:
    """
    Generates the two identifiers carried by a user record.

    - `_id`: base-36 millisecond timestamp + 5 random base-36 chars (lookup key)
    - `guid`: display token shaped like a version-4 UUID
    """

    def new_id(self) -> str:
        stamp = to_base36(int(time.time() * 1000))
        suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
        return stamp + suffix

    def new_guid(self) -> str:
        chars: list[str] = []
        for c in _GUID_PATTERN:
            if c == "x":
                chars.append(_HEX[secrets.randbelow(16)])
            elif c == "y":
                # variant bits 10xx -> 8, 9, a or b
                chars.append(_HEX[(secrets.randbelow(16) & 0x3) | 0x8])
            else:
                chars.append(c)
        return "".join(chars)
