from __future__ import annotations

import re

from merkle_rewards.core.errors import InvalidAmountError

_INTEGER_RE = re.compile(r"^-?[0-9]+$")


def parse_wei(value: str | int) -> int:
    """Parse a base-10 wei amount without ever touching a float."""
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid wei amount: {value!r}")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise InvalidAmountError(f"Invalid wei amount: {value!r}")
    text = value.strip()
    if not _INTEGER_RE.match(text):
        raise InvalidAmountError(f"Invalid wei amount: {value!r}")
    return int(text)


def format_wei(value: int) -> str:
    return str(int(value))
