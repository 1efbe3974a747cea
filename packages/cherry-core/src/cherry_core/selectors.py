"""Routing tags for contract entry points.

A selector is a fixed 4-byte tag addressing one entry point of a contract,
the way a function index addresses a slot in a published registry. Entry
points are declared with 32-bit integers and rendered big-endian, so the
deposit entry point declared as ``240`` is addressed by ``0x000000f0``.

The constants below are the published registry shared by the escrow ledger
(which exposes the entry points) and the bridge dispatcher (which calls
them). Both sides import from here so they cannot drift apart.
"""
from __future__ import annotations

from dataclasses import dataclass

SELECTOR_WIDTH = 4


@dataclass(frozen=True, slots=True)
class Selector:
    """Fixed-width routing tag."""
    value: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.value, (bytes, bytearray)):
            raise TypeError(f"Selector value must be bytes, got {type(self.value).__name__}")
        if len(self.value) != SELECTOR_WIDTH:
            raise ValueError(
                f"Selector must be {SELECTOR_WIDTH} bytes, got {len(self.value)}"
            )
        object.__setattr__(self, "value", bytes(self.value))

    @classmethod
    def from_int(cls, number: int) -> "Selector":
        """Build a selector from its 32-bit integer declaration."""
        if not 0 <= number < 2 ** (8 * SELECTOR_WIDTH):
            raise ValueError(f"Selector integer out of range: {number}")
        return cls(number.to_bytes(SELECTOR_WIDTH, "big"))

    @classmethod
    def from_hex(cls, text: str) -> "Selector":
        """Parse ``0x``-prefixed or bare hex."""
        text = text[2:] if text.lower().startswith("0x") else text
        return cls(bytes.fromhex(text))

    def to_int(self) -> int:
        return int.from_bytes(self.value, "big")

    @property
    def hex(self) -> str:
        return "0x" + self.value.hex()

    def __str__(self) -> str:
        return self.hex


# Escrow ledger entry points
DEPOSIT_SELECTOR = Selector.from_int(240)
WITHDRAW_SELECTOR = Selector.from_int(250)

# Gateway inbound notification entry point
BRIDGE_IN_SELECTOR = Selector.from_int(16843009)
