"""Payment data types and the signer interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar


@dataclass(frozen=True)
class TokenConfig:
    """A token a signer can pay with."""

    address: str
    symbol: str = ""
    decimals: int = 0
    priority: int = 0


@dataclass
class PaymentRequirement:
    """One payment option offered by a server."""

    scheme: str = ""
    network: str = ""
    max_amount_required: str = ""
    asset: str = ""
    pay_to: str = ""
    max_timeout_seconds: int = 0


@dataclass
class PaymentPayload:
    """A signed payment ready to be sent to a server."""

    x402_version: int = 1
    scheme: str = ""
    network: str = ""
    payload: dict[str, Any] = field(default_factory=dict)


class Signer(ABC):
    """Signs payments for one blockchain network.

    ``priority`` follows the convention that lower numbers win (1 > 2 > 3).
    ``tokens`` lists the tokens the signer can pay with.
    ``max_amount`` is the per-call spending limit, or ``None`` for no limit.

    Subclasses may override these as class attributes, instance attributes
    or properties.
    """

    priority: ClassVar[int] = 0
    tokens: ClassVar[Sequence[TokenConfig]] = ()
    max_amount: ClassVar[int | None] = None

    @property
    @abstractmethod
    def network(self) -> str:
        """The network identifier, such as ``"base"`` or ``"solana"``."""

    @property
    @abstractmethod
    def scheme(self) -> str:
        """The payment scheme identifier, such as ``"exact"``."""

    @abstractmethod
    def can_sign(self, requirement: PaymentRequirement) -> bool:
        """Return whether this signer can satisfy ``requirement``."""

    @abstractmethod
    def sign(self, requirement: PaymentRequirement) -> PaymentPayload:
        """Create a signed payment for ``requirement``; raise on failure."""