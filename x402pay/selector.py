"""Choosing a signer for a set of payment requirements."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from x402pay.signer import PaymentPayload, PaymentRequirement, Signer

_DECIMAL = re.compile(r"[+-]?[0-9]+")


class ErrorCode(str, Enum):
    NO_VALID_SIGNER = "NO_VALID_SIGNER"
    INVALID_REQUIREMENTS = "INVALID_REQUIREMENTS"
    SIGNING_FAILED = "SIGNING_FAILED"
    UNSUPPORTED_SCHEME = "UNSUPPORTED_SCHEME"


class PaymentError(Exception):
    """A payment failure carrying a code and optional details."""

    def __init__(self, code: ErrorCode, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details: dict[str, Any] = dict(details or {})

    def with_details(self, key: str, value: Any) -> "PaymentError":
        """Add a detail entry and return this error."""
        self.details[key] = value
        return self

    def __str__(self) -> str:
        text = f"{self.code.value}: {self.message}"
        if self.__cause__ is not None:
            text += f": {self.__cause__}"
        return text


def _parse_amount(text: str) -> int | None:
    if not _DECIMAL.fullmatch(text):
        return None
    return int(text)


class PaymentSelector(ABC):
    """Picks a signer and produces a signed payment."""

    @abstractmethod
    def select_and_sign(
        self, requirements: Sequence[PaymentRequirement], signers: Sequence[Signer]
    ) -> PaymentPayload:
        """Choose the best signer for one of ``requirements`` and sign."""


@dataclass(frozen=True)
class _Candidate:
    requirement: PaymentRequirement
    signer: Signer
    signer_priority: int
    token_priority: int
    signer_index: int
    requirement_index: int

    @property
    def rank(self) -> tuple[int, int, int, int]:
        return (self.signer_priority, self.token_priority, self.signer_index, self.requirement_index)


class DefaultPaymentSelector(PaymentSelector):
    """Selects by signer priority, then token priority, then configuration order."""

    def select_and_sign(
        self, requirements: Sequence[PaymentRequirement], signers: Sequence[Signer]
    ) -> PaymentPayload:
        if not signers:
            raise PaymentError(ErrorCode.NO_VALID_SIGNER, "no signers configured")
        if not requirements:
            raise PaymentError(ErrorCode.INVALID_REQUIREMENTS, "no payment requirements provided")

        candidates: list[_Candidate] = []
        has_valid_requirement = False

        for requirement_index, requirement in enumerate(requirements):
            required = _parse_amount(requirement.max_amount_required)
            if required is None:
                continue
            has_valid_requirement = True

            for signer_index, signer in enumerate(signers):
                if not signer.can_sign(requirement):
                    continue
                limit = signer.max_amount
                if limit is not None and required > limit:
                    continue
                asset = requirement.asset.casefold()
                token_priority = next(
                    (t.priority for t in signer.tokens if t.address.casefold() == asset), 0
                )
                candidates.append(
                    _Candidate(
                        requirement=requirement,
                        signer=signer,
                        signer_priority=signer.priority,
                        token_priority=token_priority,
                        signer_index=signer_index,
                        requirement_index=requirement_index,
                    )
                )

        if not has_valid_requirement:
            raise PaymentError(ErrorCode.INVALID_REQUIREMENTS, "invalid amount in requirements")

        if not candidates:
            options = ", ".join(f"{r.network}:{r.asset}" for r in requirements)
            raise PaymentError(
                ErrorCode.NO_VALID_SIGNER, "no signer can satisfy any payment requirement"
            ).with_details("options", options)

        best = min(candidates, key=lambda c: c.rank)
        try:
            return best.signer.sign(best.requirement)
        except Exception as exc:
            raise PaymentError(ErrorCode.SIGNING_FAILED, "failed to sign payment") from exc


def find_matching_requirement(
    payment: PaymentPayload, requirements: Sequence[PaymentRequirement]
) -> PaymentRequirement:
    """Return the first requirement with the payment's network and scheme."""
    for requirement in requirements:
        if requirement.network == payment.network and requirement.scheme == payment.scheme:
            return requirement
    raise (
        PaymentError(ErrorCode.UNSUPPORTED_SCHEME, "no matching requirement for network and scheme")
        .with_details("network", payment.network)
        .with_details("scheme", payment.scheme)
    )