"""Domain primitives that enforce validity at creation time."""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Self
from uuid import UUID, uuid4

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event (and its FinanceSummary)."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class MovementId:
    """Unique identifier for a payment Movement."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AssignmentId:
    """Unique identifier for a CrewAssignment."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class AllocationId:
    """Unique identifier for an EquipmentAllocation."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def generate(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class ActorId:
    """Subject issued by the identity provider."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("Actor id cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class EquipmentId:
    """Reference to an equipment record managed outside the core."""

    value: str

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise ValueError("Equipment id cannot be empty")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Money:
    """Amount in BRL. Never negative."""

    amount: Decimal

    def __post_init__(self) -> None:
        if not self.amount.is_finite():
            raise ValueError("Money amount must be a finite number")
        if self.amount < 0:
            raise ValueError("Money amount cannot be negative")

    @classmethod
    def of(cls, value: "Decimal | int | str | float") -> Self:
        """Parse user input into Money.

        Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
        """
        if isinstance(value, bool):
            raise ValueError("Money amount must be numeric")
        if isinstance(value, float):
            value = str(value)
        try:
            amount = Decimal(value)
        except (InvalidOperation, TypeError) as exc:
            raise ValueError("Money amount must be numeric") from exc
        return cls(amount=amount)

    @classmethod
    def zero(cls) -> Self:
        return cls(amount=Decimal("0"))

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other: "Money") -> "Money":
        return Money(amount=self.amount + other.amount)

    def minus_floored(self, other: "Money") -> "Money":
        """Subtract, clamping at zero."""
        return Money(amount=max(Decimal("0"), self.amount - other.amount))

    def quantized(self) -> Decimal:
        return self.amount.quantize(CENTS)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"


def total(amounts: Iterable[Money]) -> Money:
    """Fold a sequence of Money into one amount."""
    result = Money.zero()
    for amount in amounts:
        result = result + amount
    return result
