"""Session data model: calculations, variable bindings and the session itself."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Union

# Constants owned by the evaluator; never persisted, never cleared.
RESERVED_NAMES = ("pi", "phi")

Outcome = Union[Decimal, str]


@dataclass(frozen=True)
class Calculation:
    """One entry of the calculation log.

    ``outcome`` is either the numeric result or, for a failed calculation, the
    error text shown to the user.
    """

    expression: str
    outcome: Outcome

    @property
    def is_error(self) -> bool:
        return not isinstance(self.outcome, Decimal)


@dataclass(frozen=True)
class VariableBinding:
    name: str
    value: Decimal


@dataclass
class Session:
    """A snapshot of the calculation log and the user variables."""

    calculations: List[Calculation] = field(default_factory=list)
    variables: List[VariableBinding] = field(default_factory=list)

    def persistable_variables(self) -> List[VariableBinding]:
        return [v for v in self.variables if v.name not in RESERVED_NAMES]


class CalculationLog:
    """Chronological, append-only list of calculations shown in the display."""

    def __init__(self) -> None:
        self._entries: List[Calculation] = []

    def append(self, calculation: Calculation) -> None:
        self._entries.append(calculation)

    def extend(self, calculations) -> None:
        for calc in calculations:
            self.append(calc)

    def clear(self) -> None:
        self._entries.clear()

    def entries(self) -> List[Calculation]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))


__all__ = ["RESERVED_NAMES", "Calculation", "CalculationLog", "Outcome", "Session", "VariableBinding"]
