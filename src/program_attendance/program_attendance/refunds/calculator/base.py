from __future__ import annotations

from abc import ABC, abstractmethod

from ...common.numbers import round_half_up_div
from ..model import DepositCalculationInput, DepositCalculationResult


class RefundCalculator(ABC):
    """Calculator interface (Strategy Pattern for deposit refunds)."""

    @abstractmethod
    def calculate(self, data: DepositCalculationInput) -> DepositCalculationResult:
        raise NotImplementedError

    @staticmethod
    def amount_for(deposit_amount: int, refund_rate: int) -> int:
        return round_half_up_div(int(deposit_amount) * int(refund_rate), 100)
