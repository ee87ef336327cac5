"""
Mobile-money payment boundary.

SimulatedMpesaGateway stands in for a real M-Pesa STK push integration: it
waits a fixed delay and then approves 90% of requests. Any real gateway only
needs to implement PaymentGateway.request_payment.
"""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from typing import Optional, Protocol

from utils import config
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    transaction_id: str = ""
    error: str = ""

    @classmethod
    def ok(cls, transaction_id: str) -> PaymentResult:
        return cls(True, transaction_id=transaction_id)

    @classmethod
    def failed(cls, error: str) -> PaymentResult:
        return cls(False, error=error)


class PaymentGateway(Protocol):
    async def request_payment(self, phone: str, amount: int) -> PaymentResult: ...


class SimulatedMpesaGateway:
    def __init__(
        self,
        delay: float = config.PAYMENT_DELAY_SECONDS,
        success_rate: float = config.PAYMENT_SUCCESS_RATE,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.delay = delay
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    async def request_payment(self, phone: str, amount: int) -> PaymentResult:
        """Suspend for `delay` seconds, then approve or decline."""
        _logger.info(f"Simulating M-Pesa prompt to {phone} for KSh {amount}")
        await asyncio.sleep(self.delay)
        if self._rng.random() < self.success_rate:
            txn = f"TXN{time.time_ns() // 1_000_000}"
            _logger.info(f"M-Pesa payment {txn} approved.")
            return PaymentResult.ok(txn)
        _logger.warning(f"M-Pesa prompt to {phone} declined.")
        return PaymentResult.failed("M-Pesa transaction failed")
