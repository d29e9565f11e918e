"""Abstract receipt printer for stored sales."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pos.domain.model.payment import Receipt


class ReceiptPrinter(ABC):

    @abstractmethod
    def print_receipt(self, receipt: Receipt) -> None:
        """Render and print *receipt*."""
