"""
Booking Module

This module defines the booking settings that drive a cost split.

Data Model:
    BookingSettings fields:
        - total_cost: float (EUR)
        - start_date: string (YYYY-MM-DD), first night of the booking
        - end_date: string (YYYY-MM-DD), last night of the booking (inclusive)
        - currency: "EUR"
        - exchange_rate: float (EUR to USD)
        - show_usd: bool
        - round_usd: bool
        - calculation_method: one of CALCULATION_METHODS
"""

from typing import Optional

from config.settings import DEFAULT_EXCHANGE_RATE


# Recognised cost-split policies
CALCULATION_METHODS = ("equal", "nightly", "weekly", "mixed")


class BookingSettings:
    """
    Booking window, total cost and display options for one calculation.

    Attributes:
        total_cost (float): Total accommodation cost in EUR.
        start_date (str): First booked night (YYYY-MM-DD).
        end_date (str): Last booked night (YYYY-MM-DD), inclusive.
        currency (str): Base currency, always "EUR".
        exchange_rate (float): EUR to USD conversion rate.
        show_usd (bool): Whether USD amounts are displayed.
        round_usd (bool): Whether USD amounts are rounded to whole dollars.
        calculation_method (str): One of "equal", "nightly", "weekly", "mixed".
    """

    def __init__(
        self,
        total_cost: float,
        start_date: str,
        end_date: str,
        exchange_rate: Optional[float] = None,
        show_usd: bool = False,
        round_usd: bool = False,
        calculation_method: str = "equal",
        currency: str = "EUR"
    ):
        if calculation_method not in CALCULATION_METHODS:
            raise ValueError(
                f"calculation_method must be one of {CALCULATION_METHODS}, got: {calculation_method}"
            )
        if currency != "EUR":
            raise ValueError(f"currency must be EUR, got: {currency}")

        self.total_cost = float(total_cost)
        self.start_date = start_date
        self.end_date = end_date
        self.currency = currency
        self.exchange_rate = float(DEFAULT_EXCHANGE_RATE if exchange_rate is None else exchange_rate)
        self.show_usd = show_usd
        self.round_usd = round_usd
        self.calculation_method = calculation_method

    def to_dict(self) -> dict:
        """Convert settings to dictionary for JSON or Firestore storage."""
        return {
            "total_cost": self.total_cost,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "currency": self.currency,
            "exchange_rate": self.exchange_rate,
            "show_usd": self.show_usd,
            "round_usd": self.round_usd,
            "calculation_method": self.calculation_method
        }

    def __repr__(self) -> str:
        return (
            f"BookingSettings(total_cost={self.total_cost}, start='{self.start_date}', "
            f"end='{self.end_date}', method='{self.calculation_method}')"
        )

    @classmethod
    def from_dict(cls, data: dict) -> "BookingSettings":
        """Create a BookingSettings instance from a dictionary."""
        return cls(
            total_cost=data.get("total_cost", 0),
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
            exchange_rate=data.get("exchange_rate"),
            show_usd=bool(data.get("show_usd", False)),
            round_usd=bool(data.get("round_usd", False)),
            calculation_method=data.get("calculation_method") or "equal",
            currency=data.get("currency") or "EUR"
        )
