"""
Trade candidate models.

One frozen dataclass per strategy. Candidates keep the OptionQuote legs
they were built from plus the computed economics, and are never mutated
after the enumerator creates them. Dollar figures are per one structure
(contract multiplier applied); break-even percents are moves from the
current underlying price.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..constants import DAYS_PER_YEAR
from .chain import OptionQuote, OptionType


class LegAction(Enum):
    """Opening action for a leg."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class TradeLeg:
    """
    One option position within a trade.

    Attributes:
        action: BUY or SELL to open
        option_type: CALL or PUT
        strike: Strike price
        delta: Quote delta at scan time
        premium: Per-share price paid (ask) or received (bid)
        quantity: Contracts for this leg
    """

    action: LegAction
    option_type: OptionType
    strike: float
    delta: float
    premium: float
    quantity: int = 1

    @classmethod
    def sell(cls, quote: OptionQuote, option_type: OptionType, quantity: int = 1) -> "TradeLeg":
        return cls(LegAction.SELL, option_type, quote.strike, quote.delta, quote.bid, quantity)

    @classmethod
    def buy(cls, quote: OptionQuote, option_type: OptionType, quantity: int = 1) -> "TradeLeg":
        return cls(LegAction.BUY, option_type, quote.strike, quote.delta, quote.ask, quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "option_type": self.option_type.value,
            "strike": self.strike,
            "delta": self.delta,
            "premium": self.premium,
            "quantity": self.quantity,
        }

    def __str__(self) -> str:
        return f"{self.action.value} {self.quantity} {self.strike:g} {self.option_type.value}"


@dataclass(frozen=True)
class TradeCandidate(ABC):
    """
    Economics shared by every trade candidate.

    Attributes:
        symbol: Underlying symbol
        expiry_date: Expiration date (YYYY-MM-DD)
        dte: Days to expiration
        current_price: Underlying price at scan time
        net_credit: Cash received to open (negative for a debit)
        max_loss: Maximum possible loss in dollars
        return_on_risk: Profit target over max loss, in percent
        break_even_price: Primary break-even at expiration
        break_even_percent: Move from current price to break even, in percent
    """

    STRATEGY = "Trade"

    symbol: str
    expiry_date: str
    dte: int
    current_price: float
    net_credit: float
    max_loss: float
    return_on_risk: float
    break_even_price: float
    break_even_percent: float

    @property
    def strategy(self) -> str:
        return self.STRATEGY

    @property
    @abstractmethod
    def legs(self) -> list[TradeLeg]:
        """Legs in display order."""

    def _details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = {
            "strategy": self.strategy,
            "symbol": self.symbol,
            "expiry_date": self.expiry_date,
            "dte": self.dte,
            "current_price": self.current_price,
            "net_credit": round(self.net_credit, 2),
            "max_loss": round(self.max_loss, 2),
            "return_on_risk": round(self.return_on_risk, 2),
            "break_even_price": round(self.break_even_price, 2),
            "break_even_percent": round(self.break_even_percent, 2),
            "legs": [leg.to_dict() for leg in self.legs],
        }
        data.update(self._details())
        return data


@dataclass(frozen=True)
class PutCreditSpread(TradeCandidate):
    """Short put above a long put at the same expiration."""

    STRATEGY = "Put Credit Spread"

    short_put: OptionQuote
    long_put: OptionQuote

    @property
    def width(self) -> float:
        """Strike width in points."""
        return self.short_put.strike - self.long_put.strike

    @property
    def legs(self) -> list[TradeLeg]:
        return [
            TradeLeg.sell(self.short_put, OptionType.PUT),
            TradeLeg.buy(self.long_put, OptionType.PUT),
        ]


@dataclass(frozen=True)
class CallCreditSpread(TradeCandidate):
    """Short OTM call below a long call at the same expiration."""

    STRATEGY = "Call Credit Spread"

    short_call: OptionQuote
    long_call: OptionQuote

    @property
    def width(self) -> float:
        return self.long_call.strike - self.short_call.strike

    @property
    def legs(self) -> list[TradeLeg]:
        return [
            TradeLeg.sell(self.short_call, OptionType.CALL),
            TradeLeg.buy(self.long_call, OptionType.CALL),
        ]


@dataclass(frozen=True)
class IronCondor(TradeCandidate):
    """
    Put credit spread plus call credit spread.

    break_even_price/break_even_percent hold the lower break-even; the
    upper one is carried separately.
    """

    STRATEGY = "Iron Condor"

    put_spread: PutCreditSpread
    call_spread: CallCreditSpread
    lower_break_even: float
    upper_break_even: float
    lower_break_even_percent: float
    upper_break_even_percent: float

    @property
    def legs(self) -> list[TradeLeg]:
        return self.put_spread.legs + self.call_spread.legs

    def _details(self) -> dict[str, Any]:
        return {
            "lower_break_even": round(self.lower_break_even, 2),
            "upper_break_even": round(self.upper_break_even, 2),
            "lower_break_even_percent": round(self.lower_break_even_percent, 2),
            "upper_break_even_percent": round(self.upper_break_even_percent, 2),
        }


@dataclass(frozen=True)
class BrokenWingButterfly(TradeCandidate):
    """Bullish call butterfly: buy 1 leg1, sell 2 leg2, buy 1 leg3."""

    STRATEGY = "Broken Wing Butterfly"

    leg1: OptionQuote
    leg2: OptionQuote
    leg3: OptionQuote
    total_debit: float
    lower_wing_width: float
    upper_wing_width: float
    max_loss_upside: float
    max_loss_downside: float

    @property
    def legs(self) -> list[TradeLeg]:
        return [
            TradeLeg.buy(self.leg1, OptionType.CALL),
            TradeLeg.sell(self.leg2, OptionType.CALL, quantity=2),
            TradeLeg.buy(self.leg3, OptionType.CALL),
        ]

    def _details(self) -> dict[str, Any]:
        return {
            "total_debit": round(self.total_debit, 2),
            "lower_wing_width": round(self.lower_wing_width, 2),
            "upper_wing_width": round(self.upper_wing_width, 2),
            "max_loss_upside": round(self.max_loss_upside, 2),
            "max_loss_downside": round(self.max_loss_downside, 2),
        }


@dataclass(frozen=True)
class ZebraTrade(TradeCandidate):
    """Zero extrinsic back ratio: buy 2 lower calls, sell 1 higher call."""

    STRATEGY = "ZEBRA"

    long_call: OptionQuote
    short_call: OptionQuote
    net_debit: float
    net_extrinsic_value: float

    @property
    def legs(self) -> list[TradeLeg]:
        return [
            TradeLeg.sell(self.short_call, OptionType.CALL),
            TradeLeg.buy(self.long_call, OptionType.CALL, quantity=2),
        ]

    def _details(self) -> dict[str, Any]:
        return {
            "net_debit": round(self.net_debit, 2),
            "net_extrinsic_value": round(self.net_extrinsic_value, 4),
        }


@dataclass(frozen=True)
class LongCallLeap(TradeCandidate):
    """
    Long-dated call bought as a stock replacement.

    Cost figures are per share over the holding period: cost_of_option is
    extrinsic value plus forgone dividends, cost_of_buying_stock is margin
    interest plus the return forgone on the cash the option frees up.
    """

    STRATEGY = "Long Call LEAP"

    long_call: OptionQuote
    intrinsic_value: float
    extrinsic_value: float
    margin_interest: float
    savings_interest: float
    dividend_cost: float
    cost_of_option: float
    cost_of_buying_stock: float
    cost_savings_percent: float
    option_price_percent: float

    @property
    def strike(self) -> float:
        return self.long_call.strike

    @property
    def break_even_cagr(self) -> Optional[float]:
        """
        Annualized growth needed to reach break-even by expiration, in percent.

        Returns None when DTE is not positive.
        """
        if self.dte <= 0:
            return None
        growth = 1 + self.break_even_percent / 100
        if growth <= 0:
            return None
        return (math.pow(growth, DAYS_PER_YEAR / self.dte) - 1) * 100

    @property
    def legs(self) -> list[TradeLeg]:
        return [TradeLeg.buy(self.long_call, OptionType.CALL)]

    def _details(self) -> dict[str, Any]:
        cagr = self.break_even_cagr
        return {
            "extrinsic_value": round(self.extrinsic_value, 2),
            "cost_of_option": round(self.cost_of_option, 2),
            "cost_of_buying_stock": round(self.cost_of_buying_stock, 2),
            "cost_savings_percent": round(self.cost_savings_percent, 2),
            "option_price_percent": round(self.option_price_percent, 2),
            "break_even_cagr": round(cagr, 2) if cagr is not None else None,
        }
