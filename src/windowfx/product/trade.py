"""Trades wrapping a window forward with trade-level information."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field

from windowfx.core.dates import ReferenceData
from windowfx.product.resolved import ResolvedWindowForward
from windowfx.product.window_forward import WindowForward


@dataclass(frozen=True)
class TradeInfo:
    """Additional information about a trade.

    Attributes:
        id: Trade identifier, ``None`` when the trade has not been booked
        trade_date: Date the trade was agreed
        counterparty: Counterparty identifier
        settlement_date: Settlement date, if different from the product's
        attributes: Free-form key/value attributes
    """

    id: str | None = None
    trade_date: dt.date | None = None
    counterparty: str | None = None
    settlement_date: dt.date | None = None
    attributes: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def empty(cls) -> TradeInfo:
        return cls()

    @classmethod
    def of(cls, trade_date: dt.date, trade_id: str | None = None) -> TradeInfo:
        return cls(id=trade_id, trade_date=trade_date)

    def with_attribute(self, key: str, value: Any) -> TradeInfo:
        return TradeInfo(
            id=self.id,
            trade_date=self.trade_date,
            counterparty=self.counterparty,
            settlement_date=self.settlement_date,
            attributes={**self.attributes, key: value},
        )


class WindowForwardTrade(BaseModel):
    """A trade in a window forward.

    Example:
        >>> trade = WindowForwardTrade.of(TradeInfo.of(date(2018, 3, 28), "T1"), product)
        >>> resolved = trade.resolve(ReferenceData.standard())
    """

    info: TradeInfo = Field(default_factory=TradeInfo, description="Trade information")
    product: WindowForward = Field(..., description="The window forward traded")

    model_config = {
        "frozen": True,
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def of(cls, info: TradeInfo, product: WindowForward) -> WindowForwardTrade:
        return cls(info=info, product=product)

    @property
    def id(self) -> str | None:
        return self.info.id

    def with_info(self, info: TradeInfo) -> WindowForwardTrade:
        return WindowForwardTrade(info=info, product=self.product)

    def resolve(self, ref_data: ReferenceData) -> ResolvedWindowForwardTrade:
        """Resolve the product against reference data, keeping the trade info."""
        return ResolvedWindowForwardTrade(self.info, self.product.resolve(ref_data))


@dataclass(frozen=True)
class ResolvedWindowForwardTrade:
    """A resolved window forward trade, the input to the trade pricer."""

    info: TradeInfo
    product: ResolvedWindowForward

    @classmethod
    def of(cls, info: TradeInfo, product: ResolvedWindowForward) -> ResolvedWindowForwardTrade:
        return cls(info, product)
