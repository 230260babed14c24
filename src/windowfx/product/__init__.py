"""Window forward products, trades and FX swap conventions."""

from windowfx.product.conventions import STANDARD_FX_SWAP_CONVENTIONS, FxSwapConvention
from windowfx.product.resolved import ResolvedWindowForward
from windowfx.product.trade import ResolvedWindowForwardTrade, TradeInfo, WindowForwardTrade
from windowfx.product.window_forward import WindowDate, WindowForward, normalize_currency_order

__all__ = [
    "FxSwapConvention",
    "ResolvedWindowForward",
    "ResolvedWindowForwardTrade",
    "STANDARD_FX_SWAP_CONVENTIONS",
    "TradeInfo",
    "WindowDate",
    "WindowForward",
    "WindowForwardTrade",
    "normalize_currency_order",
]
