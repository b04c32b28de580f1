"""Enumerations for domain models."""

from enum import Enum


class TransactionKind(str, Enum):
    """Discriminant of the transaction variants."""

    CASH = "CASH"
    SECURITY = "SECURITY"
    DIVIDEND = "DIVIDEND"


class PositionKind(str, Enum):
    """Discriminant of the position variants."""

    CASH = "CASH"
    SECURITY = "SECURITY"


class CostBasisMethod(str, Enum):
    """Cost basis calculation methods."""

    FIFO = "FIFO"  # First In, First Out
    LIFO = "LIFO"  # Last In, First Out
    WAC = "WAC"  # Weighted Average Cost


class Interval(str, Enum):
    """Sampling interval of historical series."""

    DAY = "day"


class Exchange(str, Enum):
    """Trading venues, valued by their operating MIC."""

    NYSE = "XNYS"
    NASDAQ = "XNAS"
    LONDON_STOCK_EXCHANGE = "XLON"
    XETRA = "XETR"
    BORSE_FRANKFURT = "XFRA"
    EURONEXT_AMSTERDAM = "XAMS"
    EURONEXT_BRUSSELS = "XBRU"
    EURONEXT_PARIS = "XPAR"
    EURONEXT_MILAN = "XMIL"
    SIX_SWISS_EXCHANGE = "XSWX"
    NASDAQ_STOCKHOLM = "XSTO"
    NASDAQ_HELSINKI = "XHEL"
    NASDAQ_COPENHAGEN = "XCSE"
    TORONTO_STOCK_EXCHANGE = "XTSE"
    HONG_KONG_EXCHANGE = "XHKG"
    OTC = "OTC"
