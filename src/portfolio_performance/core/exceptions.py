"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class TickerNotFoundError(NotFoundError):
    """Raised when a security search returns no listing for an ISIN."""

    def __init__(self, isin: str):
        super().__init__("Ticker for ISIN", isin)
        self.code = "TICKER_NOT_FOUND"
        self.isin = isin


class DanglingDividendError(AppError):
    """Raised when a dividend arrives for a security without an open position."""

    def __init__(self, isin: str):
        super().__init__(
            f"Dividend transaction for {isin} without open position",
            code="DANGLING_DIVIDEND",
        )
        self.isin = isin


class InvalidCachedPriceError(AppError):
    """Raised when a resolved price is unfit to be written to the cache."""

    def __init__(self, key: str, value: object):
        super().__init__(
            f"Refusing to cache invalid price {value!r} under {key}",
            code="INVALID_CACHED_PRICE",
        )
        self.key = key


class UnresolvableFXDateError(AppError):
    """Raised when no rate or price exists within the backward lookback window."""

    def __init__(self, series: str, day: str, lookback_days: int):
        super().__init__(
            f"No {series} value on or up to {lookback_days} days before {day}",
            code="UNRESOLVABLE_FX_DATE",
        )


class LotMatchingError(AppError):
    """Raised when a sale cannot be matched against remaining purchase lots."""

    def __init__(self, isin: str, missing_shares: str):
        super().__init__(
            f"Not enough purchased shares of {isin} to match sale: {missing_shares} unmatched",
            code="LOT_MATCHING",
        )
