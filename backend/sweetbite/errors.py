"""Custom exceptions for the SweetBite store."""

from typing import Optional


class SweetBiteError(Exception):
    """Base exception for all SweetBite errors."""

    pass


class ServiceError(SweetBiteError):
    """Raised by ProductService on any transport, HTTP or payload failure."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class StockBatchError(ServiceError):
    """Raised when one or more updates of a stock batch failed.

    ``succeeded`` holds the product ids whose update was applied remotely,
    ``failed`` maps product ids to the error that stopped them.
    """

    def __init__(self, succeeded: list[str], failed: dict[str, ServiceError]) -> None:
        self.succeeded = succeeded
        self.failed = failed
        super().__init__(
            f"Failed to update stock for {len(failed)} product(s): {', '.join(failed)}"
        )


class StoreError(SweetBiteError):
    """Base exception for failures surfaced by the Store."""

    pass


class CatalogLoadError(StoreError):
    """Raised when the catalog could not be listed. The cache is unchanged."""

    def __init__(self, message: str = "Failed to load products") -> None:
        super().__init__(message)


class CatalogWriteError(StoreError):
    """Raised when a create/update/delete against the catalog failed."""

    def __init__(self, operation: str, product_id: Optional[str] = None, *, status_code: Optional[int] = None):
        self.operation = operation
        self.product_id = product_id
        self.status_code = status_code
        msg = f"Failed to {operation} product"
        if product_id:
            msg = f"Failed to {operation} product {product_id}"
        super().__init__(msg)


class OrderPlacementError(StoreError):
    """Raised when checkout could not persist the stock decrements.

    No local state was changed. ``rolled_back`` lists products whose remote
    stock was restored, ``rollback_failed`` those still showing the decrement
    until the next catalog load.
    """

    def __init__(
        self,
        failed: Optional[list[str]] = None,
        rolled_back: Optional[list[str]] = None,
        rollback_failed: Optional[list[str]] = None,
    ) -> None:
        self.failed = failed or []
        self.rolled_back = rolled_back or []
        self.rollback_failed = rollback_failed or []
        super().__init__("Failed to place order: could not update product stock")
