"""Domain concept for mapping resolver and feed exceptions to HTTP responses."""
from dataclasses import dataclass

from fastapi import HTTPException

from market_resolver.providers.core.exceptions import PriceUnavailableError


@dataclass(frozen=True)
class ErrorMapper:
    """Maps store/oracle exceptions to HTTP (status_code, detail).

    One instance per router so messages name the right resource.
    """

    resource_name: str = "Resource"
    api_name: str = "API"

    def to_http(
        self,
        exc: Exception,
        identifier: str | int | None = None,
    ) -> tuple[int, str]:
        """Map an exception to (status_code, detail) for HTTP responses.

        Args:
            exc: The exception raised by the store or the price oracle.
            identifier: Optional id/symbol to include in detail (e.g. 42, "AAPL").

        Returns:
            (status_code, detail) suitable for HTTPException(status_code=..., detail=...).
        """
        if isinstance(exc, LookupError):
            detail = (
                f"{self.resource_name} not found"
                if identifier is None
                else f"{self.resource_name} '{identifier}' not found"
            )
            return (404, detail)
        if isinstance(exc, PriceUnavailableError):
            detail = (
                f"{self.api_name} unavailable"
                if identifier is None
                else f"No price available for '{identifier}'"
            )
            return (503, detail)
        return (500, "Internal server error")

    def raise_http(
        self,
        exc: Exception,
        identifier: str | int | None = None,
    ) -> None:
        """Map exception to HTTP and raise HTTPException. Never returns."""
        status_code, detail = self.to_http(exc, identifier=identifier)
        raise HTTPException(status_code=status_code, detail=detail) from exc
