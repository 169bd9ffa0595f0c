"""OogaBooga aggregator client initialization helpers."""

from .client import NO_ROUTE_STATUS, ZERO_ADDRESS, AggregatorError, OogaBoogaClient
from .config import OogaBoogaSettings, get_oogabooga_settings

__all__ = [
    "AggregatorError",
    "NO_ROUTE_STATUS",
    "OogaBoogaClient",
    "OogaBoogaSettings",
    "ZERO_ADDRESS",
    "get_oogabooga_settings",
]
