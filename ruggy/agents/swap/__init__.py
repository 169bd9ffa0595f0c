from .agent import SwapAgent
from .executor import SwapExecutor, SwapReceipt
from .prompt import SWAP_CONFIRMATION_TEMPLATE, SWAP_EXTRACTION_TEMPLATE

__all__ = [
    "SWAP_CONFIRMATION_TEMPLATE",
    "SWAP_EXTRACTION_TEMPLATE",
    "SwapAgent",
    "SwapExecutor",
    "SwapReceipt",
]
