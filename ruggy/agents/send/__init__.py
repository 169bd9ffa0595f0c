from .agent import SendAgent
from .executor import SendExecutor, SendReceipt
from .prompt import SEND_CONFIRMATION_TEMPLATE, SEND_EXTRACTION_TEMPLATE

__all__ = [
    "SEND_CONFIRMATION_TEMPLATE",
    "SEND_EXTRACTION_TEMPLATE",
    "SendAgent",
    "SendExecutor",
    "SendReceipt",
]
