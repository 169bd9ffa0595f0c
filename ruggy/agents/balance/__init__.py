from .action import BalanceAgent, BalanceQuery, summarize_pouch

__all__ = ["BalanceAgent", "BalanceQuery", "summarize_pouch"]
