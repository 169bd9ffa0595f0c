from .history import RoomHistory, format_recent_messages

__all__ = ["RoomHistory", "format_recent_messages"]
