from .manager import CacheManager, InMemoryCacheManager

__all__ = ["CacheManager", "InMemoryCacheManager"]
