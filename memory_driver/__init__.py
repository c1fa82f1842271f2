from .plugin import MemoryClient, MemoryDriverPlugin

__all__ = ["MemoryClient", "MemoryDriverPlugin"]
