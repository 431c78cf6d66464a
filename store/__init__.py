# Store Package
from store.base import TraceStore
from store.memory import InMemoryTraceStore
from store.file_store import JsonlTraceStore

__all__ = ["TraceStore", "InMemoryTraceStore", "JsonlTraceStore"]
