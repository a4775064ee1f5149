from infrastructure.repositories.in_memory_search_history_repository import InMemorySearchHistoryRepository
from infrastructure.repositories.sqlite_search_history_repository import SqliteSearchHistoryRepository

__all__ = [
    "InMemorySearchHistoryRepository",
    "SqliteSearchHistoryRepository",
]
