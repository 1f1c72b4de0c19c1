"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from datetime import datetime, timezone
from typing import Any, TypeVar, Generic

from postgrest.exceptions import APIError
from supabase import Client

from .exceptions import ExternalServiceError


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints
    - _execute() to run a query builder and translate store errors

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class BoardRepository(BaseRepository[Board]):
            def get_by_id(self, board_id: str) -> Optional[Board]:
                result = self._execute(
                    self._db.table("boards").select("*").eq("id", board_id)
                )
                if not result.data:
                    return None
                return self._map_to_board(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    def _execute(self, query: Any) -> Any:
        """
        Execute a query builder, surfacing store failures as ExternalServiceError.

        Args:
            query: A Supabase/PostgREST request builder.

        Returns:
            The API response with .data (and .count when requested).
        """
        try:
            return query.execute()
        except APIError as e:
            raise ExternalServiceError(
                f"Database request failed: {e.message}",
                service="supabase",
                details={"db_code": e.code},
            ) from e

    @staticmethod
    def _now_iso() -> str:
        """Current UTC time as an ISO 8601 string, the format the store expects."""
        return datetime.now(timezone.utc).isoformat()
