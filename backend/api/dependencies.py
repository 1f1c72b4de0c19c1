"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

When we're ready to extract a module to a microservice, we only need
to change the implementation here to an HTTP client.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from supabase import Client
    from modules.auth.interfaces import IAuthService
    from modules.auth.repository import UserRepository
    from modules.audit.interfaces import IAuditService
    from modules.audit.repository import AuditRepository
    from modules.boards.interfaces import IBoardService
    from modules.boards.repository import BoardRepository
    from modules.portfolio.interfaces import IPortfolioService
    from modules.subscriptions.service import SubscriptionService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self) -> None:
        self._user_repository: "UserRepository | None" = None
        self._board_repository: "BoardRepository | None" = None
        self._audit_repository: "AuditRepository | None" = None
        self._auth_service: "IAuthService | None" = None
        self._audit_service: "IAuditService | None" = None
        self._subscription_service: "SubscriptionService | None" = None
        self._board_service: "IBoardService | None" = None
        self._portfolio_service: "IPortfolioService | None" = None

    @property
    def db(self) -> "Client":
        from shared.database import get_supabase_client
        return get_supabase_client()

    @property
    def user_repository(self) -> "UserRepository":
        """Get the user repository instance."""
        if self._user_repository is None:
            from modules.auth.repository import UserRepository
            self._user_repository = UserRepository(self.db)
        return self._user_repository

    @property
    def board_repository(self) -> "BoardRepository":
        """Get the board repository instance."""
        if self._board_repository is None:
            from modules.boards.repository import BoardRepository
            self._board_repository = BoardRepository(self.db)
        return self._board_repository

    @property
    def audit_repository(self) -> "AuditRepository":
        """Get the audit repository instance."""
        if self._audit_repository is None:
            from modules.audit.repository import AuditRepository
            self._audit_repository = AuditRepository(self.db)
        return self._audit_repository

    @property
    def audit(self) -> "IAuditService":
        """Get the audit service instance."""
        if self._audit_service is None:
            from modules.audit.service import AuditService
            self._audit_service = AuditService(self.audit_repository)
        return self._audit_service

    @property
    def auth(self) -> "IAuthService":
        """Get the auth service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthService
            self._auth_service = AuthService(users=self.user_repository, audit=self.audit)
        return self._auth_service

    @property
    def subscriptions(self) -> "SubscriptionService":
        """Get the subscription service instance."""
        if self._subscription_service is None:
            from modules.subscriptions.service import SubscriptionService
            self._subscription_service = SubscriptionService(
                users=self.user_repository,
                boards=self.board_repository,
            )
        return self._subscription_service

    @property
    def boards(self) -> "IBoardService":
        """Get the board service instance."""
        if self._board_service is None:
            from modules.boards.service import BoardService
            self._board_service = BoardService(
                repository=self.board_repository,
                subscriptions=self.subscriptions,
                users=self.user_repository,
            )
        return self._board_service

    @property
    def portfolio(self) -> "IPortfolioService":
        """Get the portfolio service instance."""
        if self._portfolio_service is None:
            from modules.portfolio.service import PortfolioService
            self._portfolio_service = PortfolioService(
                boards=self.board_repository,
                users=self.user_repository,
            )
        return self._portfolio_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._user_repository = None
        self._board_repository = None
        self._audit_repository = None
        self._auth_service = None
        self._audit_service = None
        self._subscription_service = None
        self._board_service = None
        self._portfolio_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthService":
    """FastAPI dependency for auth service."""
    return get_container().auth


def get_audit_service() -> "IAuditService":
    """FastAPI dependency for audit service."""
    return get_container().audit


def get_subscription_service() -> "SubscriptionService":
    """FastAPI dependency for subscription service."""
    return get_container().subscriptions


def get_board_service() -> "IBoardService":
    """FastAPI dependency for board service."""
    return get_container().boards


def get_portfolio_service() -> "IPortfolioService":
    """FastAPI dependency for portfolio service."""
    return get_container().portfolio
