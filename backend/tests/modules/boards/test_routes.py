"""
Tests for board API endpoints.

The board service is replaced with an AsyncMock; these tests cover
request parsing, authentication and the mapping of module errors to
HTTP responses.
"""

import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from datetime import datetime, timezone

from api.app import create_app
from api.dependencies import get_board_service
from modules.boards.models import (
    Board,
    BoardListItem,
    BoardListResponse,
    PermissionLevel,
    ShareBoardResponse,
)
from modules.boards.exceptions import (
    BoardAccessDeniedError,
    BoardCreationDeniedError,
    BoardNotFoundError,
    SlugTakenError,
    VersionConflictError,
)

from tests.conftest import create_test_token


LIMIT_MESSAGE = (
    "You have reached the maximum number of boards (1) for the Student plan. "
    "Upgrade to Commercial for unlimited boards."
)


@pytest.fixture
def app():
    """Create a fresh app for each test."""
    return create_app()


@pytest.fixture
def mock_service():
    return AsyncMock()


@pytest.fixture
def client(app, mock_service):
    app.dependency_overrides[get_board_service] = lambda: mock_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def mock_board() -> Board:
    now = datetime.now(timezone.utc)
    return Board(
        id="board-123",
        user_id="test-user-123",
        title="Sprint 14",
        slug="sprint-14",
        grid_data={"sections": []},
        version=3,
        created_at=now,
        updated_at=now,
    )


class TestListBoards:
    def test_requires_auth(self, client):
        response = client.get("/api/boards")
        assert response.status_code == 401

    def test_expired_token(self, client):
        token = create_test_token(expired=True)
        response = client.get("/api/boards", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client):
        token = create_test_token(token_type="refresh")
        response = client.get("/api/boards", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_lists_boards(self, client, mock_service, auth_headers, mock_board):
        mock_service.list_boards.return_value = BoardListResponse(
            boards=[
                BoardListItem(
                    id=mock_board.id,
                    title=mock_board.title,
                    slug=mock_board.slug,
                    is_owner=True,
                    permission=PermissionLevel.ADMIN,
                    updated_at=mock_board.updated_at,
                )
            ],
            total=1,
        )

        response = client.get("/api/boards", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["boards"][0]["permission"] == "admin"
        mock_service.list_boards.assert_awaited_once_with("test-user-123")


class TestCreateBoard:
    def test_creates(self, client, mock_service, auth_headers, mock_board):
        mock_service.create_board.return_value = mock_board

        response = client.post("/api/boards", json={"title": "Sprint 14"}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["slug"] == "sprint-14"
        user_id, request = mock_service.create_board.await_args.args
        assert user_id == "test-user-123"
        assert request.title == "Sprint 14"

    def test_limit_reached(self, client, mock_service, auth_headers):
        mock_service.create_board.side_effect = BoardCreationDeniedError(LIMIT_MESSAGE, "test-user-123")

        response = client.post("/api/boards", json={"title": "Second"}, headers=auth_headers)

        assert response.status_code == 403
        assert response.json()["error"] == "BOARD_LIMIT_EXCEEDED"
        assert response.json()["message"] == LIMIT_MESSAGE

    def test_empty_title_rejected(self, client, auth_headers):
        response = client.post("/api/boards", json={"title": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_slug_race_is_a_conflict(self, client, mock_service, auth_headers):
        mock_service.create_board.side_effect = SlugTakenError("plan")

        response = client.post("/api/boards", json={"title": "Plan"}, headers=auth_headers)

        assert response.status_code == 409
        assert response.json()["error"] == "SLUG_TAKEN"


class TestGetBoard:
    def test_anonymous_read(self, client, mock_service, mock_board):
        mock_service.get_board.return_value = mock_board

        response = client.get("/api/boards/board-123")

        assert response.status_code == 200
        mock_service.get_board.assert_awaited_once_with("board-123", None)

    def test_invalid_token_reads_as_anonymous(self, client, mock_service, mock_board):
        mock_service.get_board.return_value = mock_board

        response = client.get("/api/boards/board-123", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 200
        mock_service.get_board.assert_awaited_once_with("board-123", None)

    def test_authenticated_read(self, client, mock_service, auth_headers, mock_board):
        mock_service.get_board.return_value = mock_board

        client.get("/api/boards/board-123", headers=auth_headers)

        mock_service.get_board.assert_awaited_once_with("board-123", "test-user-123")

    def test_denied(self, client, mock_service):
        mock_service.get_board.side_effect = BoardAccessDeniedError("board-123", "view")

        response = client.get("/api/boards/board-123")

        assert response.status_code == 403
        assert response.json()["error"] == "BOARD_ACCESS_DENIED"

    def test_not_found(self, client, mock_service):
        mock_service.get_board.side_effect = BoardNotFoundError("board-123")

        response = client.get("/api/boards/board-123")

        assert response.status_code == 404
        assert response.json()["details"]["board_id"] == "board-123"

    def test_by_slug(self, client, mock_service, mock_board):
        mock_service.get_board_by_slug.return_value = mock_board

        response = client.get("/api/boards/slug/sprint-14")

        assert response.status_code == 200
        mock_service.get_board_by_slug.assert_awaited_once_with("sprint-14", None)


class TestUpdateBoard:
    def test_passes_changes_and_expected_version(self, client, mock_service, auth_headers, mock_board):
        mock_service.update_board.return_value = mock_board.model_copy(update={"version": 4})

        response = client.put(
            "/api/boards/board-123",
            json={
                "gridData": {"sections": ["a"]},
                "title": "Renamed",
                "expectedVersion": 3,
                "id": "ignored",
                "version": 99,
            },
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["version"] == 4
        mock_service.update_board.assert_awaited_once_with(
            "board-123",
            "test-user-123",
            {"grid_data": {"sections": ["a"]}, "title": "Renamed"},
            3,
        )

    def test_without_expected_version(self, client, mock_service, auth_headers, mock_board):
        mock_service.update_board.return_value = mock_board

        client.put("/api/boards/board-123", json={"description": None}, headers=auth_headers)

        mock_service.update_board.assert_awaited_once_with(
            "board-123", "test-user-123", {"description": None}, None
        )

    def test_conflict_returns_current_version(self, client, mock_service, auth_headers):
        mock_service.update_board.side_effect = VersionConflictError("board-123", 4, 3)

        response = client.put(
            "/api/boards/board-123",
            json={"title": "Mine", "expectedVersion": 3},
            headers=auth_headers,
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "VERSION_CONFLICT"
        assert body["details"]["current_version"] == 4
        assert body["details"]["expected_version"] == 3

    def test_requires_auth(self, client, mock_service):
        response = client.put("/api/boards/board-123", json={"title": "x"})
        assert response.status_code == 401
        mock_service.update_board.assert_not_awaited()


class TestDeleteBoard:
    def test_deletes(self, client, mock_service, auth_headers):
        response = client.delete("/api/boards/board-123", headers=auth_headers)

        assert response.status_code == 204
        mock_service.delete_board.assert_awaited_once_with("board-123", "test-user-123")


class TestShareBoard:
    def test_share(self, client, mock_service, auth_headers):
        mock_service.share_board.return_value = ShareBoardResponse(
            email="friend@example.com",
            collaborator=None,
            share_url="http://localhost:5173/board.html?id=board-123",
        )

        response = client.post(
            "/api/boards/board-123/share",
            json={"email": "friend@example.com", "permission": "view"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["share_url"].endswith("board-123")
        request = mock_service.share_board.await_args.args[2]
        assert request.permission == PermissionLevel.VIEW

    def test_invalid_email(self, client, auth_headers):
        response = client.post(
            "/api/boards/board-123/share",
            json={"email": "not-an-email"},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_remove_collaborator(self, client, mock_service, auth_headers):
        response = client.delete("/api/boards/board-123/collaborators/user-456", headers=auth_headers)

        assert response.status_code == 204
        mock_service.remove_collaborator.assert_awaited_once_with("board-123", "test-user-123", "user-456")
