"""M2-API-01~04 read-only rooms REST contract tests."""

from __future__ import annotations

import importlib

from fastapi.testclient import TestClient


def _new_client() -> TestClient:
    import app.main as app_main

    app_main = importlib.reload(app_main)
    return TestClient(app_main.app)


def test_m2_api_01_health(fresh_runtime) -> None:
    """Contract: GET /api/health returns ok."""
    with _new_client() as client:
        response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_m2_api_02_list_rooms_summary(fresh_runtime) -> None:
    """Contract: GET /api/rooms returns one summary per live room."""
    with _new_client() as client:
        assert client.get("/api/rooms").json() == []

        room, _ = fresh_runtime.room_registry.create_room("c1", "Alice")
        fresh_runtime.room_registry.join(room.code, "c2", "Bob")
        response = client.get("/api/rooms")

    assert response.status_code == 200
    assert response.json() == [
        {
            "room_code": room.code,
            "status": "waiting",
            "player_count": 2,
            "current_round": 0,
            "total_rounds": 20,
        }
    ]


def test_m2_api_03_room_detail_by_code(fresh_runtime) -> None:
    """Contract: GET /api/rooms/{code} returns host, players and game state; code is case-insensitive."""
    with _new_client() as client:
        room, _ = fresh_runtime.room_registry.create_room("c1", "Alice")
        fresh_runtime.room_registry.start_game("c1")
        response = client.get(f"/api/rooms/{room.code.lower()}")

    assert response.status_code == 200
    detail = response.json()
    assert detail["room_code"] == room.code
    assert detail["host_id"] == "c1"
    assert [p["name"] for p in detail["players"]] == ["Alice"]
    assert detail["game_state"]["status"] == "playing"
    assert detail["game_state"]["current_round"] == 1
    assert detail["can_undo"] is True
    assert detail["settlement_pending"] is False
    assert detail["winner_ids"] == []


def test_m2_api_04_unknown_room_is_404_with_unified_error(fresh_runtime) -> None:
    """Contract: unknown code returns 404 ROOM_NOT_FOUND in {code,message,detail} shape."""
    with _new_client() as client:
        response = client.get("/api/rooms/abcd")

    assert response.status_code == 404
    assert response.json() == {
        "code": "ROOM_NOT_FOUND",
        "message": "room not found",
        "detail": {"room_code": "ABCD"},
    }
