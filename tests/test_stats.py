from decimal import Decimal

from fastapi.testclient import TestClient


def test_stats_cover_only_completed_games(client: TestClient, service, play_game) -> None:
    play_game({"alice": ("100", "150"), "bob": ("100", "50")}, name="week 1")
    play_game({"alice": ("100", "20"), "bob": ("50", "130")}, name="week 2")

    running = service.start_game("week 3", ["alice", "bob"])
    service.begin_game(running)
    service.record_transaction(running, "alice", "buyin", Decimal("500"))

    balance = client.get("/stats/balance")
    assert balance.status_code == 200
    players = {p["participant_id"]: p for p in balance.json()["players"]}
    assert Decimal(players["alice"]["net_result"]) == Decimal("-30")
    assert Decimal(players["bob"]["net_result"]) == Decimal("30")
    assert players["alice"]["games_played"] == 2
    assert [p["participant_id"] for p in balance.json()["players"]] == ["bob", "alice"]

    player = client.get("/stats/player/alice")
    assert player.status_code == 200
    data = player.json()
    assert data["games_played"] == 2
    assert Decimal(data["total_buyin"]) == Decimal("200")
    assert Decimal(data["net_profit"]) == Decimal("-30")
    assert Decimal(data["biggest_win"]) == Decimal("50")
    assert Decimal(data["biggest_loss"]) == Decimal("-80")
    assert len(data["history"]) == 2


def test_stats_for_unknown_player_are_empty(client: TestClient) -> None:
    response = client.get("/stats/player/nobody")

    assert response.status_code == 200
    assert response.json()["games_played"] == 0
    assert response.json()["history"] == []
