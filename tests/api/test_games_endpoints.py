from decimal import Decimal

from fastapi.testclient import TestClient


def _create_running_game(client: TestClient, participants: list[str]) -> int:
    create = client.post("/games", json={"name": "Friday night", "participants": participants})
    assert create.status_code == 201
    assert create.json()["status"] == "scheduled"
    game_id = create.json()["game_id"]

    start = client.post(f"/games/{game_id}/start")
    assert start.status_code == 200
    assert start.json()["status"] == "in_progress"
    return game_id


def _record(client: TestClient, game_id: int, participant: str, kind: str, amount: str):
    return client.post(
        f"/games/{game_id}/transactions",
        json={"participant_id": participant, "type": kind, "amount": amount},
    )


def test_game_lifecycle_to_settlement_contract(client: TestClient) -> None:
    game_id = _create_running_game(client, ["alice", "bob", "carol"])
    for participant in ("alice", "bob", "carol"):
        assert _record(client, game_id, participant, "buyin", "20.00").status_code == 201
    assert _record(client, game_id, "bob", "cashout", "50.00").status_code == 201
    assert _record(client, game_id, "alice", "cashout", "10.00").status_code == 201

    positions = client.get(f"/games/{game_id}/positions")
    assert positions.status_code == 200
    nets = {p["participant_id"]: Decimal(p["net_result"]) for p in positions.json()}
    assert nets == {"alice": Decimal("-10"), "bob": Decimal("30"), "carol": Decimal("-20")}

    validation = client.get(f"/games/{game_id}/validation")
    assert validation.status_code == 200
    assert validation.json()["is_valid"] is True

    complete = client.post(f"/games/{game_id}/complete")
    assert complete.status_code == 200
    assert complete.json()["status"] == "completed"

    calculated = client.post(f"/games/{game_id}/settlements")
    assert calculated.status_code == 200
    transfers = [(s["payer_id"], s["payee_id"], Decimal(s["amount"])) for s in calculated.json()]
    assert transfers == [("carol", "bob", Decimal("20")), ("alice", "bob", Decimal("10"))]

    listed = client.get(f"/games/{game_id}/settlements")
    assert [s["id"] for s in listed.json()] == [s["id"] for s in calculated.json()]

    settlement_id = calculated.json()[0]["id"]
    paid = client.post(f"/settlements/{settlement_id}/complete", json={"payment_method": "zelle"})
    assert paid.status_code == 200
    assert paid.json()["status"] == "completed"
    assert paid.json()["payment_method"] == "zelle"

    log = client.get(f"/games/{game_id}/settlements/log")
    assert log.status_code == 200
    assert [entry["status"] for entry in log.json()] == ["success"]


def test_imbalanced_game_error_shape(client: TestClient) -> None:
    game_id = _create_running_game(client, ["alice", "bob"])
    _record(client, game_id, "alice", "buyin", "100.00")
    _record(client, game_id, "bob", "cashout", "99.00")

    complete = client.post(f"/games/{game_id}/complete")

    assert complete.status_code == 409
    detail = complete.json()["detail"]
    assert set(detail.keys()) == {"code", "message", "details"}
    assert detail["code"] == "ledger_imbalance"
    assert Decimal(detail["details"]["difference"]) == Decimal("1")


def test_unknown_game_returns_404(client: TestClient) -> None:
    response = client.get("/games/9999")

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "not_found"


def test_transaction_on_scheduled_game_conflicts(client: TestClient) -> None:
    create = client.post("/games", json={"participants": ["alice", "bob"]})
    game_id = create.json()["game_id"]

    response = _record(client, game_id, "alice", "buyin", "10.00")

    assert response.status_code == 409
    assert response.json()["detail"]["code"] == "conflict"


def test_request_validation(client: TestClient) -> None:
    duplicate = client.post("/games", json={"participants": ["alice", "alice"]})
    assert duplicate.status_code == 422

    game_id = _create_running_game(client, ["alice", "bob"])
    assert _record(client, game_id, "alice", "buyin", "1.005").status_code == 422
    assert _record(client, game_id, "alice", "buyin", "-5").status_code == 422
    assert _record(client, game_id, "alice", "rebuy", "5").status_code == 422

    stranger = _record(client, game_id, "mallory", "buyin", "5.00")
    assert stranger.status_code == 404


def test_add_participant_endpoint(client: TestClient) -> None:
    game_id = _create_running_game(client, ["alice", "bob"])

    response = client.post(f"/games/{game_id}/participants", json={"participant_id": "carol"})

    assert response.status_code == 200
    assert response.json()["participants"] == ["alice", "bob", "carol"]


def test_cancel_game(client: TestClient) -> None:
    create = client.post("/games", json={"participants": ["alice", "bob"]})
    game_id = create.json()["game_id"]

    cancel = client.post(f"/games/{game_id}/cancel")
    assert cancel.status_code == 200
    assert cancel.json()["status"] == "cancelled"

    validation = client.get(f"/games/{game_id}/validation")
    assert validation.status_code == 409
