from fastapi.testclient import TestClient

from agari.config import settings
from agari.main import app

client = TestClient(app)


def valid_payload() -> dict:
    return {
        "hand": {
            "closed_tiles": ["1m", "2m", "3m", "4p", "5p", "6p", "7s", "8s", "9s", "E", "E", "E", "2p"],
            "melds": [],
            "win_tile": "2p",
        },
        "context": {
            "win_type": "ron",
            "is_dealer": False,
            "round_wind": "E",
            "seat_wind": "S",
            "riichi": True,
            "double_riichi": False,
            "ippatsu": False,
            "haitei": False,
            "houtei": False,
            "rinshan": False,
            "chankan": False,
            "chiihou": False,
            "tenhou": False,
            "dora_indicators": ["4m"],
            "red_dora": {"m": 1, "p": 1, "s": 0},
            "honba": 0,
            "kyotaku": 0,
        },
        "rules": {
            "aka_ari": True,
            "kuitan_ari": True,
            "double_yakuman_ari": True,
            "kazoe_yakuman_ari": True,
            "renpu_fu": 4,
        },
    }


def test_root_and_health():
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/").json()["health"] == "/health"


def test_score_and_read_back_from_history():
    response = client.post("/api/v1/score", json=valid_payload())
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["result"]["han"] == 4
    assert body["result"]["fu"] == 40
    assert body["result"]["points"]["ron"] == 8000

    listed = client.get("/api/v1/history").json()
    assert listed["limit"] == settings.history_limit
    assert listed["entries"][0]["id"] == body["score_id"]

    entry = client.get(f"/api/v1/history/{body['score_id']}")
    assert entry.status_code == 200
    assert entry.json()["data"]["result"]["score"] == "8000点"
    assert entry.json()["data"]["hand"]["win_tile"] == "2p"


def test_history_is_capped():
    for _ in range(settings.history_limit + 2):
        assert client.post("/api/v1/score", json=valid_payload()).status_code == 200
    assert len(client.get("/api/v1/history").json()["entries"]) == settings.history_limit


def test_unknown_history_entry():
    response = client.get("/api/v1/history/00000000-0000-0000-0000-000000000000")
    assert response.status_code == 404


def test_dealer_follows_seat_wind():
    payload = valid_payload()
    payload["context"]["seat_wind"] = "E"
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 200
    result = response.json()["result"]
    assert {"name": "場風・自風 東", "han": 2, "yakuman": False} in result["yaku"]
    assert result["points"]["ron"] == 12000


def test_invalid_tile_code():
    payload = valid_payload()
    payload["hand"]["closed_tiles"][0] = "0m"
    assert client.post("/api/v1/score", json=payload).status_code == 422


def test_fifth_copy_is_rejected():
    payload = valid_payload()
    payload["hand"]["closed_tiles"] = ["1m", "1m", "1m", "1m", "5p", "6p", "7s", "8s", "9s", "E", "E", "E", "2p"]
    payload["hand"]["win_tile"] = "1m"
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 422
    assert "5+" in response.json()["detail"]


def test_malformed_chi_is_rejected():
    payload = valid_payload()
    payload["hand"]["closed_tiles"] = ["1m", "2m", "3m", "4p", "5p", "6p", "7s", "8s", "9s", "2p"]
    payload["hand"]["melds"] = [{"type": "chi", "tiles": ["8s", "9s", "1p"]}]
    payload["context"]["riichi"] = False
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 422
    assert "chi" in response.json()["detail"]


def test_inconsistent_flags_are_rejected():
    payload = valid_payload()
    payload["context"]["double_riichi"] = True
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"] == "riichi and double_riichi cannot both be true"

    payload = valid_payload()
    payload["context"]["haitei"] = True
    assert client.post("/api/v1/score", json=payload).status_code == 422


def test_engine_errors_are_returned_as_422():
    payload = valid_payload()
    payload["context"]["riichi"] = False
    payload["context"]["round_wind"] = "W"
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "no_yaku_present"
    assert response.json()["detail"]["message"] == "役がありません"


def test_wrong_hand_size_over_http():
    payload = valid_payload()
    payload["hand"]["closed_tiles"] = ["1m", "2m"]
    response = client.post("/api/v1/score", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "wrong_hand_size"


def test_quiz_question():
    response = client.get("/api/v1/quiz", params={"answers": ["true", "false"]})
    assert response.status_code == 200
    body = response.json()
    assert len(body["hand"]) == 13
    assert body["expected_text"].endswith("点") or "点オール" in body["expected_text"]
    assert isinstance(body["is_correct"], bool)
