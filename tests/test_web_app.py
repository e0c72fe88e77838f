"""Tests for the Flask API using the test client."""

import pytest

from sideline_rotation.ui import create_app

PLAYERS = [{"id": pid, "name": pid.upper(), "number": n} for n, pid in enumerate("gabcdef", start=1)]

INDIVIDUAL_SETUP = {
    "team_config": {
        "format": "5v5",
        "squad_size": 7,
        "formation": "2-2",
        "substitution_type": "individual",
    },
    "players": PLAYERS,
    "goalie": "g",
    "outfield": list("abcdef"),
}

PAIRS_SETUP = {
    "team_config": {
        "format": "5v5",
        "squad_size": 7,
        "formation": "2-2",
        "substitution_type": "pairs",
    },
    "players": PLAYERS,
    "lineup": {
        "goalie": "g",
        "left_pair": {"defender": "a", "attacker": "b"},
        "right_pair": {"defender": "c", "attacker": "d"},
        "sub_pair": {"defender": "e", "attacker": "f"},
    },
}


@pytest.fixture
def client():
    app = create_app(animate=False)
    app.config["TESTING"] = True
    return app.test_client()


@pytest.fixture
def match(client):
    response = client.post("/api/match/setup", json=INDIVIDUAL_SETUP)
    assert response.status_code == 200
    return client


def game_state(client):
    return client.get("/api/state").get_json()["game_state"]


def test_health(client):
    response = client.get("/api/health")
    assert response.get_json() == {"success": True, "app": "Sideline Rotation"}


def test_endpoints_need_a_match(client):
    assert client.get("/api/state").status_code == 409
    assert client.post("/api/substitution").status_code == 409
    assert client.get("/api/report").status_code == 409


def test_setup_returns_initial_state(client):
    response = client.post("/api/match/setup", json=INDIVIDUAL_SETUP)
    data = response.get_json()
    assert data["success"] is True
    assert data["game_state"]["next_player_id_to_sub_out"] == "a"
    assert data["game_state"]["formation"]["substitute_1"] == "e"
    assert data["timer"]["paused"] is True


def test_setup_rejects_bad_team_config(client):
    payload = dict(INDIVIDUAL_SETUP, team_config={"format": "5v5", "squad_size": 3})
    response = client.post("/api/match/setup", json=payload)
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_setup_rejects_bad_lineup(client):
    payload = dict(INDIVIDUAL_SETUP, outfield=list("abcde"))
    response = client.post("/api/match/setup", json=payload)
    data = response.get_json()
    assert response.status_code == 400
    assert any("'f'" in error for error in data["errors"])


def test_substitution_and_undo(match):
    response = match.post("/api/substitution")
    assert response.status_code == 200
    assert response.get_json() == {"success": True, "message": "Substitution made"}

    state = game_state(match)
    assert state["formation"]["left_defender"] == "e"
    assert state["next_player_id_to_sub_out"] == "b"

    assert match.post("/api/undo").status_code == 200
    state = game_state(match)
    assert state["formation"]["left_defender"] == "a"
    assert match.post("/api/undo").status_code == 400


def test_next_substitution_target(match):
    assert match.post("/api/substitution/next", json={}).status_code == 400
    response = match.post("/api/substitution/next", json={"target": "right_attacker"})
    assert response.status_code == 200
    assert game_state(match)["next_player_id_to_sub_out"] == "d"


def test_position_switch(match):
    assert match.post("/api/position-switch", json={"source_player_id": "a"}).status_code == 400
    response = match.post(
        "/api/position-switch", json={"source_player_id": "a", "target_player_id": "c"}
    )
    assert response.status_code == 200
    assert game_state(match)["formation"]["left_attacker"] == "a"


def test_goalie_switch(match):
    assert match.post("/api/goalie", json={}).status_code == 400
    assert match.post("/api/goalie", json={"new_goalie_id": "e"}).status_code == 200
    state = game_state(match)
    assert state["formation"]["goalie"] == "e"
    assert state["formation"]["substitute_1"] == "g"


def test_toggle_inactive_and_promote(match):
    assert match.post("/api/players/e/toggle-inactive").status_code == 200
    state = game_state(match)
    assert state["players"]["e"]["stats"]["is_inactive"] is True
    assert state["formation"]["substitute_1"] == "f"

    assert match.post("/api/substitutes/e/next-in").status_code == 400
    assert match.post("/api/players/a/toggle-inactive").status_code == 400


def test_pair_role_swap_route():
    client = create_app(animate=False).test_client()
    assert client.post("/api/match/setup", json=PAIRS_SETUP).status_code == 200

    response = client.post("/api/pairs/left_pair/swap-roles")
    assert response.status_code == 200
    assert game_state(client)["formation"]["left_pair"] == {"defender": "b", "attacker": "a"}

    response = client.post("/api/position-switch", json={"source_player_id": "a", "target_player_id": "c"})
    assert response.status_code == 400


def test_clock_routes_and_report(match):
    assert match.post("/api/timer/resume").get_json()["message"] == "Match running"
    assert match.post("/api/timer/pause").get_json()["message"] == "Match paused"
    assert match.post("/api/period/end").get_json()["message"] == "Period ended"

    report = match.get("/api/report").get_json()["report"]
    assert len(report["players"]) == 7
    assert report["fairness_counts"].keys() == {"under", "ok", "over"}


def test_report_csv_download(match):
    response = match.get("/api/report/csv")
    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert response.get_data(as_text=True).startswith("Sideline Rotation Report")


def test_time_stats_for_unknown_player(match):
    data = match.get("/api/players/nobody/time-stats").get_json()
    assert data == {
        "success": True,
        "player_id": "nobody",
        "total_outfield_time": 0,
        "attack_defender_diff": 0,
    }
