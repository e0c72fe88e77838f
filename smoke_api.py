#!/usr/bin/env python3
"""
Smoke script exercising a running Sideline Rotation server.

Start the server with ``python run_web.py`` first.
"""
import sys
import time

import requests

BASE_URL = "http://127.0.0.1:7122"

SETUP = {
    "team_config": {
        "format": "5v5",
        "squad_size": 7,
        "formation": "2-2",
        "substitution_type": "individual",
    },
    "players": [
        {"id": "g", "name": "Goalie", "number": 1},
        {"id": "a", "name": "Avery", "number": 2},
        {"id": "b", "name": "Blake", "number": 3},
        {"id": "c", "name": "Casey", "number": 4},
        {"id": "d", "name": "Devon", "number": 5},
        {"id": "e", "name": "Emery", "number": 6},
        {"id": "f", "name": "Finley", "number": 7},
    ],
    "goalie": "g",
    "outfield": ["a", "b", "c", "d", "e", "f"],
}


def show(step: str, response: requests.Response) -> dict:
    print(f"{step}")
    print(f"   Status: {response.status_code}")
    data = response.json()
    print(f"   Response: {data.get('message') or data.get('error')}")
    return data


def run_smoke(base_url: str = BASE_URL) -> None:
    """Walk through set up, substitution, undo and stats."""
    print("Testing rotation workflow...")

    show("1. Setting up match...", requests.post(f"{base_url}/api/match/setup", json=SETUP))
    show("2. Starting clock...", requests.post(f"{base_url}/api/timer/resume"))

    show("3. Substituting...", requests.post(f"{base_url}/api/substitution"))
    # Wait for the animation to commit the new lineup.
    time.sleep(2.5)

    state = requests.get(f"{base_url}/api/state").json()["game_state"]
    print(f"   Next off: {state['next_player_id_to_sub_out']}")
    print(f"   Queue: {state['rotation_queue']}")

    show("4. Undoing...", requests.post(f"{base_url}/api/undo"))
    time.sleep(2.5)

    response = requests.get(f"{base_url}/api/players/a/time-stats")
    print(f"5. Time stats for a: {response.json()}")


if __name__ == "__main__":
    run_smoke(sys.argv[1] if len(sys.argv) > 1 else BASE_URL)
