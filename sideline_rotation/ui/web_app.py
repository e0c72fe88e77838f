"""
Web application module for the Sideline Rotation engine.

This module contains the Flask server that exposes one match session as JSON
API endpoints. Every rule lives in the engine; the endpoints only translate
requests into session handlers and results into JSON.
"""
import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, jsonify, request

from ..models import TeamConfiguration
from ..services import (
    ActionResult,
    AnimationOrchestrator,
    LineupValidationError,
    MatchSession,
    TimerService,
    build_game_state,
    immediate_scheduler,
    lineup_from_order,
)
from ..utils import APP_TITLE

logger = logging.getLogger(__name__)


class WebAppState:
    """State holder for the web application: at most one active match."""

    def __init__(self, session: Optional[MatchSession] = None, animate: bool = True):
        self.session = session
        self.animate = animate

    def setup_match(self, data: Dict[str, Any]) -> MatchSession:
        """
        Build a new match session from a setup payload.

        Args:
            data: ``team_config``, ``players`` and either ``lineup`` (formation
                dictionary) or ``goalie`` plus ``outfield`` (ids in slot
                order); optionally ``period_count`` and ``period_length_minutes``

        Raises:
            TeamConfigurationError: If the team configuration is invalid
            LineupValidationError: If the lineup does not fit the configuration
        """
        team_config = TeamConfiguration.from_dict(data.get("team_config") or {})
        if "lineup" in data:
            lineup = data["lineup"]
        else:
            lineup = lineup_from_order(team_config, data.get("goalie"), data.get("outfield", []))

        state = build_game_state(team_config, data.get("players", []), lineup)
        timer_service = TimerService()
        timer_service.configure_match(
            period_count=data.get("period_count"),
            period_length_minutes=data.get("period_length_minutes"),
        )
        orchestrator = AnimationOrchestrator() if self.animate else AnimationOrchestrator(immediate_scheduler)
        self.session = MatchSession(state, timer_service=timer_service, orchestrator=orchestrator)
        return self.session


def _result_response(result: ActionResult) -> Tuple[Any, int]:
    return jsonify(result.to_dict()), 200 if result.success else 400


def create_app(session: Optional[MatchSession] = None, animate: bool = True) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        session: Optional match session to serve; otherwise one is created
            through ``POST /api/match/setup``
        animate: When False, sessions created by setup commit changes at once
            instead of after the animation delays

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app_state = WebAppState(session, animate)
    app.config["APP_STATE"] = app_state

    def _payload() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    def _no_match():
        return jsonify({"success": False, "error": "No match has been set up"}), 409

    # ==================== API Endpoints ==================== #

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"success": True, "app": APP_TITLE})

    @app.route("/api/state", methods=["GET"])
    def get_state():
        if app_state.session is None:
            return _no_match()
        return jsonify({"success": True, **app_state.session.to_dict()})

    @app.route("/api/match/setup", methods=["POST"])
    def setup_match():
        try:
            session = app_state.setup_match(_payload())
        except LineupValidationError as e:
            return jsonify({"success": False, "error": str(e), "errors": e.errors}), 400
        except (ValueError, KeyError) as e:
            return jsonify({"success": False, "error": str(e)}), 400
        return jsonify({"success": True, "message": "Match set up", **session.to_dict()})

    @app.route("/api/substitution", methods=["POST"])
    def substitute_now():
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.substitute_now(_payload().get("target")))

    @app.route("/api/substitution/next", methods=["POST"])
    def set_next_substitution():
        if app_state.session is None:
            return _no_match()
        target = _payload().get("target")
        if not target:
            return jsonify({"success": False, "error": "A target position is required"}), 400
        return _result_response(app_state.session.set_next_substitution(target))

    @app.route("/api/position-switch", methods=["POST"])
    def position_switch():
        if app_state.session is None:
            return _no_match()
        data = _payload()
        source = data.get("source_player_id")
        target = data.get("target_player_id")
        if not source or not target:
            return jsonify({"success": False, "error": "Both players are required"}), 400
        return _result_response(app_state.session.change_position(source, target))

    @app.route("/api/pairs/<pair_key>/swap-roles", methods=["POST"])
    def swap_pair_roles(pair_key: str):
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.swap_pair_roles(pair_key))

    @app.route("/api/goalie", methods=["POST"])
    def switch_goalie():
        if app_state.session is None:
            return _no_match()
        new_goalie_id = _payload().get("new_goalie_id")
        if not new_goalie_id:
            return jsonify({"success": False, "error": "new_goalie_id is required"}), 400
        return _result_response(app_state.session.switch_goalie(new_goalie_id))

    @app.route("/api/players/<player_id>/toggle-inactive", methods=["POST"])
    def toggle_inactive(player_id: str):
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.toggle_inactive(player_id))

    @app.route("/api/substitutes/<player_id>/next-in", methods=["POST"])
    def set_as_next_to_go_in(player_id: str):
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.set_as_next_to_go_in(player_id))

    @app.route("/api/undo", methods=["POST"])
    def undo_action():
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.undo_last_substitution())

    @app.route("/api/timer/pause", methods=["POST"])
    def pause_timer():
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.pause())

    @app.route("/api/timer/resume", methods=["POST"])
    def resume_timer():
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.resume())

    @app.route("/api/period/end", methods=["POST"])
    def end_period():
        if app_state.session is None:
            return _no_match()
        return _result_response(app_state.session.end_period())

    @app.route("/api/players/<player_id>/time-stats", methods=["GET"])
    def player_time_stats(player_id: str):
        if app_state.session is None:
            return _no_match()
        stats = app_state.session.player_time_stats(player_id)
        return jsonify({"success": True, "player_id": player_id, **stats.to_dict()})

    @app.route("/api/report", methods=["GET"])
    def rotation_report():
        if app_state.session is None:
            return _no_match()
        report = app_state.session.rotation_report()
        return jsonify({"success": True, "report": report.to_dict()})

    @app.route("/api/report/csv", methods=["GET"])
    def rotation_report_csv():
        if app_state.session is None:
            return _no_match()
        session = app_state.session
        try:
            csv_text = session.analytics_service.generate_report_csv(session.rotation_report())
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=rotation_report.csv"},
        )

    return app


def run_web_app(host: str = "127.0.0.1", port: int = 7122) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
    """
    app = create_app()
    logger.info("Serving %s on http://%s:%s", APP_TITLE, host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    run_web_app()
