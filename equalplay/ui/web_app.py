"""
Web application module for the Equal Play Tracker.

This module contains the Flask web server that exposes the clock, roster, fairness and substitution services as JSON
API endpoints.
"""
import logging
import os
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..models import MatchState, Player
from ..services import ServiceFactory, parse_bulk_names
from ..services.ticker import TimerFactory
from ..utils.constants import APP_TITLE, DEFAULT_SAVE_FILE

logger = logging.getLogger(__name__)


class WebAppState:
    """
    State holder for the web application.

    Owns the MatchState, the services built over it and the clock ticker.
    When ``save_file`` is set, every mutating request is persisted there and
    a saved running match is caught up with the wall clock on startup.
    """

    def __init__(
        self,
        match_state: Optional[MatchState] = None,
        save_file: Optional[str] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.save_file = save_file
        self.service_factory = ServiceFactory(timer_factory=timer_factory)
        self.persistence_service = self.service_factory.get_persistence_service()

        if match_state is None:
            match_state = (
                self.persistence_service.load_or_new(save_file) if save_file else MatchState()
            )
        self._install(match_state)

    def _install(self, match_state: MatchState) -> None:
        """Build services over ``match_state`` and resume its clock if it was running."""
        self.match_state = match_state
        services = self.service_factory.create_complete_service_suite(match_state)
        self.clock_service = services["clock"]
        self.ticker = services["ticker"]
        self.roster_service = services["roster"]
        self.substitution_service = services["substitution"]
        self.fairness_service = services["fairness"]

        gap = self.clock_service.reconcile_on_resume()
        if gap:
            logger.info("Resumed running match %ss behind the wall clock", gap)
        if self.clock_service.is_running():
            self.ticker.start()

    def replace_state(self, match_state: MatchState) -> None:
        self.ticker.stop()
        self._install(match_state)

    def start_clock(self) -> None:
        self.clock_service.start()
        self.ticker.start()

    def pause_clock(self) -> None:
        self.ticker.stop()
        self.clock_service.pause()

    def persist(self) -> None:
        if not self.save_file:
            return
        try:
            self.persistence_service.save_match_to_file(self.match_state, self.save_file)
        except OSError as e:
            logger.warning("Could not save match to %s: %s", self.save_file, e)

    def shutdown(self) -> None:
        self.ticker.stop()
        self.persist()


def _player_list(players: List[Player]) -> List[dict]:
    return [p.to_dict() for p in players]


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def create_app(app_state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        app_state: State holder to serve; a fresh in-memory one by default

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    state = app_state or WebAppState()
    app.config["APP_STATE"] = state

    def _body() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    @app.after_request
    def _persist_mutations(response):
        if request.method != "GET" and request.path.startswith("/api/"):
            state.persist()
        return response

    @app.errorhandler(Exception)
    def _handle_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Unhandled error on %s", request.path)
        return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/")
    def index():
        return jsonify({"success": True, "app": APP_TITLE})

    # ==================== State ==================== #

    def _build_settings_data() -> dict:
        settings = state.match_state.settings
        return {
            "field_target": settings.field_target,
            "half_minutes": settings.half_minutes,
            "max_suggestions": settings.max_suggestions,
            "position_aware": settings.position_aware,
            "roster_sort": settings.roster_sort,
        }

    def _build_scoreboard_data() -> dict:
        board = state.match_state.scoreboard
        return {
            "home_name": board.home_name,
            "away_name": board.away_name,
            "home_score": board.home_score,
            "away_score": board.away_score,
        }

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Everything the match screen needs in one response."""
        stats = state.fairness_service.get_minutes_stats()
        players = state.roster_service.get_players()
        return jsonify({
            "success": True,
            "clock": state.clock_service.get_clock_status(),
            "players": _player_list(players),
            "on_field_count": sum(1 for p in players if p.on_field),
            "minutes_stats": stats.to_dict(),
            "fairness": state.fairness_service.get_fairness_rating(),
            "suggestions": [s.to_dict() for s in state.substitution_service.get_suggestions()],
            "staged": [s.to_dict() for s in state.substitution_service.get_staged()],
            "settings": _build_settings_data(),
            "custom_stats": [s.to_dict() for s in state.match_state.custom_stats],
            "scoreboard": _build_scoreboard_data(),
        })

    # ==================== Clock ==================== #

    @app.route("/api/clock/start", methods=["POST"])
    def start_clock():
        state.start_clock()
        return jsonify({"success": True, "clock": state.clock_service.get_clock_status()})

    @app.route("/api/clock/pause", methods=["POST"])
    def pause_clock():
        state.pause_clock()
        return jsonify({"success": True, "clock": state.clock_service.get_clock_status()})

    @app.route("/api/clock/toggle", methods=["POST"])
    def toggle_clock():
        if state.clock_service.is_running():
            state.pause_clock()
        else:
            state.start_clock()
        return jsonify({"success": True, "clock": state.clock_service.get_clock_status()})

    @app.route("/api/clock/resume", methods=["POST"])
    def resume_clock():
        """Called by a client returning from the background to catch up missed time."""
        applied = state.clock_service.reconcile_on_resume()
        return jsonify({
            "success": True,
            "applied_seconds": applied,
            "clock": state.clock_service.get_clock_status(),
        })

    @app.route("/api/clock/reset", methods=["POST"])
    def reset_clock():
        state.clock_service.reset_minutes()
        return jsonify({"success": True, "clock": state.clock_service.get_clock_status()})

    # ==================== Players ==================== #

    @app.route("/api/players", methods=["GET"])
    def get_players():
        order = request.args.get("sort")
        players = (
            state.roster_service.get_sorted_players(order)
            if order else state.roster_service.get_players()
        )
        return jsonify({"success": True, "players": _player_list(players)})

    @app.route("/api/players", methods=["POST"])
    def create_player():
        data = _body()
        added = state.roster_service.add_players_with_positions([data])
        if not added:
            return jsonify({
                "success": False,
                "error": "Player name is blank or already on the roster",
            }), 400
        return jsonify({"success": True, "player": added[0].to_dict()}), 201

    @app.route("/api/players/bulk", methods=["POST"])
    def create_players_bulk():
        """Add players from ``players`` entries, a ``names`` list or pasted ``text``."""
        data = _body()
        if data.get("players"):
            added = state.roster_service.add_players_with_positions(data["players"])
        elif data.get("names"):
            added = state.roster_service.add_players(data["names"])
        else:
            added = state.roster_service.add_players(parse_bulk_names(data.get("text", "")))
        return jsonify({"success": True, "added": _player_list(added)})

    @app.route("/api/players/<player_id>", methods=["DELETE"])
    def delete_player(player_id: str):
        if not state.roster_service.remove_player(player_id):
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/players/<player_id>/toggle", methods=["POST"])
    def toggle_player(player_id: str):
        """
        Toggle a player on/off.

        When the field is full the client must resend with
        ``confirm_swap: true`` to send off the longest-serving player.
        """
        if state.roster_service.get_player(player_id) is None:
            return jsonify({"success": False, "error": "Player not found"}), 404

        confirm_swap = bool(_body().get("confirm_swap", False))
        prompt: Dict[str, Any] = {}

        def confirm(player: Player, longest: Player) -> bool:
            prompt["swap_off"] = longest.to_dict()
            return confirm_swap

        changed = state.roster_service.toggle(player_id, confirm)
        if not changed and prompt:
            return jsonify({
                "success": False,
                "requires_confirmation": True,
                "swap_off": prompt["swap_off"],
                "error": "Field is full",
            }), 409
        return jsonify({"success": changed, "player": state.roster_service.get_player(player_id).to_dict()})

    @app.route("/api/players/<player_id>/stats", methods=["POST"])
    def update_player_stat(player_id: str):
        data = _body()
        stat_id = data.get("stat_id")
        delta = _parse_int(data.get("delta", 1))
        if not stat_id or delta is None:
            return jsonify({"success": False, "error": "stat_id and numeric delta required"}), 400
        if not state.roster_service.update_stat(player_id, stat_id, delta):
            return jsonify({"success": False, "error": "Player not found"}), 404
        return jsonify({"success": True, "player": state.roster_service.get_player(player_id).to_dict()})

    @app.route("/api/players/<player_id>/positions", methods=["POST"])
    def toggle_player_position(player_id: str):
        if not state.roster_service.toggle_position(player_id, _body().get("position")):
            return jsonify({"success": False, "error": "Unknown player or position"}), 400
        return jsonify({"success": True, "player": state.roster_service.get_player(player_id).to_dict()})

    @app.route("/api/players/bench-all", methods=["POST"])
    def bench_all():
        state.roster_service.bench_all()
        return jsonify({"success": True})

    @app.route("/api/players/reset-stats", methods=["POST"])
    def reset_stats():
        state.roster_service.reset_stats()
        return jsonify({"success": True})

    # ==================== Fairness & Suggestions ==================== #

    @app.route("/api/stats/minutes", methods=["GET"])
    def get_minutes_stats():
        stats = state.fairness_service.get_minutes_stats()
        return jsonify({
            "success": True,
            "minutes_stats": stats.to_dict(),
            "fairness": state.fairness_service.get_fairness_rating(),
        })

    @app.route("/api/suggestions", methods=["GET"])
    def get_suggestions():
        suggestions = state.substitution_service.get_suggestions(
            max_count=_parse_int(request.args.get("max")),
            position_aware=_parse_bool(request.args.get("position_aware")),
        )
        return jsonify({"success": True, "suggestions": [s.to_dict() for s in suggestions]})

    @app.route("/api/swap", methods=["POST"])
    def execute_swap():
        data = _body()
        off_id, on_id = data.get("off_id"), data.get("on_id")
        if not off_id or not on_id:
            return jsonify({"success": False, "error": "Both off_id and on_id required"}), 400
        changed = state.roster_service.execute_swap(off_id, on_id)
        return jsonify({"success": changed})

    # ==================== Staged substitutions ==================== #

    @app.route("/api/staged", methods=["GET"])
    def get_staged():
        return jsonify({
            "success": True,
            "staged": [s.to_dict() for s in state.substitution_service.get_staged()],
        })

    @app.route("/api/staged", methods=["POST"])
    def stage_substitution():
        data = _body()
        staged = state.substitution_service.stage(data.get("off_id", ""), data.get("on_id", ""))
        if staged is None:
            return jsonify({"success": False, "error": "Substitution cannot be staged"}), 400
        return jsonify({"success": True, "staged": staged.to_dict()}), 201

    @app.route("/api/staged", methods=["DELETE"])
    def clear_staged():
        state.substitution_service.clear_staged()
        return jsonify({"success": True})

    @app.route("/api/staged/<staged_id>", methods=["DELETE"])
    def unstage_substitution(staged_id: str):
        if not state.substitution_service.unstage(staged_id):
            return jsonify({"success": False, "error": "Staged substitution not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/staged/commit", methods=["POST"])
    def commit_staged():
        changed = state.substitution_service.commit_staged()
        return jsonify({"success": True, "changed": changed})

    # ==================== Settings ==================== #

    @app.route("/api/settings", methods=["GET"])
    def get_settings():
        return jsonify({"success": True, "settings": _build_settings_data()})

    @app.route("/api/settings", methods=["POST"])
    def update_settings():
        data = _body()
        state.roster_service.update_settings(
            field_target=data.get("field_target"),
            half_minutes=data.get("half_minutes"),
            max_suggestions=data.get("max_suggestions"),
            position_aware=data.get("position_aware"),
            roster_sort=data.get("roster_sort"),
        )
        return jsonify({"success": True, "settings": _build_settings_data()})

    @app.route("/api/custom-stats", methods=["GET"])
    def get_custom_stats():
        return jsonify({
            "success": True,
            "custom_stats": [s.to_dict() for s in state.match_state.custom_stats],
        })

    @app.route("/api/custom-stats", methods=["POST"])
    def add_custom_stat():
        data = _body()
        stat = state.roster_service.add_custom_stat(data.get("name", ""), data.get("icon", ""))
        if stat is None:
            return jsonify({"success": False, "error": "Stat name is blank or already exists"}), 400
        return jsonify({"success": True, "stat": stat.to_dict()}), 201

    @app.route("/api/custom-stats/<stat_id>", methods=["DELETE"])
    def remove_custom_stat(stat_id: str):
        if not state.roster_service.remove_custom_stat(stat_id):
            return jsonify({"success": False, "error": "Stat not found or protected"}), 400
        return jsonify({"success": True})

    @app.route("/api/custom-stats/<stat_id>/toggle", methods=["POST"])
    def toggle_custom_stat(stat_id: str):
        if not state.roster_service.toggle_stat_enabled(stat_id):
            return jsonify({"success": False, "error": "Stat not found"}), 404
        return jsonify({"success": True})

    @app.route("/api/scoreboard", methods=["POST"])
    def update_scoreboard():
        data = _body()
        state.roster_service.set_team_names(data.get("home_name"), data.get("away_name"))
        return jsonify({"success": True, "scoreboard": _build_scoreboard_data()})

    @app.route("/api/scoreboard/score", methods=["POST"])
    def adjust_score():
        data = _body()
        delta = _parse_int(data.get("delta", 1))
        if delta is None or not state.roster_service.adjust_score(data.get("side", ""), delta):
            return jsonify({"success": False, "error": "side must be home or away"}), 400
        return jsonify({"success": True, "scoreboard": _build_scoreboard_data()})

    # ==================== Reports & persistence ==================== #

    @app.route("/api/report", methods=["GET"])
    def get_report():
        report = state.fairness_service.generate_report()
        return jsonify({
            "success": True,
            "fairness": report.fairness,
            "minutes_stats": report.minutes_stats.to_dict(),
            "text": state.fairness_service.generate_report_text(report),
        })

    @app.route("/api/report/csv", methods=["GET"])
    def export_report_csv():
        return app.response_class(
            state.fairness_service.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=game_report.csv"},
        )

    @app.route("/api/save", methods=["POST"])
    def save_match():
        """Return the match as JSON for client-side saving."""
        return jsonify({"success": True, "data": state.match_state.to_json()})

    @app.route("/api/load", methods=["POST"])
    def load_match():
        """Replace the match with uploaded JSON."""
        match_data = _body().get("match_data")
        if not isinstance(match_data, dict):
            return jsonify({"success": False, "error": "No match data provided"}), 400
        try:
            loaded = MatchState.from_json(match_data)
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"success": False, "error": f"Invalid match data: {e}"}), 400
        state.replace_state(loaded)
        return jsonify({"success": True, "message": "Match loaded successfully"})

    return app


def run_web_app(
    host: str = "127.0.0.1",
    port: int = 7122,
    save_file: Optional[str] = None,
) -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default: localhost only)
        port: Port number to listen on
        save_file: JSON file the match is persisted to; defaults to
            ``$EQUALPLAY_SAVE_FILE`` or ``autosave/equalplay.json``
    """
    save_file = save_file or os.environ.get("EQUALPLAY_SAVE_FILE", DEFAULT_SAVE_FILE)
    app_state = WebAppState(save_file=save_file)
    app = create_app(app_state)
    try:
        app.run(host=host, port=port, debug=False)
    finally:
        app_state.shutdown()
