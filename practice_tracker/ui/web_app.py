"""
Web application module for the Practice Efficiency Tracker.

This module contains the Flask web server that serves the HTML interface
and provides JSON API endpoints for practice setup, live tracking and
reports. Every request and every background tick runs under one lock, so
the session sees a single logical thread of control.
"""
import logging
import os
import threading
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request, send_from_directory

from ..models import Phase
from ..services import ServiceFactory, SessionController
from ..utils import DRILL_TAGS, configure_logging
from ..utils.constants import (
    ACTION_LABELS, DEFAULT_HOST, DEFAULT_LOG_LEVEL, DEFAULT_PORT, ENV_HOST,
    ENV_LOG_LEVEL, ENV_PORT
)

logger = logging.getLogger(__name__)

TIMER_COMMANDS = ("start", "pause", "stop", "reset")
COUNTER_COMMANDS = ("increment", "decrement", "reset")


class WebAppState:
    """
    State holder for the web application.

    Owns the lock shared with the real-time scheduler and the one
    SessionController of this server.
    """

    def __init__(self, controller: Optional[SessionController] = None):
        self.lock = threading.RLock()
        self.service_factory = ServiceFactory()
        self.controller = controller or self.service_factory.create_realtime_controller(lock=self.lock)


def create_app(static_folder: str = ".", app_state: Optional[WebAppState] = None) -> Flask:
    """
    Create and configure the Flask application with API endpoints.

    Args:
        static_folder: Directory to serve static files from
        app_state: Optional pre-built state (tests inject a manual clock here)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__, static_folder=static_folder, static_url_path="")
    state = app_state or WebAppState()
    app.config["APP_STATE"] = state

    def _json_body() -> Dict[str, Any]:
        return request.get_json(silent=True) or {}

    def _command_result(ok: bool, message: str, error: str):
        if ok:
            with state.lock:
                live = state.controller.live_state()
            return jsonify({"success": True, "message": message, "live": live})
        logger.debug("Rejected command: %s", error)
        return jsonify({"success": False, "error": error}), 400

    @app.route("/")
    def index():
        """Serve the main HTML interface."""
        response = send_from_directory(static_folder, "index.html")
        response.headers['Cache-Control'] = 'no-cache, no-store, must-revalidate'
        return response

    # ==================== API Endpoints ==================== #

    @app.route("/api/state", methods=["GET"])
    def get_state():
        """Get the full session snapshot including live engine state."""
        try:
            with state.lock:
                return jsonify({"success": True, "session": state.controller.snapshot()})
        except Exception as e:
            logger.error(f"Error building state: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/vocabulary", methods=["GET"])
    def get_vocabulary():
        """Action labels and drill tags for the setup forms."""
        return jsonify({"success": True, "actions": ACTION_LABELS, "tags": DRILL_TAGS})

    @app.route("/api/practice-info", methods=["POST"])
    def update_practice_info():
        """Update practice metadata; a new drill count regenerates the drills."""
        try:
            data = _json_body()
            with state.lock:
                applied = state.controller.set_practice_info(**data)
                info = state.controller.practice_info.to_dict()
                drills = len(state.controller.session.drills)
            return jsonify({"success": True, "applied": applied, "practice_info": info, "drills": drills})
        except Exception as e:
            logger.error(f"Error updating practice info: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/phase/<direction>", methods=["POST"])
    def change_phase(direction: str):
        """Move to the next or previous phase."""
        if direction not in ("next", "previous"):
            return jsonify({"success": False, "error": f"Unknown direction '{direction}'"}), 404
        try:
            with state.lock:
                if direction == "next":
                    phase = state.controller.advance_phase()
                else:
                    phase = state.controller.retreat_phase()
            return jsonify({"success": True, "phase": phase.value})
        except Exception as e:
            logger.error(f"Error changing phase: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/drills/<int:drill_index>/tags", methods=["POST"])
    def update_tags(drill_index: int):
        data = _json_body()
        tags = data.get("tags", [])
        if not isinstance(tags, list):
            return jsonify({"success": False, "error": "tags must be a list"}), 400
        with state.lock:
            ok = state.controller.update_drill_tags(drill_index, tags)
        return _command_result(ok, "Tags updated", f"Unknown drill index {drill_index}")

    @app.route("/api/drills/<int:drill_index>/actions/<action_id>/toggle", methods=["POST"])
    def toggle_action(drill_index: int, action_id: str):
        with state.lock:
            ok = state.controller.toggle_action_button(drill_index, action_id)
        return _command_result(ok, f"Toggled {action_id}", f"Cannot toggle '{action_id}' on drill {drill_index}")

    @app.route("/api/drills/<int:drill_index>/actions/reorder", methods=["POST"])
    def reorder_actions(drill_index: int):
        """Reorder by positions (``from``/``to``) or by ids (``action_id``/``over_id``)."""
        data = _json_body()
        with state.lock:
            if "action_id" in data:
                ok = state.controller.move_action_button(
                    drill_index, data.get("action_id"), data.get("over_id")
                )
            else:
                try:
                    from_pos = int(data.get("from"))
                    to_pos = int(data.get("to"))
                except (TypeError, ValueError):
                    return jsonify({"success": False, "error": "from/to must be integers"}), 400
                ok = state.controller.reorder_action_buttons(drill_index, from_pos, to_pos)
        return _command_result(ok, "Actions reordered", "Invalid reorder request")

    @app.route("/api/drills/current", methods=["POST"])
    def set_current_drill():
        data = _json_body()
        try:
            index = int(data.get("index"))
        except (TypeError, ValueError):
            return jsonify({"success": False, "error": "index must be an integer"}), 400
        with state.lock:
            ok = state.controller.set_current_drill_index(index)
        return _command_result(ok, f"Drill index {index}", f"Unknown drill index {index}")

    @app.route("/api/timers/<action_id>/<command>", methods=["POST"])
    def timer_command(action_id: str, command: str):
        """Start, pause, stop or reset a timer of the current drill."""
        if command not in TIMER_COMMANDS:
            return jsonify({"success": False, "error": f"Unknown timer command '{command}'"}), 404
        with state.lock:
            if state.controller.phase != Phase.TIME_WATCHER:
                return jsonify({"success": False, "error": "Tracking is not active"}), 400
            ok = getattr(state.controller, f"{command}_timer")(action_id)
        return _command_result(ok, f"Timer {action_id} {command}", f"Cannot {command} timer '{action_id}'")

    @app.route("/api/counters/<action_id>/<command>", methods=["POST"])
    def counter_command(action_id: str, command: str):
        """Increment, decrement or reset a counter of the current drill."""
        if command not in COUNTER_COMMANDS:
            return jsonify({"success": False, "error": f"Unknown counter command '{command}'"}), 404
        with state.lock:
            if state.controller.phase != Phase.TIME_WATCHER:
                return jsonify({"success": False, "error": "Tracking is not active"}), 400
            ok = getattr(state.controller, f"{command}_counter")(action_id)
        return _command_result(ok, f"Counter {action_id} {command}", f"Cannot {command} counter '{action_id}'")

    @app.route("/api/waste-tracking", methods=["POST"])
    def arm_waste_tracking():
        data = _json_body()
        armed = data.get("armed", True)
        if not isinstance(armed, bool):
            return jsonify({"success": False, "error": "armed must be a boolean"}), 400
        with state.lock:
            state.controller.arm_waste_tracking(armed)
        return _command_result(True, "Waste tracking armed" if armed else "Waste tracking disarmed", "")

    @app.route("/api/waste-time/reset", methods=["POST"])
    def reset_waste_time():
        with state.lock:
            ok = state.controller.reset_waste_time()
        return _command_result(ok, "Waste time reset", "Tracking is not active")

    @app.route("/api/tracking/finish", methods=["POST"])
    def finish_tracking():
        with state.lock:
            state.controller.finish_tracking()
        return _command_result(True, "Tracking finished", "")

    @app.route("/api/session/reset", methods=["POST"])
    def reset_session():
        with state.lock:
            state.controller.reset_session()
        return jsonify({"success": True, "message": "Session reset"})

    @app.route("/api/report", methods=["GET"])
    def get_report():
        """Get the aggregated practice report."""
        try:
            with state.lock:
                report = state.controller.build_report()
            return jsonify({"success": True, "report": report.to_dict()})
        except Exception as e:
            logger.error(f"Error building report: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    @app.route("/api/report/export", methods=["GET"])
    def export_report():
        """Export the practice report as CSV."""
        try:
            with state.lock:
                report = state.controller.build_report()
                csv_content = state.controller.report_service.export_report_csv(report)
            return Response(
                csv_content,
                mimetype="text/csv",
                headers={
                    "Content-Disposition": f"attachment; filename=practice_report_{report.generated_ts}.csv"
                },
            )
        except ValueError as e:
            return jsonify({"success": False, "error": str(e)}), 400
        except Exception as e:
            logger.error(f"Error exporting report: {e}")
            return jsonify({"success": False, "error": str(e)}), 500

    return app


def run_web_app(host: Optional[str] = None, port: Optional[int] = None, static_folder: str = ".") -> None:
    """
    Run the web application.

    Args:
        host: Host address to bind to (default from environment, then localhost)
        port: Port number to listen on (default from environment, then 7122)
        static_folder: Directory containing static files (HTML, CSS, JS)
    """
    configure_logging(os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL))
    host = host or os.environ.get(ENV_HOST, DEFAULT_HOST)
    port = int(port or os.environ.get(ENV_PORT, DEFAULT_PORT))
    app = create_app(static_folder)
    logger.info("Serving practice tracker on %s:%s", host, port)
    app.run(host=host, port=port, debug=False)


if __name__ == "__main__":
    # Default to serving files from the project root when run directly
    project_root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    run_web_app(static_folder=project_root)
