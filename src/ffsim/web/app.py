"""Flask application factory for the ff-sim web API.

The ``create_app`` function builds a simulator and returns a Flask app
with four endpoints:

- ``GET /api/snapshot`` — blocks, active processes, and the wait queue.
- ``POST /api/allocate`` — allocate ``{"size": N}`` for a new process.
- ``POST /api/free`` — free ``{"pid": N}``.
- ``GET /api/log`` — the simulator event log.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from flask import Flask, Response, jsonify, request

from ffsim.config import SimulatorConfig
from ffsim.errors import CapacityExceededError, InvalidRequestError, ProcessNotFoundError
from ffsim.simulator import Simulator

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409

DEFAULT_BLOCK_SIZES = (100, 500, 200, 300, 600)


def _int_field(data: Any, name: str) -> int | None:
    """Return ``data[name]`` if it is an integer, else None."""
    if not isinstance(data, dict):
        return None
    value = data.get(name)
    if not isinstance(value, int) or isinstance(value, bool):
        return None
    return value


def create_app(config: SimulatorConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Simulator settings; a five-block demo layout if omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    simulator = Simulator(config or SimulatorConfig(block_sizes=DEFAULT_BLOCK_SIZES))

    app = Flask(__name__)

    @app.route("/api/snapshot")
    def snapshot() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the current simulator state."""
        snap = simulator.snapshot()
        return jsonify(
            {
                "blocks": [asdict(b) for b in snap.blocks],
                "active_processes": [
                    {"id": p.id, "address": p.address, "size": p.size}
                    for p in snap.active_processes
                ],
                "waiting": [asdict(w) for w in snap.waiting],
                "total_size": snap.total_size,
                "total_free": snap.total_free,
                "largest_free": snap.largest_free,
            }
        )

    @app.route("/api/allocate", methods=["POST"])
    def allocate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Allocate memory for a new process.

        Expects JSON body: ``{"size": N}``

        """
        size = _int_field(request.get_json(silent=True), "size")
        if size is None:
            return jsonify({"error": "Missing or invalid 'size' field"}), _HTTP_BAD_REQUEST

        try:
            result = simulator.allocate(size)
        except InvalidRequestError as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST
        except CapacityExceededError as e:
            return jsonify({"error": str(e)}), _HTTP_CONFLICT

        return jsonify(
            {"pid": result.process_id, "address": result.address, "queued": result.queued}
        )

    @app.route("/api/free", methods=["POST"])
    def free() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Free a process's memory.

        Expects JSON body: ``{"pid": N}``

        """
        pid = _int_field(request.get_json(silent=True), "pid")
        if pid is None:
            return jsonify({"error": "Missing or invalid 'pid' field"}), _HTTP_BAD_REQUEST

        try:
            promoted = simulator.free(pid)
        except ProcessNotFoundError as e:
            return jsonify({"error": str(e)}), _HTTP_NOT_FOUND

        return jsonify(
            {"freed": pid, "promoted": [{"pid": r.process_id, "address": r.address} for r in promoted]}
        )

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the event log as a list of strings."""
        return jsonify({"entries": [str(e) for e in simulator.logger.entries]})

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``ff-sim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
