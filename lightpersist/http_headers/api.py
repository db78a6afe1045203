"""
HTTP API routes for LightPersist
"""
from flask import Flask, request, jsonify

from ..config import COOKIE_NAME, CONFIGURATION_NAME, LIGHT_PERSIST_BACKEND
from ..extension import get_light_persist
from ..utils.jsonx import truthy_str
from ..utils.time import now_iso
from ..logger import get_logger

log = get_logger(__name__)

def create_api_routes(app: Flask):
    """Create all API routes for the Flask app"""

    @app.route("/api/health")
    def health():
        return jsonify({
            "ok": True,
            "at": now_iso(),
            "backend": LIGHT_PERSIST_BACKEND,
            "namespace": CONFIGURATION_NAME,
            "cookie": COOKIE_NAME,
        })

    @app.route("/api/persist", methods=["GET"])
    def read_all():
        """GET /api/persist - The whole visitor mapping"""
        store = get_light_persist()
        return jsonify({"id": store.identifier, "isNew": store.is_new, "content": store.get("*")})

    @app.route("/api/persist", methods=["DELETE"])
    def purge():
        """DELETE /api/persist - Forget this visitor"""
        store = get_light_persist()
        store.purge()
        return jsonify({"ok": True, "purged": store.identifier})

    @app.route("/api/persist/<key>", methods=["GET"])
    def read_key(key):
        store = get_light_persist()
        return jsonify({"key": key, "value": store.get(key), "exists": store.has(key)})

    @app.route("/api/persist/<key>", methods=["PUT", "POST"])
    def write_key(key):
        """PUT /api/persist/<key> - Body: {"value": ..., "reset": bool}"""
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "value" not in data:
            return jsonify({"error": "body must be a JSON object with a 'value' field"}), 400

        reset = truthy_str(data.get("reset"))
        if reset is None:
            reset = truthy_str(request.args.get("reset")) or False

        store = get_light_persist()
        store.set(key, data["value"], reset=reset)
        return jsonify({"key": key, "value": store.get(key)})

    @app.route("/api/persist/<key>", methods=["DELETE"])
    def delete_key(key):
        store = get_light_persist()
        existed = store.has(key)
        store.delete(key)
        return jsonify({"key": key, "deleted": existed})
