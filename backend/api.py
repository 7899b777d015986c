from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import logging
import math
import sys
import os

parent_dir = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, parent_dir)

from parsnip import config
from parsnip.measurements import RENDERERS
from parsnip.plugins import enabled_plugins, load_plugin_configs
from parsnip.preferences import PreferencesStore
from parsnip.units import UNIT_SYSTEMS, convert

logger = logging.getLogger(__name__)


def json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(preferences_path=None, plugins_path=None):
    app = Flask(__name__)
    CORS(app)

    store = PreferencesStore(preferences_path or config.preferences_path())
    plugins_file = plugins_path or config.plugins_path()

    def resolve_system(data):
        system = data.get("system") or store.load().system
        if system not in UNIT_SYSTEMS:
            raise ValueError(
                f"Invalid system: {system}. Choose one of: {', '.join(UNIT_SYSTEMS)}"
            )
        return system

    @app.errorhandler(ValueError)
    def bad_request(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return e
        logger.exception("Request failed")
        return jsonify({"error": str(e)}), 500

    @app.route("/api/convert", methods=["POST"])
    def convert_measurement():
        data = json_body()
        kind = data.get("kind")
        value = data.get("value")

        if not kind:
            return jsonify({"error": "Measurement kind is required"}), 400

        if value is None:
            return jsonify({"error": "Value is required"}), 400

        if isinstance(value, bool):
            return jsonify({"error": f"Value must be a number, got {value!r}"}), 400

        if not isinstance(value, (int, float)):
            try:
                value = float(value)
            except (TypeError, ValueError):
                return jsonify({"error": f"Value must be a number, got {value!r}"}), 400

        measurement = convert(kind, value, resolve_system(data))
        result = measurement.to_dict()
        # JSON has no NaN/Infinity; the formatted text still says so
        if not math.isfinite(measurement.value):
            result["value"] = None
        return jsonify(result)

    @app.route("/api/render", methods=["POST"])
    def render():
        data = json_body()
        markup = data.get("markup")
        output_format = data.get("format", "text")

        if not isinstance(markup, str) or not markup:
            return jsonify({"error": "Markup is required"}), 400

        if not isinstance(output_format, str) or output_format not in RENDERERS:
            return jsonify({"error": "Invalid format"}), 400

        system = resolve_system(data)
        return jsonify(
            {
                "rendered": RENDERERS[output_format](markup, system),
                "system": system,
                "format": output_format,
            }
        )

    @app.route("/api/preferences", methods=["GET"])
    def get_preferences():
        return jsonify(store.load().describe())

    @app.route("/api/preferences", methods=["POST"])
    def update_preferences():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Preferences must be a JSON object"}), 400

        preferences = store.update(**data)
        return jsonify(preferences.describe())

    @app.route("/api/plugins", methods=["GET"])
    def plugins():
        configs = enabled_plugins(load_plugin_configs(plugins_file))
        return jsonify({"plugins": [c.to_dict() for c in configs]})

    @app.route("/api/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    config.configure_logging()
    app = create_app()
    app.run(**config.server_options())
