"""Flask viewer exposing a store's displayed events for live inspection."""

from flask import Flask, Response, jsonify, request

from eventlog.store import EventStore


def create_viewer_app(store: EventStore) -> Flask:
    app = Flask(__name__)

    @app.route("/health")
    def health():
        return jsonify(status="ok", store=store.name)

    @app.route("/events")
    def events():
        displayed = store.displayed_events
        return jsonify(
            events=[e.to_dict() for e in displayed],
            count=len(displayed),
            filter_tags=list(store.filter_tags),
        )

    @app.route("/export")
    def export():
        return Response(store.export_text, mimetype="text/plain")

    @app.route("/tags")
    def tags():
        return jsonify(available=list(store.tag_values()), active=list(store.filter_tags))

    @app.route("/filter", methods=["POST"])
    def set_filter():
        payload = request.get_json(silent=True) or {}
        if not isinstance(payload, dict):
            return jsonify(error="body must be a JSON object"), 400
        values = payload.get("tags") or []
        if not isinstance(values, list):
            return jsonify(error="'tags' must be a list"), 400
        store.set_filter_tags(str(v) for v in values)
        return jsonify(filter_tags=list(store.filter_tags))

    return app


def run_viewer(app: Flask, host: str, port: int):
    """Run the Flask app (intended for use in a daemon thread)."""
    app.run(host=host, port=port, use_reloader=False)
