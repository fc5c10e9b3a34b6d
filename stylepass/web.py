import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request

from stylepass.analyzer import analyze
from stylepass.config import load_config
from stylepass.generator import GenerationError
from stylepass.llm import OpenAIGenerator
from stylepass.ratelimit import RateLimiter
from stylepass.validation import ValidationError, parse_generation_request

logger = logging.getLogger(__name__)


def _error(message, status):
    return jsonify({"success": False, "error": message}), status


def _client_id():
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def create_app(generator=None, limiter=None, settings=None):
    settings = settings if settings is not None else load_config()
    generator = generator or OpenAIGenerator.from_settings(settings)
    limiter = limiter or RateLimiter(limit=int(settings.get("rate_limit_per_hour", 20)))

    app = Flask(__name__)

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return _error("Method Not Allowed", 405)

    @app.route('/')
    def home():
        return jsonify({
            "message": "StylePass API is running"
        })

    @app.route('/api/generate-passwords', methods=['POST', 'OPTIONS'])
    def generate_route():
        if request.method == 'OPTIONS':
            return "", 200

        data = request.get_json(silent=True) or {}
        try:
            req = parse_generation_request(data)
        except ValidationError as e:
            return _error(", ".join(e.errors), 400)

        client = _client_id()
        if not limiter.allow(client):
            logger.info("Rate limit hit for %s", client)
            return _error("Hourly request limit exceeded. Please try again later.", 429)

        try:
            candidates = generator.generate(req.style, req.length, req.requirements)
        except GenerationError as e:
            logger.exception("Password generation failed")
            return _error(str(e) or "Password generation failed", 500)

        return jsonify({
            "success": True,
            "passwords": [
                {
                    "password": c.password,
                    "explanation": c.explanation,
                    "strength": analyze(c.password).to_dict(),
                }
                for c in candidates
            ],
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    @app.route('/api/score', methods=['POST', 'OPTIONS'])
    def score_route():
        if request.method == 'OPTIONS':
            return "", 200
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        password = data.get('password', '')
        if not isinstance(password, str):
            return _error("password must be a string", 400)
        return jsonify(analyze(password).to_dict())

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
