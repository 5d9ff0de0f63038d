#!/usr/bin/env python3
"""
eduportal - Assignments, Quizzes and Scores
===========================================
Run: python3 -m eduportal.app
Then point the frontend at: http://localhost:3000/api
"""
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .auth import init_auth
from .config import HOST, PORT, DEBUG, LOG_LEVEL
from .routes import register_routes


def create_app():
    """Build the Flask app: CORS, auth hook, then blueprints."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    CORS(app)

    init_auth(app)
    register_routes(app)

    @app.route('/api/status')
    def status():
        return jsonify({"status": "ok"})

    return app


app = create_app()


if __name__ == '__main__':
    app.run(host=HOST, port=PORT, debug=DEBUG)
