from flask import Flask, jsonify
from .config import Config
from .extensions import cors
from .storage import StorageError


def create_app(config_class: type[Config] = Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    # Extensions
    cors.init_app(app)

    # Errors
    register_error_handlers(app)

    # Blueprints
    from .routes.collections_api import bp as collections_api
    from .routes.documents_api import bp as documents_api

    app.register_blueprint(collections_api)
    app.register_blueprint(documents_api)

    return app


def register_error_handlers(app):
    @app.errorhandler(StorageError)
    def handle_storage_error(e: StorageError):
        if e.status >= 500:
            app.logger.exception("Storage error: %s", e)
        return jsonify({"error": str(e)}), e.status
