# --- academy/__init__.py ---
import logging

from flask import Flask, jsonify
from .extensions import db, jwt, cors, migrate
from .config import Config
from .utils.api import api_ok


def create_app(config_class=Config):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    config_class.init_app(app)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})
    migrate.init_app(app, db)

    from .utils.errors import register_error_handlers, register_jwt_handlers
    register_error_handlers(app)
    register_jwt_handlers(jwt)

    # Register blueprints
    from .cart import bp as cart_bp; app.register_blueprint(cart_bp)
    from .coupon import bp as coupon_bp; app.register_blueprint(coupon_bp)
    from .order import bp as order_bp; app.register_blueprint(order_bp)
    from .enrollment import bp as enrollment_bp; app.register_blueprint(enrollment_bp)

    from .cli import register_cli
    register_cli(app)

    @app.get("/")
    def health():
        return jsonify(api_ok("API running"))

    return app
