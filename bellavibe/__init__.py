"""Flask application factory."""
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from bellavibe.database import init_db
import logging
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    logging.getLogger('bellavibe').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize Sentry for error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Setup Prometheus metrics instrumentation
    from bellavibe.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: Enable ProxyFix behind a reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    # Initialize database
    init_db(app)

    # Shared cart, one per process
    from bellavibe.services.cart_service import CartStore
    CartStore(app)

    # Error Handlers
    from bellavibe.exceptions import ApiError

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"ApiError [{error.status_code}] {error.code}: {error.message}")
        else:
            app.logger.info(f"ApiError [{error.status_code}] {error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.description, 'code': error.name.upper().replace(' ', '_')}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error', 'code': 'INTERNAL_ERROR'}), 500

    # Register blueprints
    from bellavibe.blueprints.main import main_bp
    from bellavibe.blueprints.users import users_bp
    from bellavibe.blueprints.catalog import catalog_bp
    from bellavibe.blueprints.categories import categories_bp
    from bellavibe.blueprints.sales import sales_bp
    from bellavibe.blueprints.metrics import metrics_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from bellavibe.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"Checkout timeout: {app.config.get('CHECKOUT_TIMEOUT_MS')}ms")

    return app
