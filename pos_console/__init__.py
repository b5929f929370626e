"""Flask application factory."""
from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
import logging
import os


def create_app(config_object='config.Config', backoffice_client=None):
    """
    Create and configure the Flask application.

    Args:
        config_object: Import path (or class) of the configuration
        backoffice_client: Client to use instead of one built from config (tests)
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    _configure_logging(app)

    # Initialize Sentry for error tracking in production
    if app.config.get('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=app.config.get('ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Production: Enable ProxyFix for HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Back-office client and per-session terminals
    from pos_console.services.backoffice_client import BackofficeClient
    from pos_console.services.terminal_service import TerminalRegistry

    client = backoffice_client or BackofficeClient.from_config(app.config)
    app.extensions['backoffice_client'] = client
    app.extensions['pos_terminals'] = TerminalRegistry(
        client,
        branch_id=app.config.get('POS_BRANCH_ID', 1),
        idle_ttl=app.permanent_session_lifetime.total_seconds(),
        max_terminals=app.config.get('POS_MAX_TERMINALS', 500)
    )

    # Prometheus metrics instrumentation
    from pos_console.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Error Handlers
    from pos_console.exceptions import PosError

    @app.errorhandler(PosError)
    def handle_pos_error(error):
        """Handle custom application exceptions."""
        if error.status_code >= 500:
            app.logger.error(f"PosError [{error.status_code}]: {error.message}")
        else:
            app.logger.warning(f"PosError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'status': 'error', 'message': error.description or error.name}), error.code

    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception on {request.method} {request.path}: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from pos_console.blueprints.pos import pos_bp
    from pos_console.blueprints.metrics import metrics_bp

    app.register_blueprint(pos_bp)
    app.register_blueprint(metrics_bp)

    app.logger.info(f"BACKOFFICE_API_URL={app.config.get('BACKOFFICE_API_URL')}")
    app.logger.info(f"POS_BRANCH_ID={app.config.get('POS_BRANCH_ID')}")

    return app


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')), logging.INFO)
    package_logger = logging.getLogger('pos_console')
    package_logger.setLevel(level)
    if not logging.getLogger().handlers and not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
        package_logger.addHandler(handler)
    app.logger.setLevel(level)
