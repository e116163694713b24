"""Flask application factory."""
from flask import Flask, request, jsonify
from werkzeug.exceptions import HTTPException
from pharmapos.database import init_db
import os


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize Sentry for error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Prometheus request instrumentation
    from pharmapos.blueprints.metrics import setup_metrics_instrumentation
    setup_metrics_instrumentation(app)

    # Production: trust X-Forwarded-* from the reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=0)

    # Initialize database
    init_db(app)

    from pharmapos.middleware import load_operator

    @app.before_request
    def before_request_handler():
        """Load the operator context for each request."""
        load_operator()

    # Error Handlers
    from pharmapos.exceptions import PosError

    @app.errorhandler(PosError)
    def handle_pos_error(error):
        """Report engine errors verbatim so the screen can show a specific message."""
        if error.status_code >= 500:
            app.logger.error(f"PosError [{error.status_code}] {error.code}: {error.message}")
        else:
            app.logger.warning(f"PosError [{error.status_code}] {error.code}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        code = (error.name or 'error').upper().replace(' ', '_')
        return jsonify({'status': 'error', 'code': code, 'message': error.description}), error.code

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        app.logger.error(f"Unhandled Exception on {request.path}: {error}", exc_info=error)
        return jsonify({'status': 'error', 'code': 'INTERNAL_ERROR', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from pharmapos.blueprints.auth import auth_bp
    from pharmapos.blueprints.dashboard import dashboard_bp
    from pharmapos.blueprints.medicines import medicines_bp
    from pharmapos.blueprints.invoices import invoices_bp
    from pharmapos.blueprints.settings import settings_bp
    from pharmapos.blueprints.metrics import metrics_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(medicines_bp)
    app.register_blueprint(invoices_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(metrics_bp)

    # Register CLI commands
    from pharmapos.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
