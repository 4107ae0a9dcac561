"""Flask application factory."""
import logging
import os
from flask import Flask, jsonify
from discounts.database import init_db


def create_app(config_object='config.Config'):
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Service modules log under the package logger
    log_level = app.config.get('LOG_LEVEL', 'INFO')
    app.logger.setLevel(log_level)
    logging.getLogger('discounts').setLevel(log_level)

    # Initialize Sentry for error tracking in production
    if os.getenv('SENTRY_DSN') and app.config.get('ENV') == 'production':
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=os.getenv('SENTRY_DSN'),
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,
            environment=app.config.get('ENV'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Initialize database
    init_db(app, create_tables=app.config.get('DB_CREATE_TABLES', False))

    # Error Handlers
    from discounts.exceptions import DiscountsError

    @app.errorhandler(DiscountsError)
    def handle_discounts_error(error):
        """Handle custom application exceptions."""
        app.logger.warning(f"DiscountsError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(405)
    def method_not_allowed_error(error):
        return jsonify({'status': 'error', 'message': 'Method Not Allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        app.logger.exception(f"Unhandled Exception: {error}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from discounts.blueprints.adjustments import adjustments_bp
    app.register_blueprint(adjustments_bp)

    # Register CLI commands
    from discounts.cli_commands import init_cli_commands
    init_cli_commands(app)

    return app
