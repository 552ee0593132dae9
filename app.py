import logging

from flask import Flask, jsonify, make_response, request

from routes import register_blueprints


def create_app(config_object='config.Config'):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # CORS preflight for any path, matched or not
    @app.before_request
    def handle_preflight():
        if request.method == 'OPTIONS':
            return make_response('', 200)

    @app.after_request
    def add_cors_headers(response):
        response.headers['Access-Control-Allow-Origin'] = app.config.get('CORS_ALLOW_ORIGIN', '*')
        response.headers['Access-Control-Allow-Methods'] = 'GET, POST, OPTIONS'
        response.headers['Access-Control-Allow-Headers'] = 'Content-Type'
        return response

    @app.errorhandler(404)
    def not_found(error):
        return make_response('Not Found', 404)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return make_response('Method not allowed', 405)

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error', 'message': str(error)}), 500

    # Register blueprints
    register_blueprints(app)

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=5005, debug=True)
