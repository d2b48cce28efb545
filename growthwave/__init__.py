import os
import re
import secrets
import json
import logging
from flask import Flask, g, has_request_context, jsonify, request
from werkzeug.middleware.proxy_fix import ProxyFix

try:
    from .brands import BRAND_IDS, brand_for_host
    from .config import Config
    from .router import BRAND_ENVIRON_KEY, ORIGINAL_PATH_ENVIRON_KEY, BrandRewriteMiddleware, request_hostname
except ImportError:  # pragma: no cover - fallback when running from growthwave/ as script root
    from brands import BRAND_IDS, brand_for_host
    from config import Config
    from router import BRAND_ENVIRON_KEY, ORIGINAL_PATH_ENVIRON_KEY, BrandRewriteMiddleware, request_hostname

_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._:-]{8,80}$")
_sentry_initialized = False

LONG_CACHE_PREFIXES = ('/_astro/',)
SHARED_ASSET_PREFIXES = ('/images/', '/fonts/', '/favicon/')


class JsonLogFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'time': self.formatTime(record, self.datefmt),
        }
        if has_request_context():
            payload.update(
                {
                    'request_id': getattr(g, 'request_id', ''),
                    'method': request.method,
                    'path': visible_path(),
                    'brand': getattr(g, 'brand', None) or '',
                    'remote_ip': request.remote_addr,
                }
            )
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger('growthwave.router').setLevel(level)
    if not app.config.get('LOG_JSON', True):
        return
    formatter = JsonLogFormatter()
    for handler in app.logger.handlers:
        handler.setFormatter(formatter)


def visible_path():
    """The path as the visitor sees it, before any brand rewrite."""
    return request.environ.get(ORIGINAL_PATH_ENVIRON_KEY) or request.path


def init_sentry(app):
    global _sentry_initialized
    if _sentry_initialized:
        return

    dsn = (app.config.get('SENTRY_DSN') or '').strip()
    if not dsn:
        return

    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        traces_sample_rate = float(app.config.get('SENTRY_TRACES_SAMPLE_RATE') or 0.0)
        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=traces_sample_rate,
            environment=(app.config.get('SENTRY_ENVIRONMENT') or None),
        )
        _sentry_initialized = True
        app.logger.info('Sentry monitoring enabled.')
    except Exception:
        app.logger.exception('Failed to initialize Sentry monitoring.')


def create_app(config_overrides=None):
    app = Flask(__name__, static_folder=None)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    configure_logging(app)

    # The rewrite runs first; ProxyFix wraps it so the router sees the forwarded host.
    app.wsgi_app = BrandRewriteMiddleware(app.wsgi_app)
    if app.config.get('TRUST_PROXY_HEADERS'):
        # Only trust one proxy hop (the platform edge) when explicitly enabled.
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    init_sentry(app)

    @app.before_request
    def assign_request_id():
        incoming = (request.headers.get('X-Request-ID') or '').strip()
        if _REQUEST_ID_RE.match(incoming):
            g.request_id = incoming
        else:
            g.request_id = secrets.token_hex(16)

    @app.before_request
    def assign_brand():
        g.brand = request.environ.get(BRAND_ENVIRON_KEY) or brand_for_host(request_hostname(request.environ))

    @app.after_request
    def add_security_headers(response):
        response.headers['X-Request-ID'] = getattr(g, 'request_id', '')
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'strict-origin-when-cross-origin')
        response.headers.setdefault('Permissions-Policy', 'geolocation=(), microphone=(), camera=()')
        response.headers.setdefault('X-Permitted-Cross-Domain-Policies', 'none')
        if request.is_secure and app.config.get('HSTS_ENABLED', True):
            hsts_max_age = max(0, int(app.config.get('HSTS_MAX_AGE', 31536000)))
            hsts_parts = [f'max-age={hsts_max_age}']
            if app.config.get('HSTS_INCLUDE_SUBDOMAINS', True):
                hsts_parts.append('includeSubDomains')
            if app.config.get('HSTS_PRELOAD', False):
                hsts_parts.append('preload')
            response.headers.setdefault('Strict-Transport-Security', '; '.join(hsts_parts))

        # Hashed build assets never change; shared media changes rarely; HTML always revalidates.
        if response.status_code in (200, 304):
            if request.path.startswith(LONG_CACHE_PREFIXES):
                response.headers['Cache-Control'] = 'public, max-age=31536000, immutable'
            elif request.path.startswith(SHARED_ASSET_PREFIXES):
                response.headers['Cache-Control'] = 'public, max-age=604800'
        if response.content_type and response.content_type.startswith('text/html'):
            response.headers['Cache-Control'] = 'public, max-age=0, must-revalidate'
            # The same path serves different pages per domain.
            response.vary.add('Host')
        return response

    @app.errorhandler(404)
    def handle_not_found(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Not found'}), 404
        return site_routes.not_found_page()

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify({'error': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def handle_server_error(error):
        if request.path.startswith('/api/'):
            return jsonify({'error': 'Internal server error'}), 500
        return app.response_class('Internal server error', status=500, mimetype='text/plain')

    @app.get('/healthz')
    def healthz():
        return {'status': 'ok'}, 200

    @app.get('/readyz')
    def readyz():
        site_root = app.config.get('SITE_ROOT') or ''
        checks = {
            'site_root': any(
                os.path.isfile(os.path.join(site_root, brand, 'index.html')) for brand in BRAND_IDS
            ),
            'crm_configured': bool(app.config.get('GHL_API_TOKEN') and app.config.get('GHL_LOCATION_ID')),
        }
        all_ready = all(checks.values())
        if not all_ready:
            app.logger.warning(f'Readiness check failed: {checks}')
        return {'status': 'ready' if all_ready else 'degraded', 'checks': checks}, (200 if all_ready else 503)

    try:
        from .routes.main import main_bp
        from .routes import site as site_routes
    except ImportError:  # pragma: no cover - fallback for script-style execution
        from routes.main import main_bp
        from routes import site as site_routes
    app.register_blueprint(main_bp)
    app.register_blueprint(site_routes.site_bp)

    return app
