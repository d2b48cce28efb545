import os

basedir = os.path.abspath(os.path.dirname(__file__))


def _is_vercel_runtime():
    return bool(os.environ.get('VERCEL') or os.environ.get('VERCEL_ENV'))


def _is_managed_runtime():
    return bool(
        os.environ.get('NETLIFY')
        or os.environ.get('RENDER')
        or os.environ.get('RENDER_SERVICE_ID')
        or os.environ.get('RAILWAY_ENVIRONMENT')
        or _is_vercel_runtime()
    )


def _as_bool(value, default=False):
    if value is None:
        return default
    return str(value).strip().lower() in {'1', 'true', 'yes', 'on'}


def _as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_float(value, default):
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _site_root():
    raw = (os.environ.get('SITE_ROOT') or '').strip()
    if raw:
        return os.path.abspath(raw)
    return os.path.join(os.path.dirname(basedir), 'dist')


class Config:
    SITE_ROOT = _site_root()
    TRUST_PROXY_HEADERS = _as_bool(os.environ.get('TRUST_PROXY_HEADERS'), _is_managed_runtime())
    HSTS_ENABLED = _as_bool(os.environ.get('HSTS_ENABLED'), True)
    HSTS_MAX_AGE = _as_int(os.environ.get('HSTS_MAX_AGE'), 31536000)
    HSTS_INCLUDE_SUBDOMAINS = _as_bool(os.environ.get('HSTS_INCLUDE_SUBDOMAINS'), True)
    HSTS_PRELOAD = _as_bool(os.environ.get('HSTS_PRELOAD'), False)

    GHL_API_BASE = (os.environ.get('GHL_API_BASE') or 'https://services.leadconnectorhq.com').rstrip('/')
    GHL_API_VERSION = (os.environ.get('GHL_API_VERSION') or '2021-07-28').strip()
    GHL_API_TOKEN = (os.environ.get('GHL_API_TOKEN') or '').strip()
    GHL_LOCATION_ID = (os.environ.get('GHL_LOCATION_ID') or '').strip()
    CRM_TIMEOUT_SECONDS = max(1, _as_int(os.environ.get('CRM_TIMEOUT_SECONDS'), 15))

    TURNSTILE_SITE_KEY = (os.environ.get('TURNSTILE_SITE_KEY') or '').strip()
    TURNSTILE_SECRET_KEY = (os.environ.get('TURNSTILE_SECRET_KEY') or '').strip()
    TURNSTILE_ENFORCED = _as_bool(os.environ.get('TURNSTILE_ENFORCED'), True)

    SENTRY_DSN = (os.environ.get('SENTRY_DSN') or '').strip()
    SENTRY_ENVIRONMENT = (os.environ.get('SENTRY_ENVIRONMENT') or '').strip()
    SENTRY_TRACES_SAMPLE_RATE = _as_float(os.environ.get('SENTRY_TRACES_SAMPLE_RATE'), 0.0)
    LOG_JSON = _as_bool(os.environ.get('LOG_JSON'), True)
    LOG_LEVEL = (os.environ.get('LOG_LEVEL') or 'INFO').strip().upper()
