import pytest

try:
    from growthwave import create_app
except ModuleNotFoundError:  # pragma: no cover - fallback for direct growthwave/ cwd test runs
    from __init__ import create_app

SITE_FILES = {
    'index.html': '<html><body>GrowthWave hub</body></html>',
    '404.html': '<html><body>Lost at sea</body></html>',
    'advisors/index.html': '<html><body>Advisors home</body></html>',
    'capital/index.html': '<html><body>Capital home</body></html>',
    'capital/about/index.html': '<html><body>Capital about</body></html>',
    'capital/faq?x/index.html': '<html><body>Capital odd faq</body></html>',
    'capital/guides/a/b/index.html': '<html><body>Capital nested guide</body></html>',
    'capital/caf\u00e9/index.html': '<html><body>Capital cafe</body></html>',
    'capital/logo.svg': '<svg xmlns="http://www.w3.org/2000/svg"></svg>',
    'properties/index.html': '<html><body>Properties home</body></html>',
    'images/hero.jpg': 'jpeg-bytes',
    '_astro/client.Ab12Cd.js': 'console.log("island")',
}


def build_site_root(tmp_path):
    root = tmp_path / 'dist'
    for relative, content in SITE_FILES.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding='utf-8')
    return root


def build_test_app(tmp_path, overrides=None):
    config = {
        'TESTING': True,
        'SITE_ROOT': str(build_site_root(tmp_path)),
        'TRUST_PROXY_HEADERS': False,
        'GHL_API_BASE': 'https://crm.test',
        'GHL_API_TOKEN': 'test-token',
        'GHL_LOCATION_ID': 'loc-123',
        'TURNSTILE_SITE_KEY': '',
        'TURNSTILE_SECRET_KEY': '',
        'SENTRY_DSN': '',
        'LOG_JSON': False,
    }
    if overrides:
        config.update(overrides)
    return create_app(config)


@pytest.fixture()
def app(tmp_path):
    return build_test_app(tmp_path)


@pytest.fixture()
def client(app):
    return app.test_client()
