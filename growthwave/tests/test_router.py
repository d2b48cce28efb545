import pytest

try:
    from growthwave.brands import HOSTNAME_BRANDS, PASSTHROUGH_PREFIXES
    from growthwave.router import (
        BRAND_ENVIRON_KEY,
        ORIGINAL_PATH_ENVIRON_KEY,
        PASS_THROUGH,
        REWRITE,
        BrandRewriteMiddleware,
        is_file_request,
        request_hostname,
        resolve_route,
    )
except ModuleNotFoundError:  # pragma: no cover - fallback for direct growthwave/ cwd test runs
    from brands import HOSTNAME_BRANDS, PASSTHROUGH_PREFIXES
    from router import (
        BRAND_ENVIRON_KEY,
        ORIGINAL_PATH_ENVIRON_KEY,
        PASS_THROUGH,
        REWRITE,
        BrandRewriteMiddleware,
        is_file_request,
        request_hostname,
        resolve_route,
    )

CAPITAL = 'growthwavecapital.com'
SAMPLE_PATHS = ['/', '/about', '/about/', '/logo.svg', '/contact/team', '/guide.pdf', '/capitalist']


@pytest.mark.parametrize(
    'host, path, query, expected',
    [
        (CAPITAL, '/', '', (REWRITE, '/capital/')),
        (CAPITAL, '/about', '', (REWRITE, '/capital/about/')),
        (CAPITAL, '/about/', '', (REWRITE, '/capital/about/')),
        (CAPITAL, '/logo.svg', '', (REWRITE, '/capital/logo.svg')),
        (CAPITAL, '/images/hero.jpg', '', (PASS_THROUGH, None)),
        (CAPITAL, '/capital/about', '', (PASS_THROUGH, None)),
        ('unknown-preview.example.dev', '/about', '', (PASS_THROUGH, None)),
        (CAPITAL, '/about', 'utm=x', (REWRITE, '/capital/about/?utm=x')),
    ],
)
def test_documented_routing_scenarios(host, path, query, expected):
    assert tuple(resolve_route(host, path, query)) == expected


def test_www_variants_map_to_the_same_brand():
    for host in ('growthwaveadvisors.com', 'www.growthwaveadvisors.com'):
        assert resolve_route(host, '/about').path == '/advisors/about/'
    assert resolve_route('www.growthwaveproperties.com', '/').path == '/properties/'


def test_passthrough_prefixes_win_for_every_host():
    hosts = list(HOSTNAME_BRANDS) + ['localhost', 'deploy-preview-12--site.netlify.app', '']
    for prefix in PASSTHROUGH_PREFIXES:
        for host in hosts:
            decision = resolve_route(host, f'{prefix}anything/here')
            assert decision.action == PASS_THROUGH


def test_unmapped_hosts_always_pass_through():
    for host in ('localhost', '127.0.0.1', 'GrowthWaveCapital.com', 'growthwavecapital.com.evil.test', None):
        for path in SAMPLE_PATHS:
            assert resolve_route(host, path, 'a=1').action == PASS_THROUGH


def test_already_prefixed_paths_pass_through():
    for host, brand in HOSTNAME_BRANDS.items():
        assert resolve_route(host, f'/{brand}').action == PASS_THROUGH
        assert resolve_route(host, f'/{brand}/').action == PASS_THROUGH
        assert resolve_route(host, f'/{brand}/contact').action == PASS_THROUGH


def test_brand_name_prefix_without_separator_is_still_rewritten():
    assert resolve_route(CAPITAL, '/capitalist').path == '/capital/capitalist/'


def test_other_brand_prefix_is_rewritten_under_host_brand():
    assert resolve_route(CAPITAL, '/advisors/about').path == '/capital/advisors/about/'


def test_rewrite_is_idempotent_on_its_own_output():
    for host, brand in HOSTNAME_BRANDS.items():
        for path in SAMPLE_PATHS:
            decision = resolve_route(host, path)
            assert decision.action == REWRITE
            assert decision.path.startswith(f'/{brand}/')
            assert resolve_route(host, decision.path).action == PASS_THROUGH


def test_query_string_is_preserved_byte_for_byte():
    query = 'utm_source=news%20letter&x=%C3%BC&&flag&y=a+b'
    assert resolve_route(CAPITAL, '/about', query).path == f'/capital/about/?{query}'
    assert resolve_route(CAPITAL, '/', query).path == f'/capital/?{query}'
    assert resolve_route(CAPITAL, '/logo.svg', query).path == f'/capital/logo.svg?{query}'


def test_file_requests_keep_their_slash_state():
    assert resolve_route(CAPITAL, '/docs/terms.pdf').path == '/capital/docs/terms.pdf'
    assert resolve_route(CAPITAL, '/fonts-extra/brand.woff2').path == '/capital/fonts-extra/brand.woff2'
    assert is_file_request('/sitemap.xml')
    assert not is_file_request('/about')
    assert not is_file_request('/report.pdf/')


def test_malformed_inputs_pass_through():
    for host, path in [(CAPITAL, None), (CAPITAL, ''), (CAPITAL, 'about'), (CAPITAL, 42), (None, '/about'), (42, '/about')]:
        assert resolve_route(host, path).action == PASS_THROUGH


def test_decision_space_is_pass_through_or_rewrite():
    hosts = list(HOSTNAME_BRANDS) + ['localhost']
    paths = SAMPLE_PATHS + ['/images/a.png', '/capital', '/.netlify/functions/ghl-submit']
    for host in hosts:
        for path in paths:
            assert resolve_route(host, path, 'q=1').action in {PASS_THROUGH, REWRITE}


def test_custom_tables_can_be_injected():
    decision = resolve_route(
        'example.org',
        '/assets/app.css',
        hostname_brands={'example.org': 'demo'},
        passthrough_prefixes=('/static/',),
        file_extensions=('.css',),
    )
    assert tuple(decision) == (REWRITE, '/demo/assets/app.css')


@pytest.mark.parametrize(
    'environ, expected',
    [
        ({'HTTP_HOST': 'growthwavecapital.com'}, 'growthwavecapital.com'),
        ({'HTTP_HOST': 'WWW.GrowthWaveCapital.com:443'}, 'www.growthwavecapital.com'),
        ({'HTTP_HOST': '[::1]:8080'}, '[::1]'),
        ({'SERVER_NAME': 'growthwaveadvisors.com'}, 'growthwaveadvisors.com'),
        ({}, ''),
    ],
)
def test_request_hostname_matches_url_parsing(environ, expected):
    assert request_hostname(environ) == expected


def _run_middleware(environ):
    seen = {}

    def downstream(env, start_response):
        seen.update(env)
        start_response('200 OK', [])
        return [b'ok']

    middleware = BrandRewriteMiddleware(downstream)
    body = middleware(environ, lambda status, headers: None)
    assert body == [b'ok']
    return seen


def test_middleware_rewrites_path_and_keeps_query():
    seen = _run_middleware({
        'HTTP_HOST': 'growthwavecapital.com',
        'PATH_INFO': '/about',
        'QUERY_STRING': 'utm=x',
        'REQUEST_URI': '/about?utm=x',
    })
    assert seen['PATH_INFO'] == '/capital/about/'
    assert seen['QUERY_STRING'] == 'utm=x'
    assert seen['REQUEST_URI'] == '/capital/about/?utm=x'
    assert seen[ORIGINAL_PATH_ENVIRON_KEY] == '/about'
    assert seen[BRAND_ENVIRON_KEY] == 'capital'


def test_middleware_leaves_unmapped_hosts_untouched():
    seen = _run_middleware({'HTTP_HOST': 'localhost:4321', 'PATH_INFO': '/about', 'QUERY_STRING': ''})
    assert seen['PATH_INFO'] == '/about'
    assert BRAND_ENVIRON_KEY not in seen


def test_middleware_leaves_passthrough_paths_untouched_on_brand_hosts():
    seen = _run_middleware({'HTTP_HOST': 'growthwaveproperties.com', 'PATH_INFO': '/_astro/client.js', 'QUERY_STRING': ''})
    assert seen['PATH_INFO'] == '/_astro/client.js'
    assert seen[BRAND_ENVIRON_KEY] == 'properties'


@pytest.mark.parametrize(
    'raw_path, path_info, rewritten, request_uri',
    [
        ('/faq%3Fx', '/faq?x', '/capital/faq?x/', '/capital/faq%3Fx/'),
        ('/guides/a%2Fb', '/guides/a/b', '/capital/guides/a/b/', '/capital/guides/a/b/'),
        ('/caf%C3%A9', '/caf\xc3\xa9', '/capital/caf\xc3\xa9/', '/capital/caf%C3%A9/'),
    ],
)
def test_middleware_handles_percent_decoded_paths(raw_path, path_info, rewritten, request_uri):
    seen = _run_middleware({
        'HTTP_HOST': 'growthwavecapital.com',
        'PATH_INFO': path_info,
        'QUERY_STRING': '',
        'REQUEST_URI': raw_path,
    })
    assert seen['PATH_INFO'] == rewritten
    assert seen['REQUEST_URI'] == request_uri


def test_middleware_strips_only_the_real_query_from_decoded_question_mark():
    seen = _run_middleware({
        'HTTP_HOST': 'growthwavecapital.com',
        'PATH_INFO': '/faq?x',
        'QUERY_STRING': 'utm=1',
        'RAW_URI': '/faq%3Fx?utm=1',
    })
    assert seen['PATH_INFO'] == '/capital/faq?x/'
    assert seen['QUERY_STRING'] == 'utm=1'
    assert seen['RAW_URI'] == '/capital/faq%3Fx/?utm=1'
