"""Hostname based brand routing.

Every brand site is built into its own subdirectory of one static output
(``/advisors/``, ``/capital/``, ``/properties/``). Requests on a brand's own
domain are rewritten internally into that subdirectory so visitors only ever
see clean URLs such as ``https://growthwavecapital.com/about``. The rewrite
never becomes a redirect: the client-visible URL stays as requested.

Page requests are rewritten with a trailing slash because the build emits
``/capital/about/index.html``; asking the static server for ``/capital/about``
would make it redirect to ``/capital/about/`` and leak the internal prefix.
"""
import logging
from collections import namedtuple
from urllib.parse import quote

try:
    from .brands import FILE_EXTENSIONS, HOSTNAME_BRANDS, PASSTHROUGH_PREFIXES
except ImportError:  # pragma: no cover - fallback when running from growthwave/ cwd
    from brands import FILE_EXTENSIONS, HOSTNAME_BRANDS, PASSTHROUGH_PREFIXES

PASS_THROUGH = 'pass_through'
REWRITE = 'rewrite'

ORIGINAL_PATH_ENVIRON_KEY = 'growthwave.original_path'
BRAND_ENVIRON_KEY = 'growthwave.brand'

logger = logging.getLogger(__name__)


class RouteDecision(namedtuple('RouteDecision', ['action', 'path'])):
    __slots__ = ()

    @property
    def is_rewrite(self):
        return self.action == REWRITE


_PASS = RouteDecision(PASS_THROUGH, None)


def is_file_request(path, file_extensions=FILE_EXTENSIONS):
    return path.endswith(tuple(file_extensions))


def resolve_route(
    hostname,
    path,
    query_string='',
    hostname_brands=HOSTNAME_BRANDS,
    passthrough_prefixes=PASSTHROUGH_PREFIXES,
    file_extensions=FILE_EXTENSIONS,
):
    """Decide whether a request passes through or is rewritten to a brand path.

    Returns a ``RouteDecision``. For rewrites ``path`` carries the internal
    target with the original query string appended verbatim.
    """
    if not isinstance(path, str) or not path.startswith('/'):
        return _PASS

    if path.startswith(tuple(passthrough_prefixes)):
        return _PASS

    if not isinstance(hostname, str) or not hostname:
        return _PASS
    brand = hostname_brands.get(hostname)
    if not brand:
        return _PASS

    if path == f'/{brand}' or path.startswith(f'/{brand}/'):
        return _PASS

    if path == '/':
        target = f'/{brand}/'
    elif is_file_request(path, file_extensions) or path.endswith('/'):
        target = f'/{brand}{path}'
    else:
        target = f'/{brand}{path}/'

    if query_string:
        target = f'{target}?{query_string}'
    return RouteDecision(REWRITE, target)


def request_hostname(environ):
    """Hostname as a URL parser reports it: no port, lowercase."""
    raw = (environ.get('HTTP_HOST') or environ.get('SERVER_NAME') or '').strip()
    if raw.startswith('['):
        end = raw.find(']')
        raw = raw[:end + 1] if end != -1 else raw
    else:
        raw = raw.split(':', 1)[0]
    return raw.lower()


class BrandRewriteMiddleware:
    """WSGI middleware applying :func:`resolve_route` before the app dispatches.

    Only ``PATH_INFO`` changes on a rewrite; the query string is left as sent.
    The visible path and resolved brand are kept in the environ for logging
    and templates.
    """

    def __init__(
        self,
        wsgi_app,
        hostname_brands=HOSTNAME_BRANDS,
        passthrough_prefixes=PASSTHROUGH_PREFIXES,
        file_extensions=FILE_EXTENSIONS,
    ):
        self.wsgi_app = wsgi_app
        self.hostname_brands = hostname_brands
        self.passthrough_prefixes = tuple(passthrough_prefixes)
        self.file_extensions = tuple(file_extensions)

    def __call__(self, environ, start_response):
        hostname = request_hostname(environ)
        path = environ.get('PATH_INFO') or '/'
        query_string = environ.get('QUERY_STRING', '')
        decision = resolve_route(
            hostname,
            path,
            query_string,
            hostname_brands=self.hostname_brands,
            passthrough_prefixes=self.passthrough_prefixes,
            file_extensions=self.file_extensions,
        )
        environ[ORIGINAL_PATH_ENVIRON_KEY] = path
        brand = self.hostname_brands.get(hostname) if hostname else None
        if brand:
            environ[BRAND_ENVIRON_KEY] = brand

        if decision.is_rewrite:
            # PATH_INFO is decoded and may hold a literal "?"; strip only the appended query.
            new_path = decision.path
            if query_string:
                new_path = new_path[:-(len(query_string) + 1)]
            environ['PATH_INFO'] = new_path
            raw_uri = quote(new_path.encode('latin-1', 'replace'))
            if query_string:
                raw_uri = f'{raw_uri}?{query_string}'
            for key in ('REQUEST_URI', 'RAW_URI'):
                if key in environ:
                    environ[key] = raw_uri
            logger.debug('Rewrote %s%s to %s', hostname, path, new_path)

        return self.wsgi_app(environ, start_response)
