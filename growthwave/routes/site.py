"""Serves the pre-built static output of the brand sites.

The build is directory style (``/capital/about/index.html``). A directory
requested without its trailing slash is redirected to the slashed form, the
same way the hosting platform's static server behaves.
"""
import os

from flask import Blueprint, abort, current_app, redirect, request, send_from_directory
from werkzeug.security import safe_join

site_bp = Blueprint('site', __name__)


def _site_root():
    return current_app.config.get('SITE_ROOT') or ''


def serve_site_path(path):
    root = _site_root()
    if not root or not os.path.isdir(root):
        abort(404)

    relative = path.strip('/')
    target = safe_join(root, relative) if relative else root
    if target is None:
        abort(404)

    if os.path.isdir(target):
        if relative and not path.endswith('/'):
            location = f'/{relative}/'
            if request.query_string:
                location = f"{location}?{request.query_string.decode('latin-1')}"
            return redirect(location, code=301)
        index_path = os.path.join(target, 'index.html')
        if not os.path.isfile(index_path):
            abort(404)
        return send_from_directory(target, 'index.html')

    if os.path.isfile(target) and not path.endswith('/'):
        directory, filename = os.path.split(target)
        return send_from_directory(directory, filename)

    abort(404)


def not_found_page():
    root = _site_root()
    page = os.path.join(root, '404.html') if root else ''
    if page and os.path.isfile(page):
        response = send_from_directory(root, '404.html')
        response.status_code = 404
        return response
    return current_app.response_class('Page not found', status=404, mimetype='text/plain')


@site_bp.route('/', defaults={'path': ''})
@site_bp.route('/<path:path>')
def static_page(path):
    # request.path keeps the trailing slash exactly as requested (or as rewritten).
    return serve_site_path(request.path)
