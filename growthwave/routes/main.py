import json
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from flask import Blueprint, current_app, g, jsonify, request

try:
    from ..brands import brand_payload, is_valid_brand_id
    from ..crm import InvalidSubmission, SubmissionError, submit_lead
    from ..forms import parse_submission
    from ..utils import clean_text, get_request_ip
except ImportError:  # pragma: no cover - fallback when running from growthwave/ cwd
    from brands import brand_payload, is_valid_brand_id
    from crm import InvalidSubmission, SubmissionError, submit_lead
    from forms import parse_submission
    from utils import clean_text, get_request_ip

main_bp = Blueprint('main', __name__)

SUBMIT_CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'POST, OPTIONS',
}
BRAND_CACHE_CONTROL = 'public, max-age=300'


def turnstile_enabled():
    return bool(current_app.config.get('TURNSTILE_SITE_KEY') and current_app.config.get('TURNSTILE_SECRET_KEY'))


def verify_turnstile_token(token):
    if not turnstile_enabled():
        return True

    token = clean_text(token, 4096)
    if not token:
        return False

    payload = {
        'secret': current_app.config.get('TURNSTILE_SECRET_KEY'),
        'response': token,
    }
    request_ip = get_request_ip()
    if request_ip and request_ip != 'unknown':
        payload['remoteip'] = request_ip

    body = urlencode(payload).encode()
    req = Request(
        'https://challenges.cloudflare.com/turnstile/v0/siteverify',
        data=body,
        headers={'Content-Type': 'application/x-www-form-urlencoded'},
    )
    try:
        with urlopen(req, timeout=10) as response:  # nosec B310
            result = json.loads(response.read().decode('utf-8'))
        return bool(result.get('success'))
    except Exception:
        current_app.logger.exception('Turnstile verification request failed.')
        return not current_app.config.get('TURNSTILE_ENFORCED', True)


def _submit_response(payload, status):
    if payload is None:
        response = current_app.response_class('', status=status)
    else:
        response = jsonify(payload)
        response.status_code = status
    response.headers.update(SUBMIT_CORS_HEADERS)
    return response


@main_bp.route('/api/submit', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'])
@main_bp.route('/.netlify/functions/ghl-submit', methods=['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS'])
def submit_form():
    if request.method == 'OPTIONS':
        return _submit_response(None, 204)
    if request.method != 'POST':
        return _submit_response({'error': 'Method not allowed'}, 405)

    try:
        fields = parse_submission(request)
        if not verify_turnstile_token(fields.get('cf-turnstile-response')):
            current_app.logger.warning('Form submission rejected by spam verification.')
            raise InvalidSubmission('Spam verification failed')
        result = submit_lead(fields)
    except SubmissionError as e:
        if e.status_code == 400:
            current_app.logger.info(f'Rejected form submission: {e.message}')
        return _submit_response(e.to_dict(), e.status_code)
    return _submit_response(result, 200)


@main_bp.route('/api/brand')
def current_brand():
    brand = getattr(g, 'brand', None)
    if not brand:
        response = jsonify({'error': 'No brand is mapped to this host'})
        response.status_code = 404
        return response
    response = jsonify(brand_payload(brand))
    response.headers['Cache-Control'] = BRAND_CACHE_CONTROL
    response.vary.add('Host')
    return response


@main_bp.route('/api/brands/<brand_id>')
def brand_detail(brand_id):
    if not is_valid_brand_id(brand_id):
        response = jsonify({'error': 'Unknown brand'})
        response.status_code = 404
        return response
    response = jsonify(brand_payload(brand_id))
    response.headers['Cache-Control'] = BRAND_CACHE_CONTROL
    return response
