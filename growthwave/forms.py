"""Parsing and validation for the lead capture forms.

The React forms post JSON; plain HTML fallbacks post URL-encoded or multipart
bodies. Both end up as the same dict of trimmed strings.
"""
import json

try:
    from .crm import FORM_TAGS, InvalidSubmission
    from .utils import clean_text, is_valid_email
except ImportError:  # pragma: no cover - fallback when running from growthwave/ cwd
    from crm import FORM_TAGS, InvalidSubmission
    from utils import clean_text, is_valid_email

FIELD_LIMITS = {
    'formType': 40,
    'firstName': 120,
    'lastName': 120,
    'email': 254,
    'phone': 40,
    'productInterest': 200,
    'message': 5000,
    'fundingGoal': 120,
    'creditScore': 120,
    'cf-turnstile-response': 4096,
}

FORM_MIMETYPES = {'application/x-www-form-urlencoded', 'multipart/form-data'}


def _coerce(value):
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return ''
    return str(value)


def read_submission_body(req):
    if req.mimetype in FORM_MIMETYPES:
        return req.form.to_dict()

    raw = req.get_data(cache=True, as_text=True) or ''
    try:
        data = json.loads(raw or '{}')
    except ValueError:
        raise InvalidSubmission('Invalid JSON body') from None
    if not isinstance(data, dict):
        raise InvalidSubmission('Invalid JSON body')
    return data


def clean_submission(data):
    """Trim every known field. Over-long values are rejected, never cut short."""
    fields = {}
    for name, limit in FIELD_LIMITS.items():
        value = _coerce(data.get(name)).strip()
        if len(value) > limit:
            raise InvalidSubmission(f'{name} must be at most {limit} characters')
        fields[name] = clean_text(value, limit)
    return fields


def validate_submission(fields):
    if fields.get('formType') not in FORM_TAGS:
        raise InvalidSubmission('Missing or invalid formType. Expected: contact, prequal, or guide')
    if not fields.get('email') and not fields.get('phone'):
        raise InvalidSubmission('At least one of email or phone is required')
    if fields.get('email') and not is_valid_email(fields['email']):
        raise InvalidSubmission('Please provide a valid email address')
    return fields


def parse_submission(req):
    return validate_submission(clean_submission(read_submission_body(req)))
