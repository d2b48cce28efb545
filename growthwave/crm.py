"""GoHighLevel contact relay for website form submissions.

A submission becomes one contact upsert, followed by a best-effort workflow
enrollment when the form type has a nurture workflow wired up. Nothing is
retried; the caller gets a status that tells it whether the contact landed.
"""
import json
import urllib.error
from urllib.request import Request, urlopen

from flask import current_app

FORM_TAGS = {
    'contact': ('source:website-organic', 'brand:capital', 'form:capital-contact'),
    'prequal': (
        'source:website-organic',
        'brand:capital',
        'form:capital-prequal',
        'engagement:prequal-submitted',
    ),
    'guide': (
        'source:website-organic',
        'brand:capital',
        'form:capital-guide',
        'engagement:lead-magnet-downloaded',
    ),
}

FORM_SOURCES = {
    'contact': 'Website — Capital Contact',
    'prequal': 'Website — Capital Pre-Qualification',
    'guide': 'Website — Capital Guide Download',
}

# Only prequal feeds a workflow; contact and guide leads are routed downstream in the CRM.
FORM_WORKFLOWS = {
    'contact': None,
    'prequal': '52c79b90-0897-4bed-8dbd-4dc94ce2735a',
    'guide': None,
}

# Form field name -> CRM custom field key, in the order they are sent.
CUSTOM_FIELD_KEYS = (
    ('productInterest', 'single_dropdown_89ki'),
    ('message', 'multi_line_2fsn'),
    ('fundingGoal', 'funding_amount_needed'),
    ('creditScore', 'estimated_credit_score_range'),
)


class SubmissionError(Exception):
    status_code = 400

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        payload = {'error': self.message}
        if self.detail is not None:
            payload['detail'] = self.detail
        return payload


class InvalidSubmission(SubmissionError):
    status_code = 400


class CrmNotConfigured(SubmissionError):
    status_code = 500


class CrmUpstreamError(SubmissionError):
    status_code = 502


def build_custom_fields(fields):
    return [
        {'id': crm_key, 'field_value': fields[form_key]}
        for form_key, crm_key in CUSTOM_FIELD_KEYS
        if fields.get(form_key)
    ]


def build_upsert_payload(fields, location_id):
    form_type = fields['formType']
    payload = {
        'firstName': fields.get('firstName') or '',
        'lastName': fields.get('lastName') or '',
        'email': fields.get('email') or '',
        'phone': fields.get('phone') or '',
        'locationId': location_id,
        'tags': list(FORM_TAGS[form_type]),
        'source': FORM_SOURCES[form_type],
    }
    custom_fields = build_custom_fields(fields)
    if custom_fields:
        payload['customFields'] = custom_fields
    return payload


def _crm_credentials():
    token = (current_app.config.get('GHL_API_TOKEN') or '').strip()
    location_id = (current_app.config.get('GHL_LOCATION_ID') or '').strip()
    if not token or not location_id:
        current_app.logger.error('Missing GHL_API_TOKEN or GHL_LOCATION_ID configuration.')
        raise CrmNotConfigured('Server configuration error')
    return token, location_id


def _crm_request(path, token, payload=None):
    base = (current_app.config.get('GHL_API_BASE') or '').rstrip('/')
    headers = {
        'Authorization': f'Bearer {token}',
        'Version': current_app.config.get('GHL_API_VERSION') or '2021-07-28',
    }
    data = None
    if payload is not None:
        data = json.dumps(payload).encode('utf-8')
        headers['Content-Type'] = 'application/json'
    return Request(f'{base}{path}', data=data, headers=headers, method='POST')


def upsert_contact(fields, token, location_id):
    """Create or update the CRM contact; returns its id (may be ``None``)."""
    req = _crm_request('/contacts/upsert', token, build_upsert_payload(fields, location_id))
    timeout = current_app.config.get('CRM_TIMEOUT_SECONDS', 15)
    try:
        with urlopen(req, timeout=timeout) as response:  # nosec B310
            body = json.loads(response.read().decode('utf-8') or '{}')
    except urllib.error.HTTPError as e:
        error_body = e.read().decode('utf-8', errors='replace')
        current_app.logger.error(f'CRM upsert failed: {e.code} {e.reason} {error_body}')
        raise CrmUpstreamError('Failed to create contact in CRM', detail=e.code) from e
    except (urllib.error.URLError, OSError, ValueError) as e:
        current_app.logger.exception('CRM API request failed.')
        raise CrmUpstreamError('CRM API request failed') from e

    contact = body.get('contact') if isinstance(body, dict) else None
    contact_id = contact.get('id') if isinstance(contact, dict) else None
    current_app.logger.info(
        f"CRM contact upserted: {contact_id} ({fields['formType']}) {fields.get('email') or fields.get('phone')}"
    )
    return contact_id


def enroll_in_workflow(contact_id, workflow_id, token):
    """Best-effort workflow enrollment. Never raises."""
    req = _crm_request(f'/contacts/{contact_id}/workflow/{workflow_id}', token)
    timeout = current_app.config.get('CRM_TIMEOUT_SECONDS', 15)
    try:
        with urlopen(req, timeout=timeout):  # nosec B310
            current_app.logger.info(f'Enrolled {contact_id} in workflow {workflow_id}.')
            return True
    except urllib.error.HTTPError as e:
        error_body = e.read().decode('utf-8', errors='replace')
        current_app.logger.warning(f'Workflow enrollment returned {e.code} for {contact_id}: {error_body}')
        return False
    except Exception:
        current_app.logger.warning(f'Workflow enrollment request failed for {contact_id}.', exc_info=True)
        return False


def submit_lead(fields):
    token, location_id = _crm_credentials()
    contact_id = upsert_contact(fields, token, location_id)

    workflow_id = FORM_WORKFLOWS.get(fields['formType'])
    if contact_id and workflow_id:
        enroll_in_workflow(contact_id, workflow_id, token)

    return {'success': True, 'contactId': contact_id, 'formType': fields['formType']}
