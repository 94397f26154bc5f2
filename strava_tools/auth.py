import logging
import time
from urllib.parse import urlencode

import requests

from strava_tools import config
from strava_tools.errors import AuthError, ConfigurationError, NetworkError
from strava_tools.models import CredentialRecord

logger = logging.getLogger(__name__)

DEFAULT_REDIRECT_URI = 'http://localhost/exchange_token'
DEFAULT_SCOPE = 'activity:read_all,activity:write'


def ensure_valid_token(record, now=None):
    """
    Makes sure record.access_token can be used right now.
    Refreshes in place when the token is missing or expired, otherwise does nothing.
    The caller is responsible for saving the record afterwards.
    """
    if now is None:
        now = time.time()
    if not record.access_token or now >= record.expires_at:
        logger.info("Access token missing or expired. Refreshing...")
        refresh_access_token(record)
    return record


def refresh_access_token(record):
    if not record.client_id or not record.client_secret:
        raise ConfigurationError("client ID and client secret must be set in the config file")

    tokens = _post_token_request({
        'client_id': record.client_id,
        'client_secret': record.client_secret,
        'refresh_token': record.refresh_token,
        'grant_type': 'refresh_token',
    }, 'failed to refresh token')

    record.access_token = tokens['access_token']
    record.refresh_token = tokens['refresh_token']
    record.expires_at = tokens['expires_at']
    return record


# --- Initial Authorization ---

def build_authorize_url(client_id, redirect_uri=DEFAULT_REDIRECT_URI, scope=DEFAULT_SCOPE):
    params = {
        'client_id': client_id,
        'response_type': 'code',
        'redirect_uri': redirect_uri,
        'approval_prompt': 'force',
        'scope': scope,
    }
    return f"{config.AUTHORIZE_URL}?{urlencode(params, safe=':/,')}"


def exchange_code(client_id, client_secret, code):
    """Trades a one-time authorization code for a full credential record."""
    if not client_id or not client_secret:
        raise ConfigurationError("client ID and client secret are required to exchange a code")

    tokens = _post_token_request({
        'client_id': client_id,
        'client_secret': client_secret,
        'code': code,
        'grant_type': 'authorization_code',
    }, 'failed to exchange authorization code')

    return CredentialRecord(
        client_id=str(client_id),
        client_secret=client_secret,
        refresh_token=tokens['refresh_token'],
        access_token=tokens['access_token'],
        expires_at=tokens['expires_at'],
    )


def _post_token_request(data, failure_message):
    try:
        response = requests.post(config.TOKEN_URL, data=data, timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise NetworkError(f"failed to request token: {e}") from e

    if response.status_code != 200:
        raise AuthError(failure_message, response.status_code, response.text)

    try:
        tokens = response.json()
        # Validate everything before the caller touches the record
        return {
            'access_token': str(tokens['access_token']),
            'refresh_token': str(tokens['refresh_token']),
            'expires_at': int(tokens['expires_at']),
        }
    except (ValueError, KeyError, TypeError) as e:
        raise AuthError(f"failed to decode token response: {e}", response.status_code, response.text) from e
