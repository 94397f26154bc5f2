import logging

import requests

from strava_tools import config
from strava_tools.errors import ApiError, EmptyUpdateError, NetworkError, NotFoundError
from strava_tools.models import Activity

logger = logging.getLogger(__name__)


def _auth_headers(access_token):
    return {'Authorization': f"Bearer {access_token}"}


def _get_activity_page(access_token, page, per_page):
    params = {'per_page': per_page, 'page': page}
    try:
        response = requests.get(
            config.ACTIVITIES_URL,
            headers=_auth_headers(access_token),
            params=params,
            timeout=config.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise NetworkError(f"failed to get activities: {e}") from e

    if response.status_code != 200:
        raise ApiError("failed to get activities", response.status_code, response.text)

    try:
        return [Activity.from_dict(item) for item in response.json()]
    except (ValueError, KeyError, TypeError) as e:
        raise ApiError(f"failed to decode activities: {e}", response.status_code, response.text) from e


# --- Listing ---

def list_all_activities(access_token, per_page=config.PER_PAGE):
    """
    Pages through /athlete/activities until Strava runs out.
    A short page or an empty page ends the walk. Any failing page aborts
    the whole fetch, nothing partial is returned.
    """
    activities = []
    page = 1
    while True:
        data = _get_activity_page(access_token, page, per_page)
        if not data:
            break
        activities.extend(data)
        logger.debug("Fetched page %d (%d activities)", page, len(data))
        if len(data) < per_page:
            break
        page += 1
    return activities


def get_latest_activity(access_token):
    data = _get_activity_page(access_token, page=1, per_page=1)
    if not data:
        raise NotFoundError("no activities found")
    return data[0]


# --- Updating ---

def update_activity(access_token, activity_id, update):
    """Sends the populated fields of `update` to PUT /activities/{id}."""
    payload = update.to_payload()
    if not payload:
        raise EmptyUpdateError(f"refusing to send an empty update for activity {activity_id}")

    try:
        response = requests.put(
            config.ACTIVITY_URL_TMPL.format(id=activity_id),
            headers=_auth_headers(access_token),
            json=payload,
            timeout=config.REQUEST_TIMEOUT,
        )
    except requests.RequestException as e:
        raise NetworkError(f"failed to update activity: {e}") from e

    if response.status_code != 200:
        raise ApiError("failed to update activity", response.status_code, response.text)
