import json

import pytest

from strava_tools.models import Activity


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


def make_activity_json(activity_id, name='Morning Run', sport_type='Run'):
    return {
        'id': activity_id,
        'name': name,
        'sport_type': sport_type,
        'start_date': '2024-05-01T07:30:00Z',
        'description': None,
        'distance': 5000.0,
    }


@pytest.fixture
def make_activities():
    def _make(*names, sport_type='Run'):
        return [Activity(id=i + 1, name=name, sport_type=sport_type) for i, name in enumerate(names)]
    return _make
