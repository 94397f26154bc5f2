# strava_tools/models.py
from dataclasses import dataclass, asdict
from datetime import datetime


@dataclass
class CredentialRecord:
    client_id: str = ''
    client_secret: str = ''
    refresh_token: str = ''
    access_token: str = ''
    expires_at: int = 0

    @classmethod
    def from_dict(cls, data):
        """
        Builds a record from the JSON config file.
        Unknown keys are ignored, missing ones fall back to the defaults.
        """
        return cls(
            client_id=str(data.get('client_id') or ''),
            client_secret=str(data.get('client_secret') or ''),
            refresh_token=data.get('refresh_token') or '',
            access_token=data.get('access_token') or '',
            expires_at=int(data.get('expires_at') or 0),
        )

    def to_dict(self):
        return asdict(self)


def _parse_start_date(value):
    if not value:
        return None
    # Strava sends "2024-01-01T08:00:00Z"
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


@dataclass
class Activity:
    id: int
    name: str = ''
    sport_type: str = ''
    start_date: datetime = None
    description: str = ''

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data['id']),
            name=data.get('name') or '',
            sport_type=data.get('sport_type') or '',
            start_date=_parse_start_date(data.get('start_date')),
            description=data.get('description') or '',
        )


@dataclass(frozen=True)
class ActivityUpdate:
    """Sparse change to an activity. Empty fields are left alone by Strava."""
    name: str = None
    sport_type: str = None
    description: str = None

    def to_payload(self):
        return {key: value for key, value in asdict(self).items() if value}

    def is_empty(self):
        return not self.to_payload()
