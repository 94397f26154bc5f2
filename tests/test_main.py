import json

import pytest

from strava_tools import auth, credentials, fetch_data, main, rules
from strava_tools.errors import ApiError, AuthError, ConfigurationError
from strava_tools.models import Activity, ActivityUpdate, CredentialRecord


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / 'strava_config.json'
    path.write_text(json.dumps({
        'client_id': '12345',
        'client_secret': 's3cret',
        'refresh_token': 'stored-refresh',
        'access_token': 'access',
        'expires_at': 4102444800,
    }))
    return str(path)


@pytest.fixture
def fake_api(monkeypatch):
    """Replaces the HTTP layer with an in-memory list of activities."""
    class FakeApi:
        activities = []
        updates = []
        fail_ids = set()

    api = FakeApi()

    def fake_update(access_token, activity_id, update):
        api.updates.append((activity_id, update))
        if activity_id in api.fail_ids:
            raise ApiError("failed to update activity", 500, 'boom')

    def fake_latest(access_token):
        return api.activities[0]

    monkeypatch.setattr(fetch_data, 'list_all_activities', lambda access_token: list(api.activities))
    monkeypatch.setattr(fetch_data, 'get_latest_activity', fake_latest)
    monkeypatch.setattr(fetch_data, 'update_activity', fake_update)
    return api


# --- Startup ---

def test_start_session_requires_refresh_token(tmp_path):
    with pytest.raises(ConfigurationError):
        main.start_session(str(tmp_path / 'missing.json'))


def test_start_session_api_key_overrides_and_saves(tmp_path, monkeypatch):
    path = tmp_path / 'strava_config.json'
    seen = []

    def fake_ensure(record, now=None):
        seen.append(record.refresh_token)
        record.access_token = 'fresh'
        record.expires_at = 4102444800
        return record

    monkeypatch.setattr(auth, 'ensure_valid_token', fake_ensure)
    monkeypatch.setattr('strava_tools.config.CLIENT_ID', 'env-id')
    monkeypatch.setattr('strava_tools.config.CLIENT_SECRET', 'env-secret')

    record = main.start_session(str(path), api_key='cli-refresh')

    assert seen == ['cli-refresh']
    assert credentials.load_config(str(path)) == record
    assert record == CredentialRecord('env-id', 'env-secret', 'cli-refresh', 'fresh', 4102444800)


def test_start_session_survives_save_failure(config_file, monkeypatch):
    def broken_save(config_file, record):
        raise PermissionError("read-only file system")

    monkeypatch.setattr(credentials, 'save_config', broken_save)

    record = main.start_session(config_file)

    assert record.access_token == 'access'


def test_token_failure_is_fatal(config_file, monkeypatch):
    def rejected(record, now=None):
        raise AuthError("failed to refresh token", 401, 'Bad Request')

    monkeypatch.setattr(auth, 'ensure_valid_token', rejected)

    with pytest.raises(SystemExit) as excinfo:
        main.count_main(['-config', config_file])
    assert excinfo.value.code == 1


def test_fetch_failure_is_fatal(config_file, monkeypatch):
    def failing(access_token):
        raise ApiError("failed to get activities", 503, 'unavailable')

    monkeypatch.setattr(fetch_data, 'list_all_activities', failing)

    with pytest.raises(SystemExit) as excinfo:
        main.rename_main(['-config', config_file])
    assert excinfo.value.code == 1


# --- Flags ---

@pytest.mark.parametrize('argv, expected', [
    ([], True),
    (['-dry-run=false'], False),
    (['-dry-run', 'false'], False),
    (['--dry-run=no'], False),
    (['-dry-run'], True),
    (['-dry-run=1'], True),
])
def test_dry_run_flag(argv, expected):
    parser = main._base_parser("test")
    main._add_bool_flag(parser, 'dry-run', True, 'help')

    assert parser.parse_args(argv).dry_run is expected


def test_api_key_flag():
    args = main._base_parser("test").parse_args(['-api-key', 'abc', '-config', 'other.json'])

    assert args.api_key == 'abc'
    assert args.config == 'other.json'


# --- Counter ---

def test_counter_prints_visualized_counts(config_file, fake_api, capsys):
    fake_api.activities = [
        Activity(id=1, name='Gym Workout', sport_type='Workout'),
        Activity(id=2, name='Gym Workout', sport_type='Workout'),
        Activity(id=3, name=' Run', sport_type='Run'),
    ]

    main.count_main(['-config', config_file, '-by-sport-type'])

    out = capsys.readouterr().out
    assert 'Gym·Workout' in out
    assert '→·Run' in out
    assert 'Total unique activities: 2' in out
    assert 'Total unique sport types: 2' in out
    assert fake_api.updates == []


# --- Renamer / Cleaner ---

def test_renamer_dry_run_by_default(config_file, fake_api):
    fake_api.activities = [Activity(id=1, name='Workout'), Activity(id=2, name='Workout')]

    main.rename_main(['-config', config_file])

    assert fake_api.updates == []


def test_renamer_applies_and_continues_past_failures(config_file, fake_api):
    fake_api.activities = [
        Activity(id=1, name='Workout'),
        Activity(id=2, name='Gym Workou'),
        Activity(id=3, name='workout'),
        Activity(id=4, name='Pickup ice Hockey'),
    ]
    fake_api.fail_ids = {2}

    main.rename_main(['-config', config_file, '-dry-run=false'])

    assert fake_api.updates == [
        (1, ActivityUpdate(name='Gym Workout')),
        (2, ActivityUpdate(name='Gym Workout')),
        (4, ActivityUpdate(name='Pickup Ice Hockey')),
    ]


def test_renamer_with_mapping_file(config_file, fake_api, tmp_path):
    mappings = tmp_path / 'mappings.json'
    mappings.write_text(json.dumps({'Lunch Ride': 'Commute'}))
    fake_api.activities = [Activity(id=1, name='Lunch Ride'), Activity(id=2, name='Workout')]

    main.rename_main(['-config', config_file, '-mappings', str(mappings), '-dry-run=false'])

    assert fake_api.updates == [(1, ActivityUpdate(name='Commute'))]


def test_cleaner_trims_names(config_file, fake_api):
    fake_api.activities = [Activity(id=1, name=' Run '), Activity(id=2, name='Ride')]

    main.clean_main(['-config', config_file, '-dry-run=false'])

    assert fake_api.updates == [(1, ActivityUpdate(name='Run'))]


# --- Updater ---

def test_updater_applies_matching_rule(config_file, fake_api):
    fake_api.activities = [Activity(id=9, name='Morning Workout', sport_type='Workout')]

    main.update_main(['-config', config_file, '-verbose'])

    assert fake_api.updates == [(9, ActivityUpdate(name='Pickup Ice Hockey', sport_type='IceSkate'))]


def test_updater_skips_non_matching_activity(config_file, fake_api):
    fake_api.activities = [Activity(id=9, name='Morning Workout', sport_type='Run')]

    main.update_main(['-config', config_file])

    assert fake_api.updates == []


def test_updater_with_custom_rule(config_file, fake_api):
    rule = rules.UpdateRule('Lunch Ride', 'Ride', ActivityUpdate(description='commute'))
    fake_api.activities = [Activity(id=5, name='Lunch Ride', sport_type='Ride')]

    main.update_main(['-config', config_file], rule=rule)

    assert fake_api.updates == [(5, ActivityUpdate(description='commute'))]


def test_updater_failure_is_fatal(config_file, fake_api):
    fake_api.activities = [Activity(id=9, name='Morning Workout', sport_type='Workout')]
    fake_api.fail_ids = {9}

    with pytest.raises(SystemExit) as excinfo:
        main.update_main(['-config', config_file])
    assert excinfo.value.code == 1


def test_dispatch_unknown_tool(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main.main(['nope'])

    assert excinfo.value.code == 2
    assert 'usage' in capsys.readouterr().out
