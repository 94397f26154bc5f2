# strava_tools/credentials.py
import json
import logging
import os

from strava_tools import config
from strava_tools.models import CredentialRecord

logger = logging.getLogger(__name__)


def load_config(config_file):
    """Reads the credential record. Raises OSError / ValueError on a bad file."""
    with open(config_file, 'r') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"'{config_file}' does not hold a JSON object")
    return CredentialRecord.from_dict(data)


def load_or_empty(config_file):
    """
    Same as load_config, but a missing or corrupt file gives an empty record
    so the run can continue and write a fresh file afterwards.
    Client id/secret from the environment fill in whatever the file lacks.
    """
    try:
        record = load_config(config_file)
    except (OSError, ValueError) as e:
        logger.info("Could not load config file '%s' (%s), will attempt to create it", config_file, e)
        record = CredentialRecord()

    if not record.client_id:
        record.client_id = config.CLIENT_ID
    if not record.client_secret:
        record.client_secret = config.CLIENT_SECRET
    return record


def save_config(config_file, record):
    """Writes the record as indented JSON, readable by the owner only."""
    fd = os.open(config_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, 'w') as f:
        json.dump(record.to_dict(), f, indent=2)
    # O_CREAT mode only applies to new files
    os.chmod(config_file, 0o600)
