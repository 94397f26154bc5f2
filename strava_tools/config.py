import logging
import os
import sys
from dotenv import load_dotenv

# Load environment variables
load_dotenv(dotenv_path='.local.env')

# 1. API Endpoints
API_BASE = os.getenv('STRAVA_API_BASE', 'https://www.strava.com/api/v3')
TOKEN_URL = os.getenv('STRAVA_TOKEN_URL', 'https://www.strava.com/oauth/token')
AUTHORIZE_URL = 'https://www.strava.com/oauth/authorize'
ACTIVITIES_URL = f"{API_BASE}/athlete/activities"
ACTIVITY_URL_TMPL = f"{API_BASE}/activities/{{id}}"

# 2. Request Settings
PER_PAGE = 200  # Maximum allowed by Strava
REQUEST_TIMEOUT = float(os.getenv('STRAVA_TIMEOUT', '10'))

# 3. Credential File
CONFIG_FILE = os.getenv('STRAVA_CONFIG_FILE', 'strava_config.json')

# 4. Secrets (used to fill in a config file that lacks them)
CLIENT_ID = os.getenv('STRAVA_CLIENT_ID', '')
CLIENT_SECRET = os.getenv('STRAVA_CLIENT_SECRET', '')

LOG_FORMAT = '%(asctime)s %(message)s'
LOG_DATE_FORMAT = '%Y/%m/%d %H:%M:%S'


def setup_logging(verbose=False):
    """Send log lines to stdout with a date/time prefix. Verbose only affects our own loggers."""
    logging.getLogger("strava_tools").setLevel(logging.DEBUG if verbose else logging.INFO)
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
    )
