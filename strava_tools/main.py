# strava_tools/main.py
import argparse
import logging
import sys

from strava_tools import (
    auth, config, credentials, fetch_data, process_data, publish_data, rules, setup_tokens,
)
from strava_tools.errors import ConfigurationError, StravaToolsError

logger = logging.getLogger(__name__)


def str_to_bool(value):
    lowered = str(value).strip().lower()
    if lowered in ('1', 'true', 't', 'yes', 'y', 'on'):
        return True
    if lowered in ('0', 'false', 'f', 'no', 'n', 'off'):
        return False
    raise argparse.ArgumentTypeError(f"expected a boolean, got '{value}'")


def _base_parser(description):
    # Single-dash long flags (-dry-run=false) are the documented form; -- works too
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument('-api-key', '--api-key', dest='api_key', default='',
                        help='Strava refresh token (overrides the one in the config file)')
    parser.add_argument('-config', '--config', dest='config', default=config.CONFIG_FILE,
                        help='Path to config file (default: %(default)s)')
    return parser


def _add_bool_flag(parser, name, default, help_text):
    parser.add_argument(f'-{name}', f'--{name}', dest=name.replace('-', '_'),
                        type=str_to_bool, nargs='?', const=True, default=default,
                        metavar='BOOL', help=help_text)


def _fatal(message, error):
    logger.error("%s: %s", message, error)
    sys.exit(1)


def start_session(config_file, api_key=''):
    """
    Shared startup for every tool: load the credential file, apply the
    -api-key override, make sure the access token is fresh and save it back.
    Returns the (possibly refreshed) credential record.
    """
    # 1. Load Config (a missing file is not fatal)
    record = credentials.load_or_empty(config_file)

    # 2. CLI override
    if api_key:
        record.refresh_token = api_key
    if not record.refresh_token:
        raise ConfigurationError(
            "No refresh token provided. Please specify either via config file or -api-key flag")

    # 3. Token
    auth.ensure_valid_token(record)

    # 4. Persist (a failed save only costs us the refresh next time)
    try:
        credentials.save_config(config_file, record)
    except OSError as e:
        logger.warning("Warning: Failed to save config: %s", e)
    return record


def _start_or_exit(args):
    try:
        return start_session(args.config, args.api_key)
    except ConfigurationError as e:
        _fatal("Configuration error", e)
    except StravaToolsError as e:
        _fatal("Failed to obtain valid token", e)


def _fetch_all_or_exit(record):
    try:
        return fetch_data.list_all_activities(record.access_token)
    except StravaToolsError as e:
        _fatal("Failed to get activities", e)


# --- Counter ---

def count_main(argv=None):
    parser = _base_parser("Count Strava activities by name.")
    _add_bool_flag(parser, 'by-sport-type', False, 'Also count activities by sport type')
    args = parser.parse_args(argv)
    config.setup_logging()

    record = _start_or_exit(args)
    activities = _fetch_all_or_exit(record)

    publish_data.print_count_table("Activity Name Counts", process_data.count_by_name(activities))
    if args.by_sport_type:
        publish_data.print_count_table("Sport Type Counts", process_data.count_by_sport_type(activities),
                                       footer_label='Total unique sport types')


# --- Renamer / Cleaner ---

def _run_changes(record, changes, dry_run, description, nothing_message):
    if not changes:
        logger.info(nothing_message)
        return

    publish_data.report_planned_changes(changes, description)
    if dry_run:
        publish_data.report_dry_run()
        return

    logger.info("Applying changes...")
    result = rules.apply_changes(record.access_token, changes, dry_run=False)
    publish_data.report_apply_result(result)


def rename_main(argv=None):
    parser = _base_parser("Rename Strava activities using a fixed name mapping.")
    _add_bool_flag(parser, 'dry-run', True, 'Show what would be changed without making changes')
    parser.add_argument('-mappings', '--mappings', dest='mappings', default=None,
                        help='JSON file with {"current name": "new name"} pairs')
    args = parser.parse_args(argv)
    config.setup_logging()

    mappings = rules.DEFAULT_NAME_MAPPINGS
    if args.mappings:
        try:
            mappings = rules.load_name_mappings(args.mappings)
        except (OSError, ValueError) as e:
            _fatal("Failed to load name mappings", e)

    record = _start_or_exit(args)
    activities = _fetch_all_or_exit(record)

    changes = rules.Renamer(mappings).plan(activities)
    _run_changes(record, changes, args.dry_run, "that need to be renamed",
                 "No activities found that need to be renamed")


def clean_main(argv=None):
    parser = _base_parser("Trim leading and trailing spaces from Strava activity names.")
    _add_bool_flag(parser, 'dry-run', True, 'Show what would be changed without making changes')
    args = parser.parse_args(argv)
    config.setup_logging()

    record = _start_or_exit(args)
    activities = _fetch_all_or_exit(record)

    changes = rules.plan_whitespace_fixes(activities)
    _run_changes(record, changes, args.dry_run, "with leading or trailing spaces",
                 "No activities found with leading or trailing spaces")


# --- Single Activity Updater ---

def update_main(argv=None, rule=rules.DEFAULT_UPDATE_RULE):
    parser = _base_parser("Fix up the latest Strava activity if it matches a rule.")
    _add_bool_flag(parser, 'verbose', False, 'Enable verbose logging')
    args = parser.parse_args(argv)
    config.setup_logging(args.verbose)

    record = _start_or_exit(args)
    try:
        activity = fetch_data.get_latest_activity(record.access_token)
    except StravaToolsError as e:
        _fatal("Failed to get latest activity", e)

    logger.debug("Latest activity: ID=%d, Name='%s', Type='%s'",
                 activity.id, activity.name, activity.sport_type)

    if not rule.matches(activity):
        logger.info("No update needed for activity ID %d", activity.id)
        logger.debug("  Current Name: '%s'", activity.name)
        logger.debug("  Current Sport Type: '%s'", activity.sport_type)
        return

    try:
        fetch_data.update_activity(record.access_token, activity.id, rule.update)
    except StravaToolsError as e:
        _fatal("Failed to update activity", e)

    logger.info("Successfully updated activity ID %d:", activity.id)
    if rule.update.name:
        logger.info("  - Changed Name from '%s' to '%s'", activity.name, rule.update.name)
    if rule.update.sport_type:
        logger.info("  - Changed Sport Type from '%s' to '%s'", activity.sport_type, rule.update.sport_type)


TOOLS = {
    'counter': count_main,
    'renamer': rename_main,
    'cleaner': clean_main,
    'updater': update_main,
    'setup-tokens': setup_tokens.main,
}


def main(argv=None):
    """Dispatches `python -m strava_tools <tool> [flags]`."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv or argv[0] not in TOOLS:
        print(f"usage: python -m strava_tools {{{','.join(TOOLS)}}} [flags]")
        sys.exit(2)
    TOOLS[argv[0]](argv[1:])


if __name__ == "__main__":
    main()
