import logging

from strava_tools.process_data import visualize_name

logger = logging.getLogger(__name__)

# ==============================================================================
# COUNT TABLES
# ==============================================================================

def print_count_table(title, counts, footer_label='Total unique activities'):
    """
    Prints (value, count) pairs as a fixed-width table.
    Values are passed through visualize_name so stray spaces show up.
    """
    print(f"\n{title}:")
    print("-" * 20)
    for value, count in counts:
        print(f"{visualize_name(value):<40} {count}")
    print("-" * 20)
    print(f"{footer_label}: {len(counts)}")


# ==============================================================================
# CHANGE REPORTS
# ==============================================================================

def report_planned_changes(changes, description):
    """Logs every queued change as an ID / From / To block."""
    logger.info("Found %d activities %s:", len(changes), description)
    for change in changes:
        update = change.update
        logger.info("  ID: %d", change.activity.id)
        if update.name:
            logger.info("    From: '%s'", change.activity.name)
            logger.info("    To:   '%s'", update.name)
        if update.sport_type:
            logger.info("    Sport type: '%s' -> '%s'", change.activity.sport_type, update.sport_type)


def report_dry_run():
    logger.info("This was a dry run. To apply changes, run with -dry-run=false")


def report_apply_result(result):
    logger.info("Done: %d updated, %d failed", len(result.updated), len(result.failed))
