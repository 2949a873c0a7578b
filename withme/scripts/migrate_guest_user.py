"""
Migrate Guest User Script
Moves a guest session's trips and content to a registered user, the same
way POST /guests/claim does, for support cases handled by hand.

    python -m withme.scripts.migrate_guest_user --guest-token guest_... --user-id <uuid>
"""

import argparse
import logging
import sys

from withme.database.supabase_client import get_script_supabase
from withme.modules.guests.service import GuestMigrationService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Migrate a guest user's data to a registered user")
    parser.add_argument("--guest-token", required=True, help="Value of the guest cookie")
    parser.add_argument("--user-id", required=True, help="Registered user receiving the data")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        result = GuestMigrationService(get_script_supabase()).claim(args.guest_token, args.user_id)
        logger.info(f"Migrated guest {result.guest_user_id} to {result.user_id}")
        for table, count in result.updated.items():
            logger.info(f"  {table}: {count}")
    except Exception as e:
        logger.error(f"Error during migration: {getattr(e, 'detail', e)}")
        sys.exit(1)


if __name__ == "__main__":
    main()
