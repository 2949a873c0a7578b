"""
Backfill Destination Images Script
Finds destinations without an image_url and stores the first stock photo
found for "<city> <country>", with attribution in image_metadata.

    python -m withme.scripts.backfill_destination_images --limit 20 --dry-run
"""

import argparse
import logging
import sys
from typing import Dict, List, Optional

from supabase import Client
from withme.database.supabase_client import get_script_supabase
from withme.integrations.errors import IntegrationError, IntegrationNotConfigured
from withme.integrations.images import IMAGE_SOURCES, ImageSearchClient

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def image_query(destination: dict) -> str:
    parts = [destination.get("city"), destination.get("country")]
    return " ".join(p for p in parts if p)


def image_metadata(image: dict) -> dict:
    return {
        "source": image["source"],
        "source_id": image["id"],
        "photographer": image.get("photographer"),
        "photographer_url": image.get("photographer_url"),
        "alt": image.get("alt"),
        "width": image.get("width"),
        "height": image.get("height"),
    }


def find_destinations_without_images(supabase: Client, limit: Optional[int] = None) -> List[dict]:
    query = supabase.table("destinations")\
        .select("id, city, country")\
        .is_("image_url", "null")\
        .order("popularity", desc=True)
    if limit:
        query = query.limit(limit)
    return query.execute().data or []


def backfill_destination_images(
    supabase: Client,
    images: ImageSearchClient,
    source: str = "unsplash",
    limit: Optional[int] = None,
    dry_run: bool = False
) -> Dict[str, int]:
    """Returns counts of updated, skipped (no photo found) and failed destinations"""
    counts = {"updated": 0, "skipped": 0, "failed": 0}
    destinations = find_destinations_without_images(supabase, limit)
    logger.info(f"Found {len(destinations)} destinations without images")

    for destination in destinations:
        query = image_query(destination)
        if not query:
            counts["skipped"] += 1
            continue
        try:
            results = images.search(query, source=source, per_page=1)
        except IntegrationNotConfigured:
            raise
        except IntegrationError as e:
            logger.error(f"Image search for {query} failed: {e}")
            counts["failed"] += 1
            continue
        if not results:
            logger.debug(f"No {source} photo for {query}")
            counts["skipped"] += 1
            continue

        image = results[0]
        if dry_run:
            logger.info(f"[dry run] {query}: {image['url']}")
            counts["updated"] += 1
            continue
        try:
            supabase.table("destinations")\
                .update({"image_url": image["url"], "image_metadata": image_metadata(image)})\
                .eq("id", destination["id"])\
                .execute()
            counts["updated"] += 1
            logger.debug(f"Updated image for {query}")
        except Exception as e:
            logger.error(f"Error updating destination {destination['id']}: {e}")
            counts["failed"] += 1

    return counts


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Backfill missing destination images")
    parser.add_argument("--limit", type=int, default=None, help="Maximum destinations to process")
    parser.add_argument("--dry-run", action="store_true", help="Search but do not write")
    parser.add_argument("--source", choices=IMAGE_SOURCES, default="unsplash")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    try:
        counts = backfill_destination_images(
            get_script_supabase(),
            ImageSearchClient(),
            source=args.source,
            limit=args.limit,
            dry_run=args.dry_run,
        )
        logger.info(
            f"Backfill completed: {counts['updated']} updated, "
            f"{counts['skipped']} skipped, {counts['failed']} failed"
        )
    except Exception as e:
        logger.error(f"Error during backfill: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
