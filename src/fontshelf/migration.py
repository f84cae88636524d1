"""One-time backfill of categories for rows stored without one."""

import logging

from fontshelf.categorizer import categorize
from fontshelf.store import FontStore

logger = logging.getLogger(__name__)


def migrate_categories(store: FontStore) -> int:
    """Categorize every stored row lacking a category. Returns rows updated."""
    logger.info("Starting category migration...")
    updated = 0
    for record in store.uncategorized():
        category, subcategory = categorize(record.family, record.subfamily, record.monospace)
        store.set_category(record.path, category, subcategory)
        updated += 1
    logger.info("Category migration complete: %d font(s) updated", updated)
    return updated
