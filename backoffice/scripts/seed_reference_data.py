"""
Seed Reference Data Script
This script populates working_areas, store_categories and countries using the config.
Existing rows are matched by name (countries by code) and left in place.

Usage: python -m backoffice.scripts.seed_reference_data
"""

import sys
from backoffice.config.permissions_config import (
    SEED_WORKING_AREAS, SEED_STORE_CATEGORIES, SEED_COUNTRIES
)
from backoffice.database.supabase_client import get_service_supabase
from supabase import Client
from typing import List
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_named(supabase: Client, table: str, names: List[str]) -> int:
    """Insert every missing name into a name-only reference table"""
    logger.info(f"Seeding {table}...")
    created_count = 0

    for name in names:
        try:
            existing = supabase.table(table)\
                .select("id")\
                .eq("name", name)\
                .execute()
            if existing.data:
                logger.debug(f"Skipped existing {table} row: {name}")
                continue
            supabase.table(table).insert({"name": name}).execute()
            created_count += 1
            logger.debug(f"Created {table} row: {name}")
        except Exception as e:
            logger.error(f"Error processing {table} row {name}: {e}")

    logger.info(f"{table} seeded: {created_count} created")
    return created_count


def seed_countries(supabase: Client) -> int:
    """Seed countries from config; updates name and phone code of existing codes"""
    logger.info("Seeding countries...")
    created_count = 0
    updated_count = 0

    for country in SEED_COUNTRIES:
        code = country["code"].upper()
        try:
            existing = supabase.table("countries")\
                .select("id")\
                .eq("code", code)\
                .execute()
            if existing.data:
                supabase.table("countries")\
                    .update({"name": country["name"], "phone_code": country["phone_code"]})\
                    .eq("code", code)\
                    .execute()
                updated_count += 1
            else:
                supabase.table("countries").insert({
                    "name": country["name"],
                    "code": code,
                    "phone_code": country["phone_code"]
                }).execute()
                created_count += 1
        except Exception as e:
            logger.error(f"Error processing country {code}: {e}")

    logger.info(f"Countries seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def main():
    """Main function to seed reference data"""
    try:
        supabase = get_service_supabase()

        logger.info("Starting reference data seeding...")
        areas = seed_named(supabase, "working_areas", SEED_WORKING_AREAS)
        categories = seed_named(supabase, "store_categories", SEED_STORE_CATEGORIES)
        countries = seed_countries(supabase)

        logger.info("Seeding completed successfully!")
        logger.info(f"Total: {areas} working areas, {categories} store categories, {countries} countries processed")

    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
