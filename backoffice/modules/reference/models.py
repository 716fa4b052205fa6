# Supabase tables: countries, working_areas, store_categories
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

countries:
- id: uuid (primary key)
- name: text (not null)
- code: text (not null) - stored upper-case
- phone_code: text (not null)

working_areas:
- id: uuid (primary key)
- name: text (not null)
- created_by, updated_by: uuid
- created_at: timestamp (default: now()), updated_at: timestamp (nullable)

store_categories:
- same columns as working_areas
"""
