# Supabase tables: categories, subcategories, service_types
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

categories:
- id: uuid (primary key)
- name: text (not null)
- created_by, updated_by: uuid
- created_at: timestamp (default: now()), updated_at: timestamp (nullable)

subcategories:
- id: uuid (primary key)
- category_id: uuid (foreign key to categories.id, not null)
- name: text (not null)
- created_by, updated_by, created_at, updated_at as above

service_types:
- id: uuid (primary key)
- subcategory_id: uuid (foreign key to subcategories.id, not null)
- name: text (not null)
- created_by, updated_by, created_at, updated_at as above
"""
