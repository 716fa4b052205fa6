# Supabase tables: addresses, countries
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

countries:
- id: uuid (primary key)
- name: text (not null)
- code: text (not null, upper-case ISO code)
- phone_code: text (not null)

addresses:
- id: uuid (primary key)
- country_id: uuid (foreign key to countries.id, not null)
- state, city, street_address, postal_code: text (nullable)
- building_number, apartment_number: text (nullable)
- additional_info: text (nullable)
- latitude, longitude: numeric (nullable)
- created_by: uuid (not null), updated_by: uuid (nullable)
- created_at: timestamp (default: now()), updated_at: timestamp (default: now())

An address is referenced by at most one entity row (operators, field_operators,
service_providers or stores) through that row's address_id column.
"""
