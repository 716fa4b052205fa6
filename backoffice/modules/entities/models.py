# Supabase tables: operators, field_operators, service_providers, stores,
# service_provider_types, service_provider_working_areas
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and the privileged functions

"""
Expected Supabase table structure:

Every entity table carries:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null, unique)
- address_id: uuid (foreign key to addresses.id, nullable)
- created_by, updated_by: uuid
- created_at: timestamp (default: now()), updated_at: timestamp (nullable)

operators:
- first_name, last_name: text (not null)
- phone_number, working_area, description: text (nullable)
- date_of_birth: date (nullable)

field_operators:
- same columns as operators, plus referenced_by, domain: text (nullable)

service_providers:
- first_name, last_name: text (not null)
- phone_number, description, referenced_by, file_url: text (nullable)
- date_of_birth: date (nullable)
- working_area_diameter: numeric (default 0)
- is_company: boolean (default false)
- number_of_employees: integer (default 0)
- status: text (not null, default 'inactive') - values: active, inactive, paused

stores:
- name: text (not null)
- owner_first_name, owner_last_name, phone_number, description: text (nullable)
- category_id: uuid (foreign key to store_categories.id, nullable)

service_provider_types:
- id: uuid (primary key)
- provider_id: uuid (foreign key to service_providers.id, not null)
- service_type_id: uuid (foreign key to service_types.id, not null)
- created_by: uuid

service_provider_working_areas:
- id: uuid (primary key)
- provider_id: uuid (foreign key to service_providers.id, not null)
- working_area_id: uuid (foreign key to working_areas.id, not null)
- created_by: uuid
"""
