# Supabase tables: auth.users, user_roles
# This file documents the expected database schema
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

user_roles:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null) - values: admin, operator, field_operator, service_provider, store
- assigned_by: uuid (foreign key to auth.users.id)
- created_at: timestamp (default: now())

assign_role(target_user_id uuid, role_name text): database function used
by the user-role screen to insert a user_roles row stamped with the caller.

Note: passwords and tokens live in auth.users, managed by Supabase Auth.
A custom access token hook may copy the role into app_metadata.user_role.
"""
