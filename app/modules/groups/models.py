# Supabase tables: groups, user_groups
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- password_hash: text (nullable) - bcrypt hash of the shared group password
- created_at: timestamp (default: now())

user_groups:
- id: uuid (primary key)
- user_id: uuid (foreign key to auth.users.id, not null)
- group_id: uuid (foreign key to groups.id, not null)
- role: text (not null, default: 'member') - values: owner, member
- created_at: timestamp (default: now())
- unique constraint on (user_id, group_id)

Deleting a group is cascaded by GroupService.delete_group, not by the database.
"""
