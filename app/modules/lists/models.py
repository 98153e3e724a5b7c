# Supabase table: lists
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- title: text (not null)
- position: integer (nullable) - display order, ascending. Rows created before
  ordering existed have NULL and are shown after all positioned lists,
  newest first.
- theme: text (nullable)
- created_at: timestamp (default: now())

New lists get min(position) - 1 so they sort first without renumbering.
"""
