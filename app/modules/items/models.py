# Supabase table: items

"""
Expected Supabase table structure:
- id: uuid (primary key)
- list_id: uuid (foreign key to lists.id, not null)
- content: text (not null)
- bought: boolean (not null, default: false)
- created_at: timestamp (default: now())
"""
