# Supabase table: comments

"""
Expected Supabase table structure:
- id: uuid (primary key)
- item_id: uuid (foreign key to items.id, not null)
- content: text (not null)
- created_at: timestamp (default: now())
"""
