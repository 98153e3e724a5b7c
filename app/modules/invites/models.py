# Supabase table: group_invites

"""
Expected Supabase table structure:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, not null)
- email: text (not null) - stored lower-cased
- token: text (not null, unique) - opaque value carried by the invite link
- accepted: boolean (not null, default: false)
- created_at: timestamp (default: now())

An invite is consumed once: the accepted flag is claimed with a conditional
update (accepted = false -> true) before the membership row is written.
"""
