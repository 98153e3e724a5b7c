# Supabase Auth
# Sessions are issued to the frontend by Supabase Auth directly; this service
# only resolves bearer tokens into users.

"""
Supabase Auth provides:
- auth.get_user(jwt) - Resolve the current user from an access token

User email is used to match group invites. Admin status is read from
app_metadata.type == "super_user", which users cannot edit themselves.
"""
