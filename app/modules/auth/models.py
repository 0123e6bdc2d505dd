# Supabase Auth
# Identity lives entirely in Supabase's auth.users table.
# No application table is owned by this module; the mirrored
# public.users row is handled by app.modules.users.

"""
The only Supabase Auth call made by this service:
- auth.get_user(jwt=...) - Resolve the user behind an access token

Tokens are issued to the browser by Supabase directly (sign-up, sign-in,
password reset); this backend never mints or refreshes them.
"""
