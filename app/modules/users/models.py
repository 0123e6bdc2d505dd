# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, equals auth.users.id)
- email: text (unique, not null) - mirrored from auth.users
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), maintained by trigger)

Rows are created lazily by POST /api/sync-user and by funnel creation,
always via upsert on id so repeated syncs never duplicate a user.
"""
