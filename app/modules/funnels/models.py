# Supabase tables: funnels, pages
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

funnels:
- id: uuid (primary key, default uuid_generate_v4())
- user_id: uuid (foreign key to users.id, not null, on delete cascade)
- name: text (not null)
- published: boolean (not null, default false)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

pages:
- id: uuid (primary key)
- funnel_id: uuid (foreign key to funnels.id, not null, on delete cascade)
- name: text (not null)
- slug: text (not null) - unique per funnel: UNIQUE(funnel_id, slug)
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now())

Indexes: funnels(user_id), funnels(published), pages(funnel_id)
"""
