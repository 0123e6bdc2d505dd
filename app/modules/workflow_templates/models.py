# Supabase table: workspace_members
# Workflow templates themselves are not stored in the database; they come
# from the in-process registry in registry.py. The only table read by this
# module is the membership table used for authorization.

"""
Expected Supabase table structure:

workspace_members:
- workspace_id: uuid (not null)
- user_id: uuid (foreign key to users.id, not null)
- role: text (not null) - owner | admin | editor | viewer
- created_at: timestamptz (default: now())

Read-only here: membership is managed elsewhere.
"""
