# Supabase tables: trip_members, trip_invitations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

trip_members:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- role: text (not null, default: 'viewer') - values: admin, editor, contributor, viewer
- is_guest: boolean (default: false)
- joined_at: timestamp (default: now())
- unique constraint on (trip_id, user_id)

trip_invitations:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- email: text (not null)
- role: text (not null, default: 'viewer')
- token: text (unique, not null)
- invited_by: uuid (foreign key to profiles.id, not null)
- status: text (default: 'pending') - values: pending, accepted, declined
- created_at: timestamp (default: now())
"""
