# Supabase tables: friend_requests, friends
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

friend_requests:
- id: uuid (primary key)
- sender_id: uuid (foreign key to profiles.id, not null)
- receiver_id: uuid (foreign key to profiles.id, not null)
- status: text (default: 'pending') - values: pending, accepted, declined
- created_at: timestamp (default: now())
- responded_at: timestamp (nullable)

friends (one row per direction):
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- friend_id: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- unique constraint on (user_id, friend_id)
"""
