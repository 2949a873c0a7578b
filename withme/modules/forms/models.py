# Supabase tables: forms, form_responses
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

forms:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, on delete cascade)
- created_by: uuid (foreign key to profiles.id)
- title: text (not null)
- description: text (nullable)
- status: text (default: 'draft') - values: draft, published, archived
- visibility: text (default: 'members') - values: private, members, public
- form_type: text (default: 'general')
- allow_anonymous: boolean (default: false)
- expires_at: timestamptz (nullable)
- metadata: jsonb (nullable)
- settings: jsonb (nullable)
- created_at, updated_at: timestamp

form_responses:
- id: uuid (primary key)
- form_id: uuid (foreign key to forms.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id, nullable for anonymous responses)
- answers: jsonb (not null)
- created_at: timestamp (default: now())
"""
