# Supabase tables: trip_notes, tags, note_tags
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

trip_notes:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- title: text (not null)
- content: text (nullable)
- created_by: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

tags:
- id: uuid (primary key)
- name: text (unique, not null)

note_tags:
- note_id: uuid (foreign key to trip_notes.id)
- tag_id: uuid (foreign key to tags.id)
- primary key (note_id, tag_id)
"""
