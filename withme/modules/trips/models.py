# Supabase tables: trips, trip_tags, tags, guest_tokens
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

trips:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- start_date: date (nullable)
- end_date: date (nullable)
- duration_days: integer (nullable)
- destination_id: uuid (foreign key to destinations.id, nullable)
- city_id: uuid (foreign key to cities.id, nullable)
- destination_name: text (nullable)
- privacy_setting: text (default: 'private') - values: private, shared_with_link, public
- status: text (default: 'planning')
- cover_image_url: text (nullable)
- cover_image_position_y: numeric (nullable, 0-100)
- budget: numeric (nullable)
- playlist_url: text (nullable)
- is_guest: boolean (default: false)
- created_by: uuid (foreign key to profiles.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

trip_tags:
- trip_id: uuid (foreign key to trips.id)
- tag_id: uuid (foreign key to tags.id)

guest_tokens:
- id: uuid (primary key)
- token: text (not null) - value of the guest cookie, 'guest_<32 hex>'
- user_id: uuid (not null) - generated guest profile id
- trip_id: uuid (foreign key to trips.id, nullable)
- claimed_by: uuid (nullable) - real user that claimed the guest data
- claimed_at: timestamp (nullable)
- created_at: timestamp (default: now())
"""
