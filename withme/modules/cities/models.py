# Supabase table: cities
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

cities:
- id: uuid (primary key)
- name: text (not null)
- country: text (nullable)
- admin_name: text (nullable) - state / region
- latitude: double precision (nullable)
- longitude: double precision (nullable)
- mapbox_id: text (unique, nullable) - set for rows cached from Mapbox geocoding
- created_at: timestamp (default: now())
"""
