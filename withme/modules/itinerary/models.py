# Supabase tables: itinerary_sections, itinerary_items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

itinerary_sections:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- trip_city_id: uuid (foreign key to trip_cities.id, nullable)
- title: text (not null)
- description: text (nullable)
- day_number: integer (default: 0)
- date: date (nullable)
- position: integer (not null)
- created_at: timestamp (default: now())

itinerary_items:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- section_id: uuid (foreign key to itinerary_sections.id, nullable) - null means unscheduled
- title: text (not null)
- name: text (nullable) - mirrors title
- description: text (nullable)
- item_type: text (default: 'activity')
- status: text (default: 'suggested') - values: suggested, confirmed, rejected
- start_time: text (nullable)
- end_time: text (nullable)
- day_number: integer (nullable)
- position: integer (not null)
- url: text (nullable)
- address: text (nullable)
- latitude: double precision (nullable)
- longitude: double precision (nullable)
- place_id: text (nullable)
- destination_id: uuid (nullable)
- data: jsonb (nullable)
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
