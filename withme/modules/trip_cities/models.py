# Supabase tables: trip_cities, cities
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

trip_cities:
- id: uuid (primary key)
- trip_id: uuid (foreign key to trips.id, not null)
- city_id: uuid (foreign key to cities.id, not null)
- position: integer (not null) - 0-based order of the stop within the trip
- arrival_date: date (nullable)
- departure_date: date (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
- unique constraint on (trip_id, city_id)

itinerary_sections.trip_city_id references trip_cities.id and is nulled when
a city is removed from a trip.
"""
