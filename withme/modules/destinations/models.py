# Supabase table: destinations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

destinations:
- id: uuid (primary key)
- slug: text (unique, nullable)
- city: text (not null)
- state_province: text (nullable)
- country: text
- continent: text
- description: text (nullable)
- byline: text (nullable)
- highlights: text[] (nullable)
- emoji: text (nullable)
- image_url: text (nullable)
- image_metadata: jsonb (nullable) - source, photographer, attribution of image_url
- popularity: integer (default: 0)
- travelers_count: integer (nullable)
- avg_days: integer (nullable)
- best_season, avg_cost_per_day, *_rating: descriptive columns shown on destination pages
- latitude, longitude: double precision (nullable)
- created_at: timestamp (default: now())
"""
