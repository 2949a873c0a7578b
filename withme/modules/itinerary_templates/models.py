# Supabase tables: itinerary_templates, itinerary_template_items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

itinerary_templates:
- id: uuid (primary key)
- slug: text (unique, not null)
- title: text (not null)
- description: text (nullable)
- destination_id: uuid (foreign key to destinations.id, nullable)
- duration_days: integer (nullable)
- cover_image_url: text (nullable)
- is_published: boolean (default: false)
- view_count, use_count: integer (default: 0)
- created_by: uuid (foreign key to profiles.id)
- created_at, updated_at: timestamp

itinerary_template_items:
- id: uuid (primary key)
- template_id: uuid (foreign key to itinerary_templates.id, on delete cascade)
- day: integer (1-based)
- item_order: integer
- title: text (not null)
- description: text (nullable)
- item_type: text (nullable)
- start_time: text (nullable) - HH:MM
- end_time: text (nullable) - HH:MM
- location: text (nullable)
- latitude, longitude: double precision (nullable)
"""
