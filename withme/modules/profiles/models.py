# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- email: text (nullable)
- name: text (nullable)
- username: text (unique, nullable)
- avatar_url: text (nullable)
- bio: text (nullable)
- home_location: text (nullable)
- is_admin: boolean (default: false)
- is_guest: boolean (default: false)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
