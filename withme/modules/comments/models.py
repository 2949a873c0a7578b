# Supabase tables: comments, comment_reactions
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

comments:
- id: uuid (primary key)
- content_type: text (not null) - trip, itinerary_item, destination, group_plan_idea, collection, template
- content_id: uuid (not null) - id of the commented entity
- user_id: uuid (foreign key to profiles.id, not null)
- content: text (not null)
- parent_id: uuid (foreign key to comments.id, nullable) - set on replies
- is_edited: boolean (default: false)
- is_deleted: boolean (default: false)
- attachment_url: text (nullable)
- attachment_type: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

The API exposes content_id/content_type as entity_id/entity_type.

comment_reactions:
- id: uuid (primary key)
- comment_id: uuid (foreign key to comments.id, not null)
- user_id: uuid (foreign key to profiles.id, not null)
- emoji: text (not null)
- created_at: timestamp (default: now())
- unique constraint on (comment_id, user_id, emoji)
"""
