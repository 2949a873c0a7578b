# Supabase tables: groups, group_members, group_plan_ideas, group_plan_idea_votes
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- emoji: text (nullable)
- visibility: text (default: 'private') - values: private, public, unlisted
- created_by: uuid (foreign key to profiles.id)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

group_members:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- role: text (default: 'member') - values: admin, member
- created_at: timestamp (default: now())
- unique constraint on (group_id, user_id)

group_plan_ideas:
- id: uuid (primary key)
- group_id: uuid (foreign key to groups.id, on delete cascade)
- created_by: uuid (foreign key to profiles.id)
- title: text (not null)
- description: text (nullable)
- type: text - values: activity, budget, date, destination, note, other, place, question
- start_date, end_date: date (nullable)
- meta: jsonb (nullable)
- votes_up: integer (default: 0)
- votes_down: integer (default: 0)
- created_at, updated_at: timestamp

group_plan_idea_votes:
- id: uuid (primary key)
- idea_id: uuid (foreign key to group_plan_ideas.id, on delete cascade)
- user_id: uuid (foreign key to profiles.id)
- vote_type: text - values: up, down
- created_at: timestamp (default: now())
- unique constraint on (idea_id, user_id)
"""
