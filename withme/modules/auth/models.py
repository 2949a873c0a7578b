# Supabase Auth
# This module uses Supabase's built-in authentication system.
# Registration also writes a row into the public profiles table.

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from an access token
- auth.sign_out() - Logout users

profiles (public schema, one row per auth user):
- id: uuid (primary key, same as auth.users.id)
- email: text (nullable)
- name: text (nullable)
- is_admin: boolean (default: false)
- is_guest: boolean (default: false)
- created_at: timestamp (default: now())
"""
