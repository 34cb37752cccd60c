# db/models.py
"""
Supabase does not require ORM model classes.
Tables created in the Supabase dashboard:

Table: profiles
- id (uuid, PK, = auth.users.id)
- is_admin (bool, default false)

Table: team_registrations
- id (uuid, PK)
- user_id (uuid, FK → auth.users.id)
- team_name, captain_name, email, phone (text)
- category (text: under_12 | open)
- status (text: pending | approved | rejected | waitlist, default pending)
- race_number, heat_time (text, nullable; assigned by admins)
- soapbox_name, soapbox_description (text)
- file_url (text; public URL in the team-files bucket, '' when none)
- created_at, reviewed_at (timestamptz)

Table: team_members
- id (uuid, PK)
- registration_id (uuid, FK → team_registrations.id)
- member_name (text), member_age (int)
- email, phone, role, emergency_contact, emergency_phone, medical_notes (text, nullable)

Table: announcements
- id (uuid, PK)
- title (text)
- content (text; some older rows use `message`)
- category (text: general | info | urgent)
- audience (text: all | open | under_12)
- created_at (timestamptz)

Table: team_documents
- id (uuid, PK)
- registration_id (uuid, FK → team_registrations.id)
- title, file_url (text)
- created_at (timestamptz)

Table: teams
- id (uuid, PK)
- team_name, captain_name, category (text)
- status (text: active | inactive | suspended)
- created_at (timestamptz)

Storage buckets: team-files, team-documents
"""

PROFILES = "profiles"
TEAM_REGISTRATIONS = "team_registrations"
TEAM_MEMBERS = "team_members"
ANNOUNCEMENTS = "announcements"
TEAM_DOCUMENTS = "team_documents"
TEAMS = "teams"

REGISTRATION_STATUSES = ("pending", "approved", "rejected", "waitlist")
CATEGORIES = {"under_12": "Under 12", "open": "Open"}
TEAM_STATUSES = ("active", "inactive", "suspended")
