"""Repository implementations (JSON files and Supabase)."""
