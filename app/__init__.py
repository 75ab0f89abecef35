# Package marker for the `app` package.
# Kept minimal so `from app.main import app` does not pull in Supabase at import time.
__all__ = ["main", "services", "models", "config"]
