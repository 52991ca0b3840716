# check_env.py
from dotenv import load_dotenv
import os

print("--- Running dotenv check ---")

# Try to load the .env file from the current directory
was_loaded = load_dotenv()
print(f"Was a .env file loaded? {was_loaded}")

for name in ("SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_JWKS_URL", "SUPABASE_JWT_SECRET"):
    value = os.getenv(name)
    # Never echo secrets
    shown = value if name == "SUPABASE_URL" or not value else "<set>"
    print(f"{name}: {shown}")

print("--- Check complete ---")
