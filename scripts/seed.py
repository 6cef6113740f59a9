"""
Create the demo accounts:
  user@test.com / password123 (user)
  admin@test.com / admin123 (admin)
"""
import asyncio
import os
import sys
from dotenv import load_dotenv

# Ensure we can import app modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from creator_analytics.services.user_store import UserStore
from creator_analytics.utils.auth import hash_password

TEST_ACCOUNTS = [
    ("Test User", "user@test.com", "password123", "user"),
    ("Test Admin", "admin@test.com", "admin123", "admin"),
]

async def seed():
    load_dotenv()

    import main
    await main.ensure_beanie_initialized()
    if not main.db_initialized:
        print("Database not initialized. Set MONGODB_URI and retry.")
        return 1

    users = UserStore()
    await users.delete_by_emails([email for _, email, _, _ in TEST_ACCOUNTS])
    for name, email, password, role in TEST_ACCOUNTS:
        await users.create(name, email, hash_password(password), role)
        print(f"Created {role}: {email} / {password}")

    print("Test credentials ready!")
    return 0

if __name__ == "__main__":
    sys.exit(asyncio.run(seed()))
