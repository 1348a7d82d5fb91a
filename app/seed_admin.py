import asyncio
import sys

from sqlalchemy.future import select
from app.core.db import SessionLocal
from app.modules.profiles.models import Profile, UserRole

async def seed_admin(email: str):
    """
    Promote an existing profile to admin.
    The user must have signed in once through the identity provider so the profile exists.
    """
    async with SessionLocal() as session:
        result = await session.execute(select(Profile).where(Profile.email == email))
        profile = result.scalars().first()

        if not profile:
            print(f"No profile for {email}. Sign in once first.")
            return

        if profile.role == UserRole.ADMIN:
            print("Profile is already an admin.")
            return

        profile.role = UserRole.ADMIN
        await session.commit()
        print(f"{email} promoted to admin.")

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python -m app.seed_admin <email>")
        sys.exit(1)
    asyncio.run(seed_admin(sys.argv[1]))
