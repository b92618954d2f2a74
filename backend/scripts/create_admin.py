"""Create or promote an admin account."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select
from offroad.database import AsyncSessionLocal
from offroad.models.user import User, UserRole
from offroad.utils.security import hash_password


async def create_admin_user(
    email: str = "admin@offroadadventures.com",
    password: str = "admin123",
    name: str = "Admin User",
    phone: str = "+1234567890"
):
    """
    Create an admin user, or reset the password and promote an existing one.

    Args:
        email: Admin email
        password: Admin password
        name: Display name
        phone: Contact phone (must be unique)
    """
    email = email.lower()
    print(f"\nCreating admin user: {email}")

    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(User).where(User.email == email)
        )
        existing_user = result.scalar_one_or_none()

        if existing_user:
            print(f"User {email} already exists. Updating password and role...")
            existing_user.password_hash = hash_password(password)
            existing_user.role = UserRole.ADMIN.value
            existing_user.is_active = True
            await session.commit()
            print(f"Updated user: {email}")
            return

        admin = User(
            name=name,
            email=email,
            phone=phone,
            role=UserRole.ADMIN.value,
            is_active=True,
            password_hash=hash_password(password),
        )

        session.add(admin)
        await session.commit()

        print("Created admin user successfully!")
        print(f"   Email: {email}")
        print(f"   Phone: {phone}")


async def main():
    """Main function."""
    print("Off-Road Adventures - Admin User Creator")
    print("=" * 60)

    if len(sys.argv) > 1:
        email = sys.argv[1]
    else:
        email = input("Admin email (default: admin@offroadadventures.com): ").strip()
        if not email:
            email = "admin@offroadadventures.com"

    if len(sys.argv) > 2:
        password = sys.argv[2]
    else:
        password = input("Admin password (default: admin123): ").strip()
        if not password:
            password = "admin123"

    try:
        await create_admin_user(email=email, password=password)
        print("\n" + "=" * 60)
        print("Setup complete! You can now login with:")
        print(f"   Email: {email}")

    except Exception as e:
        print(f"\nError creating admin user: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
