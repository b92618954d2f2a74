"""Development database setup - creates every table without Alembic."""
import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from offroad.database import engine, Base
from offroad import models  # noqa: F401


async def create_tables():
    """Create all database tables."""
    print("Creating database tables...")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    print("Tables created: " + ", ".join(sorted(Base.metadata.tables)))


async def main():
    print("Off-Road Adventures - Database Initialization")
    print("=" * 60)

    try:
        await create_tables()
        print("\nNext steps:")
        print("  1. Create an admin: python scripts/create_admin.py")
        print("  2. Start the app: uvicorn offroad.main:app --reload")
    except Exception as e:
        print(f"\nInitialization failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
