"""
Seed script to populate a demo project.

Run this script after database initialization to create:
- A "Billing" project with a generated API key
- A handful of billing permissions
- An "Admins" group with every permission enabled and a "Viewers" group
  with only the read permissions enabled

Usage:
    uv run python -m scripts.seed_projects
"""
import asyncio

from app.core.database.engine import AsyncSessionLocal, init_db
from app.features.permissions import service
from app.utils import get_logger


log = get_logger(__name__)


DEMO_PROJECT = ("Billing", "Invoices and payments")

DEMO_PERMISSIONS = [
    ("invoice.read", "View invoices"),
    ("invoice.create", "Create invoices"),
    ("invoice.void", "Void issued invoices"),
    ("payment.read", "View payments"),
    ("payment.refund", "Refund payments"),
]

DEMO_GROUPS = {
    "Admins": "ALL",
    "Viewers": ["invoice.read", "payment.read"],
}


async def main():
    """Create the demo project, permissions, and groups."""
    log.info("Starting project seeding...")

    log.info("Initializing database tables...")
    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            project = await service.create_project(db, *DEMO_PROJECT)

            permissions = {}
            for key, description in DEMO_PERMISSIONS:
                permission = await service.create_permission(db, project.id, key, description)
                permissions[key] = permission.id

            for group_name, enabled_keys in DEMO_GROUPS.items():
                group = await service.create_group(db, project.id, group_name)
                if enabled_keys == "ALL":
                    enabled_keys = list(permissions)
                for key in enabled_keys:
                    await service.set_group_permission(db, group.id, permissions[key], True)
                log.info("Created group '%s' with %d permissions", group_name, len(enabled_keys))

            log.info("Project seeding completed successfully!")
            log.info("  - %s: api key %s", project.name, project.api_key)

        except Exception as e:
            log.error("Error seeding projects: %s", e, exc_info=True)
            await db.rollback()
            raise


if __name__ == "__main__":
    asyncio.run(main())
