"""Script to import the medicine price list from a CSV file into the database."""

import asyncio
import io
import sys
from pathlib import Path

from components.core.init_db import db_manager, get_db
from components.medicine.repository import MedicinePriceRepository


async def import_data(csv_path: Path):
    """Import medicine prices from a tab-separated CSV file."""
    if not csv_path.exists():
        print(f"Error: File not found at {csv_path}")
        return

    await db_manager.create_tables()
    file_content = csv_path.read_bytes()
    print(f"Reading file: {csv_path} ({len(file_content)} bytes)")

    async for db in get_db():
        repo = MedicinePriceRepository(db)
        success, message, errors = await repo.upload_prices_from_csv(io.BytesIO(file_content))

        print(f"Success: {success}")
        print(f"Message: {message}")
        for error in errors:
            print(f"  Row {error['row']}: {error['message']}")
        break  # Only need one session


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data/medicine_prices.csv")
    asyncio.run(import_data(path))
