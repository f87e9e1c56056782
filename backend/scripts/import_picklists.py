"""Import forge picklists and pricing tables from a JSON file.

Usage: python scripts/import_picklists.py picklists.json
"""
import asyncio
import json
import sys
from pathlib import Path

from campaignforge.database import get_db_session, init_db
from campaignforge.schemas.forge import PicklistImport
from campaignforge.services.picklists import import_picklists


async def main(path: Path):
    with open(path, "r", encoding="utf-8") as f:
        data = PicklistImport.model_validate(json.load(f))

    await init_db()
    async with get_db_session() as session:
        result = await import_picklists(session, data)

    for table, count in result.created.items():
        print(f"{table}: {count} created, {result.updated.get(table, 0)} updated")
    for table, count in result.replaced.items():
        print(f"{table}: replaced with {count} rows")


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    asyncio.run(main(Path(sys.argv[1])))
