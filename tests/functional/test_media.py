"""
Test: list media and optionally upload a file
Usage:
  python tests/functional/test_media.py [path/to/file]
"""

import asyncio
import sys
from pathlib import Path

# Add repo root to path for package imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from tests.utils.read_credentials import read_credentials


async def main():
    creds = read_credentials()
    if not creds.get("COSMIC_BUCKET_SLUG") or not creds.get("COSMIC_READ_KEY"):
        print("Missing credentials. See tests/utils/credentials.txt.example")
        return
    from cosmic_sdk import CosmicClient

    async with CosmicClient(
        creds["COSMIC_BUCKET_SLUG"],
        creds["COSMIC_READ_KEY"],
        creds.get("COSMIC_WRITE_KEY"),
    ) as client:
        listing = await client.get_media(limit=5)
        for media in listing.media:
            print(f"  {media.id}  {media.name}  {media.url}")

        if len(sys.argv) > 1:
            uploaded = await client.upload_media(sys.argv[1], folder="functional-tests")
            print("Uploaded:", uploaded.url)


if __name__ == "__main__":
    asyncio.run(main())
