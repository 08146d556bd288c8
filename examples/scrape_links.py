"""Collect headings and links from a page."""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from playwright_query import PlaywrightQuery

load_dotenv()


async def main():
    url = os.getenv("TARGET_URL", "https://example.com")

    async with PlaywrightQuery(verbose=2) as pq:
        page = await pq.page()
        await page.goto(url)

        heading = page.q("h1")
        print(f"Heading: {await heading.text()}")
        print(f"Visible: {await heading.is_visible()}")

        if await page.exists("a"):
            for href in await page.get_elements_attribute("a", "href"):
                print(f"- {href}")
        else:
            print("No links found")


if __name__ == "__main__":
    asyncio.run(main())
