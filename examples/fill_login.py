"""Fill a login form and report missing fields."""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from playwright_query import PlaywrightQuery

load_dotenv()

LOGIN_FORM = """
<form id="login">
  <input name="user">
  <input name="pass" type="password">
</form>
"""


async def main():
    async with PlaywrightQuery(verbose=2) as pq:
        page = await pq.page()
        await page.set_content(LOGIN_FORM)

        result = await page.fill_form("#login", {
            "user": os.getenv("LOGIN_USER", "alice"),
            "pass": os.getenv("LOGIN_PASS", "secret"),
            "otp": "000000",
        })

        for field in result.fields:
            status = "filled" if field.filled else f"skipped ({field.error})"
            print(f"{field.field}: {status}")

        user = await page.q('#login [name="user"]').prop("value")
        print(f"user = {user}")


if __name__ == "__main__":
    asyncio.run(main())
