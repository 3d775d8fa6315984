"""
Example usage of the Notion Sitemap library
"""

import asyncio
import logging
import os

from notion_sitemap import NotionClient, SitemapBuilder, SitemapConfig

# Enable logging to see progress
logging.basicConfig(level=logging.INFO)

config = SitemapConfig.from_env()
if not config.root_id:
    config.root_id = os.environ.get("EXAMPLE_ROOT_ID")

# Example 1: Fetch a single page
print("Example 1: Fetching the root page")
print("-" * 50)

client = NotionClient(config.token or "", timeout=config.timeout)

result = asyncio.run(client.fetch_document(config.root_id or ""))
if result.ok:
    print(f"URL: {result.value.get('url')}")
else:
    print(f"Failed to fetch page: {result.error}")

print("\n")

# Example 2: Sitemap two levels deep
print("Example 2: Sitemap two levels deep")
print("-" * 50)

config.max_depth = 2
sitemap = asyncio.run(SitemapBuilder(client, config).run())
print(sitemap.to_markdown())

client.close()
