"""Check that the configured storage provider is reachable.

Lists the prompts root with the configured credentials and logs every
prompt found. Exits non-zero when no provider is configured or the
listing fails.
"""

import argparse
import asyncio
import logging
import sys

from .config import Settings
from .config import get_settings
from .exceptions import PromptMCPError
from .paths import normalize_root
from .storage import create_storage_backend
from .storage.factory import get_storage_info

logger = logging.getLogger(__name__)


async def verify_storage(settings: Settings) -> int:
    """List the prompts root once; return the process exit code."""
    storage = create_storage_backend(settings)
    info = get_storage_info(storage, settings)
    if info["backend_type"] == "none":
        logger.error("No storage provider configured: set Dropbox or WebDAV credentials in the environment or .env")
        return 1

    logger.info(f"Connecting to {info['backend_type']} (root: {info['root_path']})...")
    try:
        entries = await storage.list_entries()
    except PromptMCPError as e:
        logger.error(f"Connection failed: {e.message}")
        logger.error(f"Details: {e.to_dict()}")
        return 1
    finally:
        await storage.aclose()

    logger.info(f"Connection successful, {len(entries)} prompt files found:")
    for entry in entries:
        logger.info(f"   - {entry.path_display}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Verify Prompt MCP storage connectivity")
    parser.add_argument("--root", help="Override the prompts root path for this check")
    args = parser.parse_args()

    logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s: %(message)s")

    settings = get_settings()
    if args.root:
        settings = settings.model_copy(update={"prompts_root_path": normalize_root(args.root)})
    sys.exit(asyncio.run(verify_storage(settings)))


if __name__ == "__main__":
    main()
