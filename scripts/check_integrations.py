"""Check that the poem model endpoint is reachable; exits 1 when it is not."""

from __future__ import annotations

import asyncio
import sys

from image_bard.integrations import run_all_checks
from image_bard.monitoring.logging import configure_logging


async def _run() -> int:
    results = await run_all_checks()
    for result in results:
        marker = "ok" if result.success else "FAILED"
        print(f"[{marker}] {result.name}: {result.message}")
    return 0 if all(result.success for result in results) else 1


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(_run()))


if __name__ == "__main__":
    main()
