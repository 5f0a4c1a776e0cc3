"""Generate a poem for a local image file or an image URL."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from image_bard.imgproc import ImageNormalizer, LocalFile
from image_bard.monitoring.logging import configure_logging
from image_bard.poem import PoemGenerator
from image_bard.services import ImageBardSession


async def run(source: str) -> int:
    generator = PoemGenerator()
    session = ImageBardSession(ImageNormalizer(), generator)
    try:
        if source.startswith(("http://", "https://")):
            await session.load_remote_url(source)
        else:
            session.load_local_file(await LocalFile.from_path(Path(source)))

        if session.state.image is not None:
            await session.generate_poem()
    finally:
        await generator.close()

    if session.state.error:
        print(session.state.error, file=sys.stderr)
        return 1
    print(session.state.poem)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", help="Path to an image file or an http(s) image URL.")
    args = parser.parse_args()

    configure_logging()
    sys.exit(asyncio.run(run(args.source)))


if __name__ == "__main__":
    main()
