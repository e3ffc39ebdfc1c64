"""Writing resolved artifacts to the destination tree."""

import shutil
from pathlib import Path
from typing import Iterable, List, Tuple

import structlog

logger = structlog.get_logger(__name__)


class ArtifactWriter:
    """Write ``(path, content)`` pairs below a destination directory."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def clear(self, dist: Path) -> None:
        dist = Path(dist)
        if dist.exists():
            logger.info("Clear destination", dist=str(dist))
            shutil.rmtree(dist)

    def write(self, dist: Path, artifacts: Iterable[Tuple[str, str]], clean: bool = True) -> List[Path]:
        """Write every artifact; later duplicates of a path overwrite earlier ones."""
        dist = Path(dist)
        if clean:
            self.clear(dist)

        written = []
        for filepath, content in artifacts:
            target = dist / filepath
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding=self.encoding)
            logger.debug("Wrote artifact", path=str(target))
            written.append(target)

        logger.info("Wrote artifacts", dist=str(dist), count=len(written))
        return written
