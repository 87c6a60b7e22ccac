"""Zip packaging of a staged bundle directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator
from zipfile import ZIP_DEFLATED, ZipFile

from central_publisher.exceptions import InvalidInputError, PublisherIOError


class ZipBundleBuilder:
    """Package every file below a directory into one zip archive."""

    def __init__(self) -> None:
        self.log = logging.getLogger(self.__class__.__name__)

    def build_archive(self, source_dir: Path, target_file: Path) -> Path:
        if not source_dir.is_dir():
            raise InvalidInputError(f"Source folder {source_dir} does not exist")
        tmp_archive = target_file.with_name(f"{target_file.name}.tmp")
        entries = 0
        try:
            target_file.parent.mkdir(parents=True, exist_ok=True)
            with ZipFile(tmp_archive, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
                for item in self._iter_files(source_dir, skip=(target_file, tmp_archive)):
                    zf.write(item, item.relative_to(source_dir).as_posix())
                    entries += 1
            tmp_archive.replace(target_file)
        except OSError as exc:
            tmp_archive.unlink(missing_ok=True)
            raise PublisherIOError(f"Failed to create archive {target_file} from {source_dir}: {exc}") from exc
        self.log.info("Created archive %s from %s (%d entries)", target_file, source_dir, entries)
        return target_file

    def _iter_files(self, directory: Path, skip: tuple) -> Iterator[Path]:
        resolved_skip = {path.resolve() for path in skip}
        for item in sorted(directory.iterdir()):
            if item.is_symlink() and item.is_dir():
                self.log.debug("Skipping linked directory %s", item)
                continue
            if item.is_dir():
                yield from self._iter_files(item, skip)
            elif item.is_file() and item.resolve() not in resolved_skip:
                yield item


def build_archive(source_dir: Path, target_file: Path) -> Path:
    return ZipBundleBuilder().build_archive(source_dir, target_file)
