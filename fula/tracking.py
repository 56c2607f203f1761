"""Track which stored blocks changed since the last check and which CIDs failed."""

import logging
import os
from datetime import datetime, timezone

from fula.cid import cid_from_block_filename

log = logging.getLogger("fula.blox")

DEFAULT_BLOCKS_DIR = "/uniondrive/ipfs_datastore/blocks"
DEFAULT_LAST_CHECKED_FILE = "/internal/.last_time_ipfs_checked"
DEFAULT_FAILED_CIDS_FILE = "/uniondrive/failed_cids.info"

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)

_TEMP_SUFFIX = ".temp"
_DATA_SUFFIX = ".data"


def _aware(moment):
    # Naive datetimes are taken as UTC.
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _mtime(entry):
    return datetime.fromtimestamp(entry.stat().st_mtime, timezone.utc)


def _rfc3339(moment):
    text = moment.isoformat(timespec="seconds")
    if text.endswith("+00:00"):
        text = text[: -len("+00:00")] + "Z"
    return text


def _sorted_entries(path):
    with os.scandir(path) as entries:
        return sorted(entries, key=lambda entry: entry.name)


class BlockTracker:
    """Find blocks written after a point in time and record CIDs that failed."""

    def __init__(
        self,
        blocks_dir=DEFAULT_BLOCKS_DIR,
        last_checked_file=DEFAULT_LAST_CHECKED_FILE,
        failed_cids_file=DEFAULT_FAILED_CIDS_FILE,
    ):
        self.blocks_dir = os.fspath(blocks_dir)
        self.last_checked_file = os.fspath(last_checked_file)
        self.failed_cids_file = os.fspath(failed_cids_file)

    def last_checked_time(self):
        """Return when the last check was recorded, or ZERO_TIME if never."""
        try:
            stat = os.stat(self.last_checked_file)
        except FileNotFoundError:
            return ZERO_TIME
        return datetime.fromtimestamp(stat.st_mtime, timezone.utc)

    def update_last_checked_time(self):
        """Record the current time as the time of the last check."""
        now = datetime.now().astimezone()
        with open(self.last_checked_file, "w", encoding="utf-8") as handle:
            handle.write(_rfc3339(now))

    def _modified_dirs(self, last_checked):
        found = []

        def walk(path):
            for entry in _sorted_entries(path):
                if not entry.is_dir(follow_symlinks=False):
                    continue
                if entry.name.endswith(_TEMP_SUFFIX):
                    walk(entry.path)
                    continue
                if _mtime(entry) > last_checked:
                    found.append(entry.path)
                else:
                    walk(entry.path)

        walk(self.blocks_dir)
        return found

    def _links_in(self, directory, last_checked):
        def walk(path):
            for entry in _sorted_entries(path):
                if entry.is_dir(follow_symlinks=False):
                    yield from walk(entry.path)
                    continue
                name = entry.name
                if name.endswith(_TEMP_SUFFIX) or not name.endswith(_DATA_SUFFIX):
                    continue
                if _mtime(entry) <= last_checked:
                    continue
                try:
                    yield cid_from_block_filename(entry.path)
                except ValueError:
                    continue

        links = []
        try:
            for link in walk(directory):
                links.append(link)
        except OSError as exc:
            log.error("Error walking through directory %s: %s", directory, exc)
        return links

    def list_modified_stored_blocks(self, last_checked):
        """Return CIDs of block files written after last_checked.

        Only directories modified after last_checked are searched; names ending
        in .temp are skipped and only .data files count.
        """
        last_checked = _aware(last_checked)
        log.debug("ListModifiedStoredBlocks lastChecked=%s", last_checked)
        modified_dirs = self._modified_dirs(last_checked)
        log.debug("ListModifiedStoredBlocks modifiedDirs=%s", modified_dirs)
        links = []
        for directory in modified_dirs:
            links.extend(self._links_in(directory, last_checked))
        log.debug("ListModifiedStoredBlocks modifiedLinks=%s", links)
        return links

    def update_failed_cids(self, links):
        """Append each link's text form, one per line, to the failed-CIDs file."""
        errors = []
        with open(self.failed_cids_file, "a", encoding="utf-8") as handle:
            for link in links:
                try:
                    handle.write(f"{link}\n")
                except OSError as exc:
                    errors.append(str(exc))
        if errors:
            raise OSError(
                "errors occurred while updating failed CIDs: " + "; ".join(errors)
            )