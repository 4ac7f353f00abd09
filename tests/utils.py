import logging
from pathlib import Path

import libtorrent as lt

logger = logging.getLogger(__name__)


def create_torrent_file(
    payload_file: str, tracker: str, workspace: str, comment: str | None = None
) -> str:
    """Create a torrent file describing the payload, using libtorrent"""
    payload_path = Path(workspace) / payload_file

    fs = lt.file_storage()
    lt.add_files(fs, str(payload_path))

    t = lt.create_torrent(fs)
    t.add_tracker(tracker)
    t.set_creator("bdecode-tests")
    if comment:
        t.set_comment(comment)

    lt.set_piece_hashes(t, str(payload_path.parent))
    torrent_data = lt.bencode(t.generate())

    torrent_path = payload_path.with_suffix(".torrent")
    torrent_path.write_bytes(torrent_data)

    logger.debug(f"Torrent file: {str(torrent_path)}, {len(torrent_data)} bytes")

    return str(torrent_path)


def create_payload(workspace: str, size: int = 1024 * 1024) -> str:
    """Create a test payload file in the workspace"""
    payload_file = Path(workspace) / "payload.dat"
    payload_file.write_bytes(bytes(range(256)) * (size // 256) + b"A" * (size % 256))
    return str(payload_file)
