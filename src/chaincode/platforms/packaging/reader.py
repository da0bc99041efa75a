"""Python-based reader for gzip-compressed chaincode tar packages."""

from collections.abc import Iterator
import gzip
import io
import stat
import tarfile
import zlib

from ..exceptions import MalformedArchiveError
from ..models import ArchiveEntry

_TYPE_BITS = {
    tarfile.REGTYPE: stat.S_IFREG,
    tarfile.AREGTYPE: stat.S_IFREG,
    tarfile.CONTTYPE: stat.S_IFREG,
    tarfile.DIRTYPE: stat.S_IFDIR,
    tarfile.SYMTYPE: stat.S_IFLNK,
    tarfile.LNKTYPE: stat.S_IFLNK,
    tarfile.CHRTYPE: stat.S_IFCHR,
    tarfile.BLKTYPE: stat.S_IFBLK,
    tarfile.FIFOTYPE: stat.S_IFIFO,
}


def entry_mode(member: tarfile.TarInfo) -> int:
    """
    Returns the full POSIX mode of a tar member.

    Some writers keep the file-type bits in the header's mode field and some
    strip them, so the type bits are rebuilt from the member's type flag.
    Unknown member types report every type bit.
    """
    return member.mode | _TYPE_BITS.get(member.type, stat.S_IFMT)


class ArchiveReader:
    """Decodes a code package into `ArchiveEntry` values, in archive order."""

    def __init__(self, code: bytes) -> None:
        self.code = code

    def entries(self, read_content: bool = True) -> Iterator[ArchiveEntry]:
        if not self.code:
            return

        try:
            raw = gzip.decompress(self.code)
        except (OSError, EOFError, zlib.error) as e:
            raise MalformedArchiveError(
                f"failure opening code package gzip stream: {e}"
            ) from e

        # An archive holding only end-of-archive blocks has no entries.
        if not raw.strip(b"\0"):
            return

        try:
            with tarfile.open(fileobj=io.BytesIO(raw), mode="r:") as tar:
                for member in tar:
                    content = b""
                    if read_content and member.isreg():
                        extracted = tar.extractfile(member)
                        if extracted is not None:
                            content = extracted.read()
                    yield ArchiveEntry(
                        path=member.name, mode=entry_mode(member), content=content
                    )

                # tarfile stops quietly at a bad header past the first member.
                if raw[tar.offset :].strip(b"\0"):
                    raise MalformedArchiveError(
                        f"failure reading code package: invalid header at offset {tar.offset}"
                    )
        except (tarfile.TarError, ValueError) as e:
            raise MalformedArchiveError(f"failure reading code package: {e}") from e

    def get_info(self) -> str:
        """Returns a human-readable listing of the package contents."""
        entries = list(self.entries())
        lines = [
            "Code Package Information:",
            f"  Compressed Size: {len(self.code)} bytes",
            f"  Entries: {len(entries)}",
        ]
        for entry in entries:
            lines.append(f"    {entry.mode:07o} {entry.size:>10} {entry.path}")
        return "\n".join(lines)
