"""
Source path normalization.

DWARF file entries are split into a directory and a path name, written by
compilers on any host. Both are joined into one forward-slash path that is
used as the key identifying a source file.
"""


class SourcePath:
    """
    A slash-normalized path built by successive joins.

    A pushed fragment that is absolute (leading '/') or a URI (contains
    '://') replaces everything accumulated so far.
    """

    def __init__(self, seed: str):
        self._path = seed.replace('\\\\', '/').replace('\\', '/')

    def push(self, fragment: str) -> 'SourcePath':
        if fragment.startswith('/') or '://' in fragment:
            self._path = fragment
        else:
            if not self._path.endswith('/'):
                self._path += '/'
            self._path += fragment
        return self

    def __str__(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"SourcePath({self._path!r})"


def normalize_path(seed: str, *fragments: str) -> str:
    """
    Join path fragments onto a seed.

    Args:
        seed: Initial path, backslashes are converted to '/'
        fragments: Fragments pushed in order

    Returns:
        The joined path
    """
    path = SourcePath(seed)
    for fragment in fragments:
        path.push(fragment)
    return str(path)
