from typing import List, Union
from urllib.parse import unquote, urlparse


def parse_path_list(data: Union[bytes, str]) -> List[str]:
    """Parse a ``text/uri-list`` or GNOME copied-files payload into paths.

    Order is preserved. Comment lines and a leading ``copy``/``cut`` verb are
    dropped; URL entries are unquoted, plain paths are kept verbatim.
    """
    if isinstance(data, bytes):
        text = data.decode("utf-8", errors="ignore")
    else:
        text = data

    lines = [line.strip() for line in text.replace(
        "\r", "\n").split("\n") if line.strip()]
    if lines and lines[0].lower() in {"copy", "cut"}:
        lines = lines[1:]

    paths: List[str] = []
    for entry in lines:
        if entry.startswith("#"):
            continue
        parsed = urlparse(entry)
        if parsed.scheme == "file":
            paths.append(unquote(parsed.path))
        elif len(parsed.scheme) > 1:
            paths.append(unquote(entry))
        else:
            # plain path, or a Windows drive letter parsed as a scheme
            paths.append(entry)

    return paths
