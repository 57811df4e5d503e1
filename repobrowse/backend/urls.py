"""Clone URL templating."""

from urllib.parse import urlparse


def sanitize_repo(name: str) -> str:
    """Normalise a repository name: strip slashes and a trailing ``.git``."""
    name = name.strip().strip("/")
    if name.endswith(".git"):
        name = name[: -len(".git")]
    return name


def repo_url(public_url: str, name: str) -> str:
    """
    Build the URL a repository is cloned from.

    SSH URLs on the default port collapse to scp-like ``git@host:name.git``;
    any other URL gets ``/name.git`` appended.
    """
    name = sanitize_repo(name) + ".git"
    parsed = urlparse(public_url)
    if parsed.scheme == "ssh":
        port = parsed.port
        if port is None or port == 22:
            return f"git@{parsed.hostname}:{name}"
        return f"ssh://{parsed.hostname}:{port}/{name}"
    return f"{public_url.rstrip('/')}/{name}"


def clone_command(public_url: str, name: str) -> str:
    """The ``git clone`` command shown in the header and copied on click."""
    return f"git clone {repo_url(public_url, name)}"
