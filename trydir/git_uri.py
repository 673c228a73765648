"""Git URI recognition for the clone shortcut."""

from __future__ import annotations

from dataclasses import dataclass

from .text import today_prefix


@dataclass(frozen=True)
class GitUri:
    host: str
    user: str
    repo: str


def parse_git_uri(raw: str) -> GitUri | None:
    """Parse ``http(s)://host/user/repo`` or ``git@host:user/repo`` (optional ``.git``)."""
    uri = raw.strip()
    if uri.endswith(".git"):
        uri = uri[: -len(".git")]

    for scheme in ("http://", "https://"):
        if uri.startswith(scheme):
            parts = uri[len(scheme):].split("/")
            if len(parts) < 3:
                return None
            return GitUri(host=parts[0], user=parts[1], repo=parts[2])

    if uri.startswith("git@"):
        host, sep, path = uri[len("git@"):].partition(":")
        if not sep:
            return None
        user, sep, rest = path.partition("/")
        if not sep:
            return None
        return GitUri(host=host, user=user, repo=rest.split("/")[0])
    return None


def is_git_uri(arg: str) -> bool:
    """Loose check: URL schemes, ``git@``, well-known hosts, or a ``.git`` suffix."""
    candidate = arg.strip()
    return (
        candidate.startswith(("http://", "https://", "git@"))
        or "github.com" in candidate
        or "gitlab.com" in candidate
        or candidate.endswith(".git")
    )


def generate_clone_directory_name(
    git_uri: str,
    custom_name: str | None = None,
    now: float | None = None,
) -> str | None:
    """Return ``custom_name`` when given, else ``YYYY-MM-DD-user-repo``."""
    if custom_name:
        return custom_name
    parsed = parse_git_uri(git_uri)
    if parsed is None:
        return None
    return f"{today_prefix(now)}-{parsed.user}-{parsed.repo}"
