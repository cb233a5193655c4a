"""Identify the VCS of a local checkout and ask it for its server remotes.

Git remotes are read in-process with pygit2. There is no in-process svn
client, so Svn shells out to the command line tool.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import pygit2

from constants import Constants
from errors import EmptyResultError, UrlParseError
from common.shell import run_command
from buildreq.models import UnknownVcs, Url, VcsKind, VcsSystem

logger = logging.getLogger(__name__)


class Svn:
    """Subversion working copies."""

    marker = Constants.SVN_MARKER

    @classmethod
    def is_repo(cls, path: Union[str, Path]) -> bool:
        return (Path(path) / cls.marker).exists()

    @staticmethod
    def get_server_urls(path: Union[str, Path]) -> List[Url]:
        """The working copy's URL, pointed at ``tags`` instead of ``trunk``."""
        logger.debug("Svn.get_server_urls(%s)", path)
        out = run_command(["svn", "info", "--show-item", "url", "--no-newline"], cwd=str(path))
        url = out.strip().replace("trunk", "tags")
        if not url:
            return []
        return [Url.parse(url)]


class Git:
    """Git clones."""

    marker = Constants.GIT_MARKER

    @classmethod
    def is_repo(cls, path: Union[str, Path]) -> bool:
        return (Path(path) / cls.marker).exists()

    @staticmethod
    def get_remote_strings(path: Union[str, Path]) -> List[str]:
        """Raw URLs of every configured remote, in repository config order.

        Raises:
            EmptyResultError: If ``path`` is not a readable git repository.
        """
        try:
            repo = pygit2.Repository(str(path))
            remotes = list(repo.remotes)
        except pygit2.GitError as exc:
            raise EmptyResultError(f"Unable to open git repository at {path}: {exc}") from exc
        urls = []
        for remote in remotes:
            logger.debug("remote %s: %s", remote.name, remote.url)
            if remote.url:
                urls.append(remote.url.strip())
        return urls

    @classmethod
    def get_server_urls(cls, path: Union[str, Path]) -> List[Url]:
        """Remote URLs that parse as absolute URLs (scp-style remotes are skipped)."""
        logger.debug("Git.get_server_urls(%s)", path)
        urls = []
        for raw in cls.get_remote_strings(path):
            try:
                urls.append(Url.parse(raw))
            except UrlParseError as exc:
                logger.debug("skipping remote: %s", exc)
        return urls


_BACKENDS = {
    VcsSystem.SVN: Svn,
    VcsSystem.GIT: Git,
}


def identify_vcs(path: Union[str, Path]) -> VcsKind:
    """Detect the VCS from marker directories.

    When neither marker exists the result is ``UnknownVcs`` whose ``name`` is
    the probed path.
    """
    for vcs, backend in _BACKENDS.items():
        if backend.is_repo(path):
            return vcs
    return UnknownVcs(str(path))


def get_server_urls(vcs: VcsKind, path: Union[str, Path]) -> List[Url]:
    """Ask ``vcs`` for the server remotes of the checkout at ``path``.

    Raises:
        EmptyResultError: If ``vcs`` is not svn or git, or the git repository
            cannot be opened.
        CommandError: If the svn tool fails.
    """
    backend = _BACKENDS.get(vcs) if isinstance(vcs, VcsSystem) else None
    if backend is None:
        raise EmptyResultError(f"SCM must either be svn or git, not {vcs}")
    return backend.get_server_urls(path)
