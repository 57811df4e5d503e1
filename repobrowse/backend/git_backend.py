"""
GitPython-backed repository access.

Every call opens its own ``git.Repo`` through ``connect()`` and closes it
before returning, which also stops the ``git cat-file`` helpers GitPython
keeps alive per repository object. Calls arrive from task worker threads
and GitPython objects must not be shared between them.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

import git

from ..exceptions import (
    EmptyRepositoryError,
    GitCommandError,
    PathNotFoundError,
    RepositoryNotFoundError,
)
from .models import Commit, Reference, Repository, TreeEntry
from .readme import README_PATTERN, find_latest_file

logger = logging.getLogger(__name__)

_DEFAULT_DESCRIPTION = "Unnamed repository"


class GitBackend:
    """Reads repositories on the local filesystem."""

    @contextmanager
    def connect(self, repository: Repository) -> Iterator[git.Repo]:
        """Open ``repository`` for the duration of a ``with`` block.

        Raises:
            RepositoryNotFoundError: If the repository has no usable path.
        """
        if repository.path is None:
            raise RepositoryNotFoundError(repository=repository.name)
        try:
            repo = git.Repo(repository.path)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise RepositoryNotFoundError(path=str(repository.path)) from e
        try:
            yield repo
        finally:
            repo.close()

    def open_repository(self, path: Path) -> Repository:
        """Resolve ``path`` to a repository handle.

        Raises:
            RepositoryNotFoundError: If ``path`` is not inside a git repository.
        """
        try:
            repo = git.Repo(path, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise RepositoryNotFoundError(path=str(path)) from e

        with repo:
            root = Path(repo.working_tree_dir or repo.git_dir)
            git_dir = Path(repo.git_dir)
            project_name = ""
            try:
                project_name = repo.config_reader().get_value(
                    "repobrowse", "projectname", default=""
                )
            except Exception as e:
                logger.debug(f"No project name for {root}: {e}")

        name = root.name
        if name.endswith(".git"):
            name = name[: -len(".git")]

        description = ""
        description_file = git_dir / "description"
        if description_file.exists():
            text = description_file.read_text(errors="replace").strip()
            if not text.startswith(_DEFAULT_DESCRIPTION):
                description = text

        logger.info(f"Opened repository {name} at {root}")
        return Repository(
            name=name,
            path=root,
            project_name=str(project_name),
            description=description,
        )

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def head(self, repository: Repository) -> Reference:
        """The reference HEAD points at.

        Raises:
            EmptyRepositoryError: If the repository has no commits yet.
        """
        with self.connect(repository) as repo:
            if not repo.head.is_valid():
                raise EmptyRepositoryError(repository=repository.name)
            commit = repo.head.commit.hexsha
            if repo.head.is_detached:
                return Reference("HEAD", commit)
            return Reference(repo.head.ref.path, commit)

    def references(self, repository: Repository) -> List[Reference]:
        """All branches followed by all tags."""
        refs: List[Reference] = []
        with self.connect(repository) as repo:
            for head in repo.heads:
                refs.append(Reference(head.path, head.commit.hexsha))
            for tag in repo.tags:
                try:
                    refs.append(Reference(tag.path, tag.commit.hexsha))
                except ValueError:
                    # Tags pointing at trees or blobs have no commit
                    refs.append(Reference(tag.path))
        return refs

    # ------------------------------------------------------------------
    # Trees and files
    # ------------------------------------------------------------------

    def tree(self, repository: Repository, ref: Reference, path: str = "") -> List[TreeEntry]:
        """Entries of the directory at ``path``, directories first."""
        with self.connect(repository) as repo:
            tree = self._tree(repo, ref, path)
            entries = [
                TreeEntry(path=t.path, name=t.name, is_dir=True, mode=t.mode)
                for t in tree.trees
            ]
            entries += [
                TreeEntry(path=b.path, name=b.name, size=b.size, mode=b.mode)
                for b in tree.blobs
            ]
        entries.sort(key=lambda e: (not e.is_dir, e.name.lower()))
        return entries

    def file_content(self, repository: Repository, ref: Reference, path: str) -> str:
        """Text of the file at ``path``; binary files get a placeholder."""
        with self.connect(repository) as repo:
            commit = self._commit(repo, ref)
            try:
                blob = commit.tree / path
            except KeyError as e:
                raise PathNotFoundError(path=path, ref=ref.short) from e
            data = blob.data_stream.read()
        if b"\0" in data[:8000]:
            return "(binary file)"
        return data.decode("utf-8", errors="replace")

    def latest_file(
        self, repository: Repository, ref: Reference, pattern: str
    ) -> Tuple[str, str]:
        """Contents and path of the first root file matching ``pattern``.

        A missing file is not an error: both values are empty.
        """
        entry = find_latest_file(self.tree(repository, ref), pattern)
        if entry is None:
            return "", ""
        return self.file_content(repository, ref, entry.path), entry.path

    def readme(self, repository: Repository, ref: Reference) -> Tuple[str, str]:
        """The repository README at ``ref``."""
        return self.latest_file(repository, ref, README_PATTERN)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def commit_count(self, repository: Repository, ref: Reference) -> int:
        with self.connect(repository) as repo:
            try:
                return int(repo.git.rev_list("--count", self._rev(ref)))
            except git.GitCommandError as e:
                raise GitCommandError(command="rev-list", ref=ref.short) from e

    def commits(
        self, repository: Repository, ref: Reference, skip: int = 0, limit: int = 50
    ) -> List[Commit]:
        """One page of history, newest first."""
        with self.connect(repository) as repo:
            try:
                return [
                    Commit(
                        hash=c.hexsha,
                        author=c.author.name or "",
                        date=c.committed_datetime,
                        summary=str(c.summary),
                        message=str(c.message),
                        parents=tuple(p.hexsha for p in c.parents),
                    )
                    for c in repo.iter_commits(self._rev(ref), skip=skip, max_count=limit)
                ]
            except git.GitCommandError as e:
                raise GitCommandError(command="log", ref=ref.short) from e

    def diff(self, repository: Repository, commit: str) -> str:
        """Stat and patch of a single commit."""
        with self.connect(repository) as repo:
            try:
                return repo.git.show("--stat", "--patch", "--format=medium", commit)
            except git.GitCommandError as e:
                raise GitCommandError(command="show", commit=commit) from e

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _rev(ref: Reference) -> str:
        return ref.commit or ref.name

    def _commit(self, repo: git.Repo, ref: Reference) -> git.Commit:
        try:
            return repo.commit(self._rev(ref))
        except (git.BadName, ValueError) as e:
            raise GitCommandError("Unknown revision", ref=ref.name) from e

    def _tree(self, repo: git.Repo, ref: Reference, path: str) -> git.Tree:
        tree = self._commit(repo, ref).tree
        if not path:
            return tree
        try:
            sub = tree / path
        except KeyError as e:
            raise PathNotFoundError(path=path, ref=ref.short) from e
        if sub.type != "tree":
            raise PathNotFoundError("Not a directory", path=path)
        return sub
