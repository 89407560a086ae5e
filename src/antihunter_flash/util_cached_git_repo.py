"""
GIT CLONE of the esptool repo

If esptool is not installed, the repo is cloned once into the
esptool directory (default: ./esptool) and reused on later runs.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import re

from .util_subprocess import subprocess_run

logger = logging.getLogger(__file__)
GIT_CLONE_TIMEOUT_S = 240.0

GIT_REF_TAG_BRANCH = "@"

RE_GIT_SPEC = re.compile(
    rf"^(?P<url>(.+?://)?[^{GIT_REF_TAG_BRANCH}]+?)({GIT_REF_TAG_BRANCH}(?P<branch>.+))?$"
)
"""
https://github.com/alphafox02/esptool
# branch:
https://github.com/alphafox02/esptool@master
# tag:
https://github.com/espressif/esptool.git@v4.8.1
"""


@dataclasses.dataclass(frozen=True, repr=True)
class GitSpec:
    """
    https://github.com/espressif/esptool.git@v4.8.1
    """

    git_spec: str
    "https://github.com/espressif/esptool.git@v4.8.1"
    url: str
    "https://github.com/espressif/esptool.git"
    branch: str | None
    "v4.8.1"

    @property
    def render_git_spec(self) -> str:
        spec = self.url
        if self.branch is not None:
            spec += f"{GIT_REF_TAG_BRANCH}{self.branch}"
        return spec

    @classmethod
    def parse(cls, git_ref: str) -> GitSpec:
        match = RE_GIT_SPEC.match(git_ref)
        if match is None:
            raise ValueError(f"Failed to parse git_spec '{git_ref}'!")

        return GitSpec(
            git_spec=git_ref,
            url=match.group("url"),
            branch=match.group("branch"),
        )


class CachedGitRepo:
    """
    Lazy cloning of the repo.
    The repo is cloned if 'directory/filename_marker' does not exist.
    An existing clone is never updated.
    """

    def __init__(
        self,
        directory: pathlib.Path,
        git_spec: str,
        filename_marker: str,
    ) -> None:
        assert isinstance(directory, pathlib.Path)
        assert isinstance(git_spec, str)
        assert isinstance(filename_marker, str)
        # Example 'directory': ./esptool
        # Example 'git_spec': https://github.com/alphafox02/esptool
        # Example 'filename_marker': esptool.py

        self.directory = directory
        self.filename_marker = filename_marker
        self.git_spec = GitSpec.parse(git_ref=git_spec)

        logger.debug(f"{self.git_spec.git_spec} -> {self.git_spec}")

    @property
    def is_cloned(self) -> bool:
        return (self.directory / self.filename_marker).is_file()

    def clone(self) -> None:
        self.directory.parent.mkdir(parents=True, exist_ok=True)

        args = [
            "git",
            "clone",
            "--quiet",
            self.git_spec.url,
            self.directory.name,
        ]
        if self.git_spec.branch is not None:
            args.append(f"--branch={self.git_spec.branch}")
        subprocess_run(
            args=args,
            cwd=self.directory.parent,
            timeout_s=GIT_CLONE_TIMEOUT_S,
        )

        if not self.is_cloned:
            raise ValueError(
                f"git clone {self.git_spec.git_spec}: '{self.filename_marker}' is missing in {self.directory}"
            )

        logger.info(
            f"[COLOR_SUCCESS]git clone {self.git_spec.render_git_spec} -> {self.directory}"
        )
