import os
from pathlib import Path
from typing import Mapping, NamedTuple

from mygit.entities.git_commit import DEFAULT_AUTHOR_EMAIL, DEFAULT_AUTHOR_NAME

DEFAULT_GIT_DIR_NAME = ".git"


class Config(NamedTuple):
    work_dir: Path
    git_dir_name: str = DEFAULT_GIT_DIR_NAME
    author_name: str = DEFAULT_AUTHOR_NAME
    author_email: str = DEFAULT_AUTHOR_EMAIL
    debug: bool = False

    @property
    def git_dir(self) -> Path:
        return self.work_dir / self.git_dir_name


def _is_truthy(value: str | None) -> bool:
    return value is not None and value.strip().lower() in ("1", "true", "yes")


def load_config(work_dir: Path = Path(), environ: Mapping[str, str] | None = None) -> Config:
    """Build the configuration for work_dir, taking MYGIT_* overrides from the environment."""
    if environ is None:
        environ = os.environ

    return Config(
        work_dir=Path(work_dir),
        git_dir_name=environ.get("MYGIT_DIR", DEFAULT_GIT_DIR_NAME),
        author_name=environ.get("MYGIT_AUTHOR_NAME", DEFAULT_AUTHOR_NAME),
        author_email=environ.get("MYGIT_AUTHOR_EMAIL", DEFAULT_AUTHOR_EMAIL),
        debug=_is_truthy(environ.get("MYGIT_DEBUG")),
    )
