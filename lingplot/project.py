"""Directory conventions for student projects

Every project lives in its own directory with four subdirectories, each with a
README file that explains what belongs there:

experiment
    Experiment scripts, stimulus lists and materials.
data
    Raw data as collected.
results
    Everything produced from ``data`` by analysis.
docs
    Documentation, notes, manuscripts and presentations.

.. autosummary::
   :toctree: generated

   new_project
   check_project
   assert_project
"""
from dataclasses import dataclass, field
import logging
from pathlib import Path
import re
from typing import List

from ._exceptions import ProjectLayoutError
from ._text import enumeration, n_of
from ._types import PathArg


PROJECT_DIRECTORIES = {
    'experiment': "Experiment scripts, stimulus lists and materials needed to run the experiment.",
    'data': "Raw data as collected. Files in this directory are never modified by hand; everything derived from them goes into results.",
    'results': "Everything produced from data by analysis scripts: tables, statistics and figures.",
    'docs': "Documentation: notes, manuscripts and presentations.",
}
README_PATTERN = re.compile(r'^readme(\.(md|txt|rst))?$', re.IGNORECASE)
# other top-level files that are expected in a project
EXTRA_PATTERN = re.compile(r'^(licen[cs]e|copying)(\.\w+)?$', re.IGNORECASE)


def find_readme(directory: Path):
    "README file in ``directory`` (``None`` if there is none)"
    for path in sorted(directory.iterdir()):
        if path.is_file() and README_PATTERN.match(path.name):
            return path
    return None


@dataclass
class ProjectCheck:
    """Result of checking a project directory

    Attributes
    ----------
    root
        Project directory.
    missing_directories
        Conventional directories that do not exist.
    missing_readmes
        Directories (``'.'`` for the project directory) without README file.
    empty_readmes
        README files that contain only white-space.
    unexpected
        Entries in the project directory that are not part of the conventions.
    """
    root: Path
    missing_directories: List[str] = field(default_factory=list)
    missing_readmes: List[str] = field(default_factory=list)
    empty_readmes: List[str] = field(default_factory=list)
    unexpected: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not (self.missing_directories or self.missing_readmes or self.empty_readmes or self.unexpected)

    @property
    def n_problems(self) -> int:
        return len(self.missing_directories) + len(self.missing_readmes) + len(self.empty_readmes) + len(self.unexpected)

    def __str__(self):
        if self.ok:
            return f"{self.root}: project layout OK"
        lines = [f"{self.root}: {n_of(self.n_problems, 'problem')}"]
        if self.missing_directories:
            lines.append(f"  Missing directories: {enumeration(self.missing_directories)}")
        if self.missing_readmes:
            lines.append(f"  Directories without README: {enumeration(self.missing_readmes)}")
        if self.empty_readmes:
            lines.append(f"  Empty README files: {enumeration(self.empty_readmes)}")
        if self.unexpected:
            lines.append(f"  Unexpected entries: {enumeration(self.unexpected)}")
        return '\n'.join(lines)


def _project_readme(name: str, title: str = None, author: str = None) -> str:
    lines = [f"# {title or name}", '']
    if author:
        lines += [f"Author: {author}", '']
    lines += ["## Directory structure", '']
    for directory, description in PROJECT_DIRECTORIES.items():
        lines += [f"### `{directory}`", '', description, '']
    return '\n'.join(lines)


def _directory_readme(directory: str) -> str:
    return f"# {directory}\n\n{PROJECT_DIRECTORIES[directory]}\n"


def new_project(
        dst: PathArg,
        name: str,
        title: str = None,
        author: str = None,
        exist_ok: bool = False,
) -> Path:
    """Create a new project directory following the conventions

    Parameters
    ----------
    dst
        Directory in which to create the project.
    name
        Name of the project directory.
    title
        Project title for the top-level README (default is ``name``).
    author
        Author(s) to list in the top-level README.
    exist_ok
        Complete an existing project directory that is not empty (missing
        directories and README files are added; existing README files are
        never overwritten).

    Returns
    -------
    root
        The project directory.
    """
    logger = logging.getLogger('lingplot')
    if not name or name in ('.', '..') or Path(name).name != name:
        raise ValueError(f"{name=}: needs to be a plain directory name")
    dst = Path(dst).expanduser()
    if not dst.is_dir():
        raise IOError(f"{dst=}: directory does not exist")
    root = dst / name
    if root.exists():
        if not root.is_dir():
            raise IOError(f"{root}: exists and is not a directory")
        elif any(root.iterdir()) and not exist_ok:
            raise IOError(f"{root}: directory exists and is not empty; set exist_ok=True to add missing parts")
    root.mkdir(exist_ok=True)

    if find_readme(root) is None:
        (root / 'README.md').write_text(_project_readme(name, title, author))
        logger.debug("Created %s", root / 'README.md')
    for directory in PROJECT_DIRECTORIES:
        path = root / directory
        path.mkdir(exist_ok=True)
        if find_readme(path) is None:
            (path / 'README.md').write_text(_directory_readme(directory))
            logger.debug("Created %s", path / 'README.md')
    logger.info("Created project %s", root)
    return root


def check_project(root: PathArg) -> ProjectCheck:
    """Check whether a directory follows the project conventions

    Parameters
    ----------
    root
        Project directory.

    Returns
    -------
    check
        Problems found in the directory (``check.ok`` is ``True`` when
        there are none).
    """
    root = Path(root).expanduser()
    if not root.exists():
        raise ProjectLayoutError(f"{root}: directory does not exist")
    elif not root.is_dir():
        raise ProjectLayoutError(f"{root}: not a directory")

    check = ProjectCheck(root)
    directories = [('.', root)]
    for directory in PROJECT_DIRECTORIES:
        path = root / directory
        if path.is_dir():
            directories.append((directory, path))
        else:
            check.missing_directories.append(directory)

    for directory, path in directories:
        readme = find_readme(path)
        if readme is None:
            check.missing_readmes.append(directory)
        elif not readme.read_text(errors='replace').strip():
            check.empty_readmes.append(str(readme.relative_to(root)))

    for path in sorted(root.iterdir()):
        name = path.name
        if name.startswith('.'):
            continue
        elif path.is_dir() and name in PROJECT_DIRECTORIES:
            continue
        elif path.is_file() and (README_PATTERN.match(name) or EXTRA_PATTERN.match(name)):
            continue
        check.unexpected.append(name)
    return check


def assert_project(root: PathArg) -> ProjectCheck:
    """Like :func:`check_project`, but raise an error if there are problems

    Raises
    ------
    ProjectLayoutError
        If the project does not follow the conventions (the error's
        ``report`` attribute is the :class:`ProjectCheck`).
    """
    check = check_project(root)
    if not check.ok:
        raise ProjectLayoutError(check)
    return check
