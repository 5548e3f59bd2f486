"""
PR description rendering for PRFlow.

Templates are plain text with literal ``#placeholder`` tokens. There is no
templating language: each known token is replaced by its value and
everything else is left untouched.
"""

import re
from pathlib import Path
from typing import Protocol, Union

from prflow.errors import TemplateNotFoundError, TemplateReadError

# Substitution order
PLACEHOLDERS = ("ticketId", "title", "description", "url", "username", "featureBranch")

PathLike = Union[str, Path]


class TextStore(Protocol):
    """Path-addressed text storage."""

    def exists(self, path: PathLike) -> bool: ...

    def read(self, path: PathLike) -> str: ...

    def write(self, path: PathLike, content: str) -> None: ...


class FileStore:
    """TextStore backed by the local filesystem."""

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def read(self, path: PathLike) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write(self, path: PathLike, content: str) -> None:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")


def build_context(
    ticket_id: str,
    title: str,
    description: str,
    url: str,
    username: str,
    feature_branch: str,
) -> dict[str, str]:
    """Template values keyed by placeholder name."""
    return {
        "ticketId": ticket_id,
        "title": title,
        "description": description,
        "url": url,
        "username": username,
        "featureBranch": feature_branch,
    }


def substitute(template: str, context: dict[str, str]) -> str:
    """
    Replace each ``#name`` token with ``context[name]``.

    Single pass, so a substituted value that happens to contain a token
    is never expanded again. Longer names are tried first.
    """
    names = [name for name in PLACEHOLDERS if name in context]
    names += [name for name in context if name not in PLACEHOLDERS]
    if not names:
        return template

    pattern = re.compile(
        "#(" + "|".join(re.escape(n) for n in sorted(names, key=len, reverse=True)) + ")"
    )
    return pattern.sub(lambda m: str(context[m.group(1)]), template)


class TemplateRenderer:
    """Loads a template from a TextStore and fills it in."""

    def __init__(self, store: TextStore = None):
        self.store = store or FileStore()

    def render(self, template_path: PathLike, context: dict[str, str]) -> str:
        """
        Render the template at ``template_path``.

        Raises:
            TemplateNotFoundError: If the template does not exist
            TemplateReadError: If it cannot be read or is not UTF-8
        """
        if not self.store.exists(template_path):
            raise TemplateNotFoundError(f"PR template not found: {template_path}")
        try:
            template = self.store.read(template_path)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateReadError(f"Could not read PR template {template_path}: {e}")
        return substitute(template, context)
