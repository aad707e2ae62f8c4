"""Navigation schemas.

``RawNavConfig`` validates the parts of ``mkdocs.yml`` we care about;
the ``Nav*`` dataclasses are the parsed navigation tree the walker consumes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import BaseModel, field_validator

# Value prefix used by mkdocs-monorepo-plugin: ``Title: '!include ./site/mkdocs.yml'``
INCLUDE_PREFIX = "!include "


class RawNavConfig(BaseModel):
    """Subset of ``mkdocs.yml`` read by the walker. Unknown keys are ignored."""
    site_name: Optional[str] = None
    docs_dir: Optional[str] = None
    nav: List[Any] = []

    @field_validator('nav', mode='before')
    @classmethod
    def allow_missing_nav(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator('docs_dir')
    @classmethod
    def strip_docs_dir(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip().strip('/') or None


@dataclass(frozen=True)
class IncludeDirective:
    """Value of an unquoted ``!include`` YAML tag."""
    reference: str


@dataclass(frozen=True)
class NavLeaf:
    """A file reference (``index.md``, ``https://...``)."""
    reference: str


@dataclass(frozen=True)
class NavSection:
    """A titled group; its title is one breadcrumb segment for every descendant."""
    title: str
    children: tuple = ()


@dataclass(frozen=True)
class NavInclusion:
    """A nested sub-site config, relative to the tree root."""
    reference: str


NavNode = Union[NavLeaf, NavSection, NavInclusion]


@dataclass(frozen=True)
class NavConfig:
    """A loaded site or sub-site configuration."""
    config_path: Path
    site_name: Optional[str] = None
    docs_dir: Optional[str] = None
    nav: tuple = field(default_factory=tuple)

    def docs_root(self, default_docs_dir: str = "docs") -> Path:
        """Absolute document root: ``<config dir>/<docs_dir>``."""
        return self.config_path.parent / (self.docs_dir or default_docs_dir)


def parse_nav(raw: Any) -> List[NavNode]:
    """Turn the raw YAML ``nav`` value into tagged nodes, preserving order."""
    if isinstance(raw, list):
        nodes: List[NavNode] = []
        for item in raw:
            nodes.extend(parse_nav(item))
        return nodes

    if isinstance(raw, IncludeDirective):
        return [NavInclusion(raw.reference)]

    if isinstance(raw, str):
        if raw.startswith(INCLUDE_PREFIX):
            return [NavInclusion(raw[len(INCLUDE_PREFIX):].strip())]
        return [NavLeaf(raw)]

    if isinstance(raw, dict):
        return [
            NavSection(str(title), tuple(parse_nav(value)))
            for title, value in raw.items()
        ]

    # null entries, numbers
    return []
