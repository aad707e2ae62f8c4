"""Load ``mkdocs.yml`` navigation configs.

MkDocs configs routinely carry tags ``yaml.safe_load`` refuses
(``!!python/name:...`` for plugin wiring, ``!ENV`` for variables) and the
monorepo plugin allows an unquoted ``!include`` tag. A private SafeLoader
subclass resolves ``!include`` into an ``IncludeDirective`` and falls back
to the plain node value for every other unknown tag, so the global
``yaml.SafeLoader`` is never modified.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from ..exceptions import NavConfigError
from ..schemas.navigation import IncludeDirective, NavConfig, RawNavConfig, parse_nav

logger = logging.getLogger(__name__)


class _MkdocsLoader(yaml.SafeLoader):
    """SafeLoader that tolerates MkDocs-specific tags."""


def _construct_include(loader: _MkdocsLoader, node: Node) -> IncludeDirective:
    return IncludeDirective(str(loader.construct_scalar(node)).strip())


def _construct_unknown(loader: _MkdocsLoader, _suffix: str, node: Node) -> Any:
    """Return the untagged value for tags we do not interpret."""
    if isinstance(node, ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, SequenceNode):
        return loader.construct_sequence(node, deep=True)
    if isinstance(node, MappingNode):
        return loader.construct_mapping(node, deep=True)
    return None


_MkdocsLoader.add_constructor("!include", _construct_include)
_MkdocsLoader.add_multi_constructor("!", _construct_unknown)
_MkdocsLoader.add_multi_constructor("tag:yaml.org,2002:python/", _construct_unknown)


def load_nav_config(config_path: Path) -> NavConfig:
    """Read and parse one ``mkdocs.yml``.

    Raises:
        NavConfigError: file unreadable, not valid YAML, or not shaped like
            a MkDocs config.
    """
    try:
        text = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise NavConfigError(str(config_path), str(e)) from e

    try:
        data = yaml.load(text, Loader=_MkdocsLoader)
    except yaml.YAMLError as e:
        raise NavConfigError(str(config_path), f"invalid YAML: {e}") from e

    # An empty file is an empty config
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise NavConfigError(str(config_path), f"expected a mapping, got {type(data).__name__}")

    try:
        raw = RawNavConfig.model_validate(data)
    except ValidationError as e:
        raise NavConfigError(str(config_path), f"invalid config: {e.error_count()} error(s): {e.errors()[0]['msg']}") from e

    nav = parse_nav(raw.nav)
    logger.debug("Loaded %s (%d top-level nav nodes)", config_path, len(nav))
    return NavConfig(
        config_path=config_path,
        site_name=raw.site_name,
        docs_dir=raw.docs_dir,
        nav=tuple(nav),
    )
