"""Partitioning of operations by tag.

Generated methods are grouped per declared tag so each group can be compiled
in or out through a Cargo feature. A route belongs to a tag group only when
every operation on it is tagged with exactly that tag, and to the untagged
group only when none of its operations carries a tag.
"""

import dataclasses
import enum
import json
from collections.abc import Iterable

from crabapi.codegen.utils import to_kebab_case, to_snake_case
from crabapi.openapi import Spec, SpecPath

__all__ = [
    'UNTAGGED',
    'TagFormat',
    'TagGroup',
    'TagGrouping',
    'group_paths',
    'render_tag_listing',
    'tag_groups',
]

# selects the untagged group from the command line
UNTAGGED = 'none'


@dataclasses.dataclass
class TagGroup:
    """Routes generated together under one tag.

    Attributes:
        tag: The declared tag name, or None for the untagged group.
        paths: Routes of the group, in declaration order.
    """

    tag: str | None
    paths: list[tuple[str, SpecPath]] = dataclasses.field(default_factory=list)

    @property
    def title(self) -> str:
        return self.tag if self.tag is not None else 'default'

    @property
    def module(self) -> str:
        return to_snake_case(self.tag) if self.tag is not None else 'other_methods'

    @property
    def feature(self) -> str:
        if self.tag is None:
            return f'tag-{UNTAGGED}'
        return f'tag-{to_kebab_case(self.tag)}'

    @property
    def doc(self) -> str:
        return self.tag if self.tag is not None else 'Other (non tagged) methods'

    def matches(self, name: str) -> bool:
        if name == UNTAGGED:
            return self.tag is None
        return self.tag == name


@dataclasses.dataclass
class TagGrouping:
    groups: list[TagGroup]
    unprocessed: int

    def __iter__(self):
        return iter(self.groups)


def _has_only_tag(spec_path: SpecPath, tag: str) -> bool:
    return bool(spec_path.calls) and all(
        call.tags == [tag] for call in spec_path.calls.values()
    )


def _is_untagged(spec_path: SpecPath) -> bool:
    return all(not call.tags for call in spec_path.calls.values())


def tag_groups(spec: Spec) -> list[TagGroup]:
    """All groups: one per declared tag, then the untagged group."""
    groups = [TagGroup(tag.name) for tag in spec.tags]
    for group in groups:
        group.paths = [
            (path, spec_path)
            for path, spec_path in spec.paths.items()
            if _has_only_tag(spec_path, group.tag)
        ]
    untagged = TagGroup(None)
    untagged.paths = [
        (path, spec_path)
        for path, spec_path in spec.paths.items()
        if _is_untagged(spec_path)
    ]
    groups.append(untagged)
    return groups


def group_paths(spec: Spec, tag: str | None = None) -> TagGrouping:
    """Group the routes of a description, optionally keeping a single group.

    Args:
        spec: The parsed description.
        tag: Keep only the group of this tag; ``none`` keeps the untagged group.

    Returns:
        The selected groups and the number of routes none of them covers.
    """
    groups = tag_groups(spec)
    if tag is not None:
        groups = [group for group in groups if group.matches(tag)]
    covered = sum(len(group.paths) for group in groups)
    return TagGrouping(groups=groups, unprocessed=len(spec.paths) - covered)


# =============================================================================
# Tag listings
# =============================================================================


class TagFormat(str, enum.Enum):
    features = 'features'
    rest_modules = 'rest-modules'
    resource_modules = 'resource-modules'
    names = 'names'
    json = 'json'


def _module_lines(groups: Iterable[TagGroup], visibility: str) -> list[str]:
    lines = []
    for group in sorted(groups, key=lambda group: group.module):
        lines.append(f'/// {group.doc}')
        lines.append(f'#[cfg(feature = "{group.feature}")]')
        lines.append(f'{visibility}mod {group.module};')
    return lines


def render_tag_listing(spec: Spec, fmt: TagFormat = TagFormat.features) -> str:
    """Render the tag groups in a shape consumed by the Rust build.

    Example:
        >>> print(render_tag_listing(spec, TagFormat.features))
        tags-all = ["tag-users", "tag-none"]
        tag-users = []
        tag-none = []
    """
    groups = tag_groups(spec)
    if fmt is TagFormat.features:
        features = [group.feature for group in groups]
        quoted = ', '.join(f'"{feature}"' for feature in features)
        lines = [f'tags-all = [{quoted}]']
        lines.extend(f'{feature} = []' for feature in features)
    elif fmt is TagFormat.rest_modules:
        lines = _module_lines(groups, 'pub ')
    elif fmt is TagFormat.resource_modules:
        lines = _module_lines(groups, '')
    elif fmt is TagFormat.names:
        lines = [group.tag for group in groups if group.tag is not None]
    else:
        payload = [
            {'name': group.tag, 'module': group.module, 'feature': group.feature}
            for group in groups
        ]
        return json.dumps(payload, indent=2) + '\n'
    return '\n'.join(lines) + '\n'
