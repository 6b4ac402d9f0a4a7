"""Data models for the Kubernetes discovery API."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from schemadefs.errors import GroupVersionParseError


@dataclass(frozen=True)
class GroupVersion:
    """An API group and version, e.g. management.cattle.io/v2."""

    group: str
    version: str

    def is_empty(self) -> bool:
        return not self.group and not self.version

    def __str__(self) -> str:
        if self.group:
            return f"{self.group}/{self.version}"
        return self.version


def parse_group_version(group_version: str) -> GroupVersion:
    """Parse "group/version", "version" (core group) or "" into a GroupVersion."""
    if not isinstance(group_version, str):
        raise GroupVersionParseError(group_version)
    if not group_version or group_version == "/":
        return GroupVersion("", "")

    parts = group_version.split("/")
    if len(parts) == 1:
        return GroupVersion("", parts[0])
    if len(parts) == 2:
        return GroupVersion(parts[0], parts[1])

    raise GroupVersionParseError(group_version)


@dataclass
class GroupVersionForDiscovery:
    """One served version of an API group."""

    group_version: str
    version: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GroupVersionForDiscovery":
        return cls(
            group_version=data.get("groupVersion", ""),
            version=data.get("version", ""),
        )


@dataclass
class APIGroup:
    """An API group and the versions the server offers for it."""

    name: str
    versions: List[GroupVersionForDiscovery] = field(default_factory=list)
    preferred_version: Optional[GroupVersionForDiscovery] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "APIGroup":
        preferred = data.get("preferredVersion")
        return cls(
            name=data.get("name", ""),
            versions=[GroupVersionForDiscovery.from_dict(v) for v in data.get("versions") or []],
            preferred_version=GroupVersionForDiscovery.from_dict(preferred) if preferred else None,
        )


@dataclass
class APIResource:
    """A resource served under a group/version."""

    name: str
    kind: str
    group: str = ""
    version: str = ""
    namespaced: bool = False
    verbs: List[str] = field(default_factory=list)

    def is_subresource(self) -> bool:
        return "/" in self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "APIResource":
        return cls(
            name=data.get("name", ""),
            kind=data.get("kind", ""),
            group=data.get("group", ""),
            version=data.get("version", ""),
            namespaced=bool(data.get("namespaced", False)),
            verbs=list(data.get("verbs") or []),
        )


@dataclass
class APIResourceList:
    """The resources served for one group/version."""

    group_version: str
    resources: List[APIResource] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "APIResourceList":
        return cls(
            group_version=data.get("groupVersion", ""),
            resources=[APIResource.from_dict(r) for r in data.get("resources") or []],
        )
