"""
Discovery Module - Cluster API discovery

Lists the API groups and group/version resources a Kubernetes API server
serves, and fetches its OpenAPI v2 document.
"""

from .client import KubeDiscoveryClient
from .types import (
    APIGroup,
    APIResource,
    APIResourceList,
    GroupVersion,
    GroupVersionForDiscovery,
    parse_group_version,
)

__all__ = [
    "KubeDiscoveryClient",
    "APIGroup",
    "APIResource",
    "APIResourceList",
    "GroupVersion",
    "GroupVersionForDiscovery",
    "parse_group_version",
]
