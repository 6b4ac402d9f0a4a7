"""
Kubernetes Discovery Client - Fetches the OpenAPI v2 document and the served
API groups/resources from a cluster's API server.

Features:
- Bearer token authentication and custom CA bundles
- Core (/api) and named (/apis) group discovery
- Partial failure reporting: group/versions that fail are collected and
  raised together with everything that did succeed
"""

import json
import logging
from typing import Any, Dict, List, Tuple

import requests

from config import KubeApiConfig
from schemadefs.discovery.types import (
    APIGroup,
    APIResourceList,
    GroupVersion,
    GroupVersionForDiscovery,
)
from schemadefs.errors import (
    DiscoveryError,
    DocumentFetchError,
    GroupDiscoveryFailedError,
)

logger = logging.getLogger(__name__)


class KubeDiscoveryClient:
    """
    Discovery source backed by the Kubernetes API server

    Usage:
    ```python
    client = KubeDiscoveryClient(KubeApiConfig.from_env())
    document = client.fetch_openapi_document()
    groups, resource_lists = client.fetch_groups_and_resources()
    ```
    """

    OPENAPI_V2_PATH = "/openapi/v2"
    CORE_API_PATH = "/api"
    GROUPS_API_PATH = "/apis"

    def __init__(self, config: KubeApiConfig, session: requests.Session = None):
        """
        Initialize the discovery client

        Args:
            config: API server connection settings
            session: Optional pre-configured session (mainly for tests)
        """
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout

        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if config.token:
            self.session.headers.update({"Authorization": f"Bearer {config.token}"})
        if config.ca_cert:
            self.session.verify = config.ca_cert
        elif not config.verify_ssl:
            self.session.verify = False

    def fetch_openapi_document(self) -> Dict[str, Any]:
        """
        Fetch the cluster's OpenAPI v2 document

        Raises:
            DocumentFetchError: If the document cannot be retrieved or decoded
        """
        try:
            document = self._get_json(self.OPENAPI_V2_PATH)
        except (requests.exceptions.RequestException, ValueError) as e:
            raise DocumentFetchError(f"unable to fetch openapi definition: {e}") from e

        logger.debug(f"Fetched OpenAPI document with {len(document.get('definitions', {}))} definitions")
        return document

    def fetch_groups_and_resources(self) -> Tuple[List[APIGroup], List[APIResourceList]]:
        """
        List the served API groups and the resources of every group/version

        Returns:
            Tuple of (groups, resource lists)

        Raises:
            DiscoveryError: If the group listing itself cannot be retrieved
            GroupDiscoveryFailedError: If some group/versions failed; the
                error carries the groups and resource lists that succeeded
        """
        try:
            groups = self._fetch_groups()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise DiscoveryError(f"unable to retrieve groups and resources: {e}") from e

        resource_lists: List[APIResourceList] = []
        failed: Dict[GroupVersion, Exception] = {}

        for group in groups:
            for version in group.versions:
                gv = GroupVersion(group.name, version.version)
                try:
                    resource_lists.append(self._fetch_resources(gv))
                except (requests.exceptions.RequestException, ValueError) as e:
                    logger.warning(f"Failed to discover resources for {gv}: {e}")
                    failed[gv] = e

        if failed:
            raise GroupDiscoveryFailedError(failed, api_groups=groups, resource_lists=resource_lists)

        logger.debug(f"Discovered {len(groups)} groups and {len(resource_lists)} resource lists")
        return groups, resource_lists

    def _fetch_groups(self) -> List[APIGroup]:
        groups: List[APIGroup] = []

        core = self._get_json(self.CORE_API_PATH)
        group_list = self._get_json(self.GROUPS_API_PATH)
        try:
            core_versions = [GroupVersionForDiscovery(v, v) for v in core.get("versions") or []]
            if core_versions:
                groups.append(APIGroup(name="", versions=core_versions, preferred_version=core_versions[0]))
            groups.extend(APIGroup.from_dict(g) for g in group_list.get("groups") or [])
        except (TypeError, AttributeError) as e:
            raise ValueError(f"malformed group listing: {e}") from e
        return groups

    def _fetch_resources(self, gv: GroupVersion) -> APIResourceList:
        if gv.group:
            path = f"{self.GROUPS_API_PATH}/{gv.group}/{gv.version}"
        else:
            path = f"{self.CORE_API_PATH}/{gv.version}"

        try:
            resource_list = APIResourceList.from_dict(self._get_json(path))
        except (TypeError, AttributeError) as e:
            raise ValueError(f"malformed resource list from {path}: {e}") from e
        if not resource_list.group_version:
            resource_list.group_version = str(gv)
        return resource_list

    def _get_json(self, path: str) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url}")

        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            raise ValueError(f"invalid JSON from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"unexpected payload from {path}: expected a JSON object")
        return data
