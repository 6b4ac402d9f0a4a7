"""
Unit tests for the discovery module

Tests:
- Group-version parsing
- Discovery payload models
- KubeDiscoveryClient: document fetch, group/resource listing, partial failures
"""

import pytest
import requests
from unittest.mock import Mock, patch

from config import KubeApiConfig
from schemadefs.discovery.client import KubeDiscoveryClient
from schemadefs.discovery.types import (
    APIGroup,
    APIResourceList,
    GroupVersion,
    parse_group_version,
)
from schemadefs.errors import (
    DiscoveryError,
    DocumentFetchError,
    GroupDiscoveryFailedError,
    GroupVersionParseError,
)

from conftest import OPENAPI_DOCUMENT

API_URL = "https://cluster.example.com:6443"


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def discovery_payloads():
    """Responses of a small API server, keyed by path"""
    return {
        "/openapi/v2": OPENAPI_DOCUMENT,
        "/api": {"kind": "APIVersions", "versions": ["v1"]},
        "/apis": {
            "kind": "APIGroupList",
            "groups": [
                {
                    "name": "management.cattle.io",
                    "versions": [
                        {"groupVersion": "management.cattle.io/v2", "version": "v2"},
                        {"groupVersion": "management.cattle.io/v1", "version": "v1"},
                    ],
                    "preferredVersion": {"groupVersion": "management.cattle.io/v2", "version": "v2"},
                },
            ],
        },
        "/api/v1": {
            "groupVersion": "v1",
            "resources": [
                {"name": "pods", "kind": "Pod", "namespaced": True, "verbs": ["get", "list"]},
                {"name": "pods/status", "kind": "Pod", "namespaced": True, "verbs": ["get"]},
            ],
        },
        "/apis/management.cattle.io/v2": {
            "groupVersion": "management.cattle.io/v2",
            "resources": [{"name": "globalroles", "kind": "GlobalRole", "verbs": ["get"]}],
        },
        "/apis/management.cattle.io/v1": {
            "groupVersion": "management.cattle.io/v1",
            "resources": [{"name": "globalroles", "kind": "GlobalRole", "verbs": ["get"]}],
        },
    }


def fake_get(payloads, failing=()):
    """Build a Session.get side effect serving payloads by path"""
    def get(url, timeout=None):
        path = url[len(API_URL):]
        if path in failing or path not in payloads:
            raise requests.exceptions.ConnectionError(f"cannot reach {path}")
        response = Mock()
        response.json.return_value = payloads[path]
        return response
    return get


@pytest.fixture
def client():
    return KubeDiscoveryClient(KubeApiConfig(base_url=API_URL, token="secret-token"))


# ============================================================================
# TEST: parse_group_version
# ============================================================================


class TestParseGroupVersion:
    """Tests for group-version parsing"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("management.cattle.io/v2", GroupVersion("management.cattle.io", "v2")),
            ("v1", GroupVersion("", "v1")),
            ("", GroupVersion("", "")),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_group_version(value) == expected

    def test_invalid(self):
        with pytest.raises(GroupVersionParseError):
            parse_group_version("not/parse/able")

    @pytest.mark.parametrize("value", [5, None, ["apps", "v1"]])
    def test_not_a_string(self, value):
        with pytest.raises(GroupVersionParseError):
            parse_group_version(value)

    def test_str(self):
        assert str(GroupVersion("apps", "v1")) == "apps/v1"
        assert str(GroupVersion("", "v1")) == "v1"
        assert GroupVersion("", "").is_empty()


class TestDiscoveryModels:
    """Tests for discovery payload parsing"""

    def test_api_group_from_dict(self, discovery_payloads):
        group = APIGroup.from_dict(discovery_payloads["/apis"]["groups"][0])

        assert group.name == "management.cattle.io"
        assert [v.version for v in group.versions] == ["v2", "v1"]
        assert group.preferred_version.version == "v2"

    def test_resource_list_from_dict(self, discovery_payloads):
        resource_list = APIResourceList.from_dict(discovery_payloads["/api/v1"])

        assert resource_list.group_version == "v1"
        assert resource_list.resources[0].kind == "Pod"
        assert resource_list.resources[0].namespaced is True
        assert resource_list.resources[1].is_subresource() is True

    def test_null_lists_are_empty(self):
        group = APIGroup.from_dict({"name": "example.io", "versions": None})
        resource_list = APIResourceList.from_dict({"groupVersion": "example.io/v1", "resources": None})

        assert group.versions == []
        assert resource_list.resources == []


# ============================================================================
# TEST: KubeDiscoveryClient
# ============================================================================


class TestKubeDiscoveryClient:
    """Tests for KubeDiscoveryClient"""

    def test_session_auth(self, client):
        assert client.session.headers["Authorization"] == "Bearer secret-token"

    def test_session_ca_cert(self):
        client = KubeDiscoveryClient(KubeApiConfig(base_url=API_URL, ca_cert="/etc/ca.crt"))
        assert client.session.verify == "/etc/ca.crt"
        assert "Authorization" not in client.session.headers

    def test_session_insecure(self):
        client = KubeDiscoveryClient(KubeApiConfig(base_url=API_URL, verify_ssl=False))
        assert client.session.verify is False

    @patch("requests.Session.get")
    def test_fetch_openapi_document(self, mock_get, client, discovery_payloads):
        mock_get.side_effect = fake_get(discovery_payloads)

        document = client.fetch_openapi_document()

        assert document == OPENAPI_DOCUMENT
        mock_get.assert_called_once_with(f"{API_URL}/openapi/v2", timeout=30)

    @patch("requests.Session.get")
    def test_fetch_openapi_document_unavailable(self, mock_get, client, discovery_payloads):
        mock_get.side_effect = fake_get(discovery_payloads, failing=("/openapi/v2",))

        with pytest.raises(DocumentFetchError):
            client.fetch_openapi_document()

    @patch("requests.Session.get")
    def test_fetch_openapi_document_http_error(self, mock_get, client):
        response = Mock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("403 Forbidden")
        mock_get.return_value = response

        with pytest.raises(DocumentFetchError):
            client.fetch_openapi_document()

    @patch("requests.Session.get")
    def test_fetch_openapi_document_not_an_object(self, mock_get, client):
        response = Mock()
        response.json.return_value = ["not", "a", "document"]
        mock_get.return_value = response

        with pytest.raises(DocumentFetchError):
            client.fetch_openapi_document()

    @patch("requests.Session.get")
    def test_fetch_groups_and_resources(self, mock_get, client, discovery_payloads):
        mock_get.side_effect = fake_get(discovery_payloads)

        groups, resource_lists = client.fetch_groups_and_resources()

        assert [g.name for g in groups] == ["", "management.cattle.io"]
        assert groups[0].preferred_version.version == "v1"
        assert [rl.group_version for rl in resource_lists] == [
            "v1",
            "management.cattle.io/v2",
            "management.cattle.io/v1",
        ]

    @patch("requests.Session.get")
    def test_group_listing_unavailable(self, mock_get, client, discovery_payloads):
        mock_get.side_effect = fake_get(discovery_payloads, failing=("/apis",))

        with pytest.raises(DiscoveryError) as exc_info:
            client.fetch_groups_and_resources()
        assert not isinstance(exc_info.value, GroupDiscoveryFailedError)

    @patch("requests.Session.get")
    def test_partial_group_failure(self, mock_get, client, discovery_payloads):
        """Failing group/versions are named; the rest is attached to the error"""
        mock_get.side_effect = fake_get(discovery_payloads, failing=("/apis/management.cattle.io/v1",))

        with pytest.raises(GroupDiscoveryFailedError) as exc_info:
            client.fetch_groups_and_resources()

        error = exc_info.value
        assert list(error.groups) == [GroupVersion("management.cattle.io", "v1")]
        assert len(error.api_groups) == 2
        assert [rl.group_version for rl in error.resource_lists] == ["v1", "management.cattle.io/v2"]

    @patch("requests.Session.get")
    def test_null_resources_is_empty(self, mock_get, client, discovery_payloads):
        discovery_payloads["/apis/management.cattle.io/v1"]["resources"] = None
        mock_get.side_effect = fake_get(discovery_payloads)

        _, resource_lists = client.fetch_groups_and_resources()
        assert resource_lists[2].resources == []

    @patch("requests.Session.get")
    def test_malformed_resource_list_is_partial_failure(self, mock_get, client, discovery_payloads):
        """One malformed group/version does not hide the others"""
        discovery_payloads["/apis/management.cattle.io/v1"]["resources"] = ["not-a-resource"]
        mock_get.side_effect = fake_get(discovery_payloads)

        with pytest.raises(GroupDiscoveryFailedError) as exc_info:
            client.fetch_groups_and_resources()

        error = exc_info.value
        assert list(error.groups) == [GroupVersion("management.cattle.io", "v1")]
        assert [rl.group_version for rl in error.resource_lists] == ["v1", "management.cattle.io/v2"]

    @patch("requests.Session.get")
    def test_malformed_group_listing(self, mock_get, client, discovery_payloads):
        discovery_payloads["/apis"]["groups"] = ["management.cattle.io"]
        mock_get.side_effect = fake_get(discovery_payloads)

        with pytest.raises(DiscoveryError):
            client.fetch_groups_and_resources()

    @patch("requests.Session.get")
    def test_missing_group_version_filled_in(self, mock_get, client, discovery_payloads):
        discovery_payloads["/apis/management.cattle.io/v2"].pop("groupVersion")
        mock_get.side_effect = fake_get(discovery_payloads)

        _, resource_lists = client.fetch_groups_and_resources()
        assert resource_lists[1].group_version == "management.cattle.io/v2"
