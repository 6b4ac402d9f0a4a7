"""Shared fixtures: a small OpenAPI v2 document and a fake discovery source."""

import copy

import pytest

from schemadefs.discovery.types import APIGroup, APIResource, APIResourceList, GroupVersionForDiscovery
from schemadefs.errors import GroupDiscoveryFailedError

GLOBAL_ROLE_MODEL = "io.cattle.management.v2.GlobalRole"
GLOBAL_ROLE_SPEC_MODEL = "io.cattle.management.v2.GlobalRole.spec"
OBJECT_META_MODEL = "io.k8s.apimachinery.pkg.apis.meta.v1.ObjectMeta"
NOT_A_KIND_MODEL = "io.management.cattle.NotAKind"

OPENAPI_DOCUMENT = {
    "swagger": "2.0",
    "info": {"title": "Kubernetes", "version": "v1.27.0"},
    "paths": {},
    "definitions": {
        GLOBAL_ROLE_MODEL: {
            "description": "A Global Role V2 provides Global Permissions in Rancher",
            "type": "object",
            "properties": {
                "apiVersion": {"description": "The APIVersion of this resource", "type": "string"},
                "kind": {"description": "The kind", "type": "string"},
                "metadata": {
                    "description": "The metadata",
                    "$ref": f"#/definitions/{OBJECT_META_MODEL}",
                },
                "spec": {
                    "description": "The spec for the project",
                    "type": "object",
                    "required": ["clusterName", "displayName"],
                    "properties": {
                        "clusterName": {"description": "The name of the cluster", "type": "string"},
                        "displayName": {"description": "The UI readable name", "type": "string"},
                        "newField": {"description": "A new field not present in v1", "type": "string"},
                        "notRequired": {"description": "Some field that isn't required", "type": "boolean"},
                    },
                },
            },
        },
        "io.cattle.management.v1.GlobalRole": {
            "description": "A Global Role V1 provides Global Permissions in Rancher",
            "type": "object",
            "properties": {
                "apiVersion": {"description": "The APIVersion of this resource", "type": "string"},
                "kind": {"description": "The kind", "type": "string"},
                "metadata": {
                    "description": "The metadata",
                    "$ref": f"#/definitions/{OBJECT_META_MODEL}",
                },
            },
        },
        OBJECT_META_MODEL: {
            "description": "Object Metadata",
            "type": "object",
            "properties": {
                "annotations": {
                    "description": "annotations of the resource",
                    "type": "object",
                    "additionalProperties": {"type": "string", "description": "annotation value"},
                },
                "name": {"description": "name of the resource", "type": "string"},
            },
        },
        NOT_A_KIND_MODEL: {
            "description": "Some string which isn't a kind",
            "type": "string",
        },
    },
}


class FakeDiscovery:
    """Discovery source returning whatever is set on it"""

    def __init__(self, document, groups, resource_lists, document_error=None, groups_error=None):
        self.document = document
        self.groups = groups
        self.resource_lists = resource_lists
        self.document_error = document_error
        self.groups_error = groups_error
        self.document_calls = 0

    def fetch_openapi_document(self):
        self.document_calls += 1
        if self.document_error is not None:
            raise self.document_error
        return self.document

    def fetch_groups_and_resources(self):
        if isinstance(self.groups_error, GroupDiscoveryFailedError):
            self.groups_error.api_groups = self.groups
            self.groups_error.resource_lists = self.resource_lists
            raise self.groups_error
        if self.groups_error is not None:
            raise self.groups_error
        return self.groups, self.resource_lists


def management_group(preferred="v2"):
    return APIGroup(
        name="management.cattle.io",
        versions=[
            GroupVersionForDiscovery("management.cattle.io/v2", "v2"),
            GroupVersionForDiscovery("management.cattle.io/v1", "v1"),
        ],
        preferred_version=GroupVersionForDiscovery(f"management.cattle.io/{preferred}", preferred),
    )


def global_role_resource(version):
    return APIResource(
        name="globalroles",
        kind="GlobalRole",
        group="management.cattle.io",
        version=version,
        verbs=["get", "list"],
    )


@pytest.fixture
def openapi_document():
    """A fresh copy of the sample OpenAPI v2 document"""
    return copy.deepcopy(OPENAPI_DOCUMENT)


@pytest.fixture
def discovery(openapi_document):
    """Fake discovery serving GlobalRole in management.cattle.io v2 (preferred) and v1"""
    groups = [management_group()]
    resource_lists = [
        APIResourceList("management.cattle.io/v2", [global_role_resource("v2")]),
        APIResourceList("management.cattle.io/v1", [global_role_resource("v1")]),
        None,
    ]
    return FakeDiscovery(openapi_document, groups, resource_lists)
