"""
Name Correlator - Maps discovered kinds onto OpenAPI model names.

Schema ids use "<group>.<lowercase kind>" ("<lowercase kind>" for the core
group). Model names come from the document's x-kubernetes-group-version-kind
extension when it declares one, otherwise from the reversed group:
management.cattle.io/v2 GlobalRole -> io.cattle.management.v2.GlobalRole.
"""

from typing import Dict, Iterable, List, Optional, Set, Tuple
import logging

from schemadefs.discovery.types import APIGroup, APIResourceList, parse_group_version
from schemadefs.errors import GroupVersionParseError
from schemadefs.openapi.models import Models

logger = logging.getLogger(__name__)

CORE_MODEL_PREFIX = "io.k8s.api.core"


def schema_id_for(group: str, kind: str) -> str:
    """Return the schema id for a group and kind"""
    if not group:
        return kind.lower()
    return f"{group}.{kind.lower()}"


def model_name_for(group: str, version: str, kind: str) -> str:
    """Return the conventional model name for a group/version/kind"""
    if not group:
        return f"{CORE_MODEL_PREFIX}.{version}.{kind}"
    reversed_group = ".".join(reversed(group.split(".")))
    return f"{reversed_group}.{version}.{kind}"


def preferred_versions(groups: Iterable[Optional[APIGroup]]) -> Dict[str, str]:
    """Map each group name to its preferred version"""
    preferred = {}
    for group in groups:
        if group is None or group.preferred_version is None:
            continue
        preferred[group.name] = group.preferred_version.version
    return preferred


def build_schema_to_model(
    models: Models,
    groups: Iterable[Optional[APIGroup]],
    resource_lists: Iterable[Optional[APIResourceList]],
) -> Tuple[Dict[str, str], List[GroupVersionParseError]]:
    """
    Build the schema id -> model name map from discovery data

    Every served group/version is indexed. When a kind is served at several
    versions, the group's preferred version decides the model name; otherwise
    the first version listed wins. Entries whose group-version does not parse
    are skipped and returned as errors so the rest of the map is still built.

    Returns:
        Tuple of (schema_to_model, errors)
    """
    preferred = preferred_versions(groups)
    schema_to_model: Dict[str, str] = {}
    from_preferred: Set[str] = set()
    errors: List[GroupVersionParseError] = []

    for resource_list in resource_lists:
        if resource_list is None:
            continue

        try:
            gv = parse_group_version(resource_list.group_version)
        except GroupVersionParseError as e:
            logger.warning(f"Skipping discovery entry: {e}")
            errors.append(e)
            continue

        preferred_version = preferred.get(gv.group)
        is_preferred = preferred_version is None or preferred_version == gv.version

        for resource in resource_list.resources:
            if resource.is_subresource() or not resource.kind:
                continue
            schema_id = schema_id_for(gv.group, resource.kind)
            if schema_id in from_preferred or (not is_preferred and schema_id in schema_to_model):
                continue

            model_name = models.model_for_gvk(gv.group, gv.version, resource.kind)
            if model_name is None:
                model_name = model_name_for(gv.group, gv.version, resource.kind)
            schema_to_model[schema_id] = model_name
            if is_preferred:
                from_preferred.add(schema_id)

    return schema_to_model, errors
