"""
Schema Definition Handler - Serves expanded definitions for resource schemas.

The handler owns the process-wide resolver state: the parsed OpenAPI models
and the schema id -> model name map built from discovery. `refresh()` rebuilds
both and publishes them together; `resolve()` and `by_id()` only read the
published state and never touch the network.
"""

from dataclasses import dataclass
from typing import Dict, Optional
import logging
import threading

from schemadefs.definitions.expander import DefinitionExpander
from schemadefs.definitions.models import APIObject
from schemadefs.definitions.naming import build_schema_to_model
from schemadefs.errors import (
    DefinitionNotFoundError,
    DiscoveryError,
    DocumentFetchError,
    GroupDiscoveryFailedError,
    InternalInconsistencyError,
    ModelNotKindError,
    ModelParseError,
    ModelUnavailableError,
    NotReadyError,
    SchemaDefinitionError,
    SchemaIndexError,
)
from schemadefs.openapi.models import Models, parse_document
from schemadefs.schema.models import APIRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverState:
    """Models and schema map published together by a refresh"""
    models: Models
    schema_to_model: Optional[Dict[str, str]] = None  # None until discovery has been indexed once


class SchemaDefinitionHandler:
    """
    Resolves schema ids to expanded definitions

    The client is any discovery source providing `fetch_openapi_document()`
    and `fetch_groups_and_resources()`, such as KubeDiscoveryClient.

    Usage:
    ```python
    handler = SchemaDefinitionHandler(KubeDiscoveryClient(app_config.kube_api))
    handler.refresh()
    response = handler.resolve("management.cattle.io.globalrole")
    ```
    """

    def __init__(self, client=None, state: Optional[ResolverState] = None):
        self.client = client
        self._state = state
        self._state_lock = threading.Lock()
        self._refresh_lock = threading.Lock()

    @property
    def state(self) -> Optional[ResolverState]:
        with self._state_lock:
            return self._state

    @property
    def models(self) -> Optional[Models]:
        state = self.state
        return state.models if state else None

    @property
    def schema_to_model(self) -> Optional[Dict[str, str]]:
        state = self.state
        return state.schema_to_model if state else None

    def is_ready(self) -> bool:
        state = self.state
        return state is not None and state.schema_to_model is not None

    def _publish(self, state: ResolverState) -> None:
        with self._state_lock:
            self._state = state

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def refresh(self) -> None:
        """
        Rebuild models and the schema map from the discovery source

        Only one refresh runs at a time; concurrent callers wait their turn.

        Raises:
            DocumentFetchError: The OpenAPI document could not be fetched
                (state unchanged)
            ModelParseError: The document could not be parsed (state unchanged)
            DiscoveryError: Groups and resources could not be listed; the new
                models are published with the previous schema map
            GroupDiscoveryFailedError: Some group/versions failed; the map was
                built and published from the rest
            SchemaIndexError: Some discovery entries had unparseable
                group-versions; the map was built and published from the rest
        """
        with self._refresh_lock:
            self._refresh()

    def _refresh(self) -> None:
        try:
            document = self.client.fetch_openapi_document()
        except SchemaDefinitionError:
            logger.error("Schema definition refresh aborted: openapi document unavailable")
            raise
        except Exception as e:
            logger.error(f"Schema definition refresh aborted: {e}")
            raise DocumentFetchError(f"unable to fetch openapi definition: {e}") from e

        try:
            models = parse_document(document)
        except ModelParseError as e:
            logger.error(f"Schema definition refresh aborted: {e}")
            raise ModelParseError(f"unable to parse openapi definition into models: {e}") from e

        discovery_error: Optional[GroupDiscoveryFailedError] = None
        try:
            groups, resource_lists = self.client.fetch_groups_and_resources()
        except GroupDiscoveryFailedError as e:
            logger.warning(f"Partial discovery failure, indexing available groups: {e}")
            groups, resource_lists = e.api_groups, e.resource_lists
            discovery_error = e
        except Exception as e:
            previous = self.state
            self._publish(ResolverState(models, previous.schema_to_model if previous else None))
            logger.error(f"Unable to retrieve groups and resources, keeping previous schema map: {e}")
            if isinstance(e, DiscoveryError):
                raise
            raise DiscoveryError(f"unable to retrieve groups and resources: {e}") from e

        schema_to_model, index_errors = build_schema_to_model(models, groups, resource_lists)
        self._publish(ResolverState(models, schema_to_model))
        logger.info(f"Refreshed schema definitions: {len(models)} models, {len(schema_to_model)} schemas")

        if discovery_error is not None:
            raise discovery_error
        if index_errors:
            raise SchemaIndexError(index_errors)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, schema_id: str) -> APIObject:
        """
        Return the expanded definition for a schema id

        Raises:
            NotReadyError: No refresh has built a schema map yet (503)
            DefinitionNotFoundError: The schema id has no model (404)
            ModelUnavailableError: The mapped model is missing from the
                OpenAPI document (503)
            InternalInconsistencyError: The mapped model is not an object (500)
        """
        state = self.state
        if state is None or state.schema_to_model is None:
            raise NotReadyError("schema definitions not yet refreshed")

        model_name = state.schema_to_model.get(schema_id)
        if model_name is None:
            raise DefinitionNotFoundError(f"no definition found for schema {schema_id}")

        if state.models.lookup_model(model_name) is None:
            raise ModelUnavailableError(
                f"model {model_name} for schema {schema_id} is not available, try again after the next refresh"
            )

        try:
            definition = DefinitionExpander(state.models).expand(model_name)
        except ModelNotKindError as e:
            logger.error(f"Schema {schema_id} maps to {model_name}, which is not a kind")
            raise InternalInconsistencyError(f"model {model_name} for schema {schema_id} is not a kind") from e

        logger.debug(f"Resolved schema {schema_id} to {model_name}")
        return APIObject(id=schema_id, object=definition)

    def by_id(self, request: APIRequest) -> APIObject:
        """Handle a by-id request, rejecting schemas the registry does not allow to be read"""
        schema = request.schemas.lookup_schema(request.name)
        if schema is None or not schema.can_get():
            raise DefinitionNotFoundError(f"schema {request.name} not found")
        return self.resolve(request.name)
