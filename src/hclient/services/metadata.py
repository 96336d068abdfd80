"""Business object schema queries."""

import logging
from urllib.parse import quote

from hclient.errors.exceptions import UpstreamError, ValidationError
from hclient.errors.handler import parse_payload
from hclient.models import ObjectMeta, ObjectMetaDetail
from hclient.transport.dispatcher import ApiRequest, RequestDispatcher

logger = logging.getLogger(__name__)


class MetadataService:
    """Read-only access to object type descriptions. Nothing is cached."""

    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self._dispatcher = dispatcher

    async def get_objects(self) -> list[ObjectMeta]:
        data = await self._dispatcher.send(ApiRequest("GET", "/v1/meta/objects"))
        if data is None:
            data = []
        if not isinstance(data, list):
            raise UpstreamError(f"Platform returned {type(data).__name__} for the object type list")
        objects = [parse_payload(ObjectMeta.from_dict, item, "object type summary") for item in data]
        logger.debug(f"Fetched {len(objects)} object types")
        return objects

    async def get_object_description(self, meta_name: str) -> ObjectMetaDetail:
        """Describe one object type.

        Raises:
            NotFoundError: No object type has this API name.
            UpstreamError: The platform answered without a usable description.
        """
        if not meta_name:
            raise ValidationError("meta_name must not be empty")
        data = await self._dispatcher.send(ApiRequest("GET", f"/v1/meta/objects/{quote(meta_name, safe='')}/description"))
        if not isinstance(data, dict):
            raise UpstreamError(f"Platform returned {type(data).__name__} for the description of {meta_name}")
        return parse_payload(ObjectMetaDetail.from_dict, data, f"description of {meta_name}")
