"""Shared plumbing for the resource API modules.

Every module follows the same pattern: validate input locally (no I/O on
bad input), build one :class:`ApiCall`, hand it to the configured
:class:`DataSource`, decode the raw payload once, and normalize any failure
into an :class:`ApiError` carrying the operation's context string.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

from adapters.error_normalizer import normalize
from adapters.uploads import UploadProgressReporter
from core.config import AppSettings
from core.decoding import Malformed, decode_entity, decode_list, decode_page
from core.domain.models import DraftModel
from core.domain.pagination import ListParams, PaginatedResult
from core.domain.resources import ResourceSpec
from core.domain.uploads import ProgressCallback, UploadFile
from core.errors import (
    ApiError,
    describe_validation_error,
    not_found,
    require_positive_id,
    validation_error,
)
from core.interfaces.data_source import ApiCall, DataSource, RequestBody

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
D = TypeVar("D", bound=DraftModel)

_MIB = 1024 * 1024


class ApiModule:
    """Base class: owns the data source and the settings, nothing else."""

    def __init__(self, source: DataSource, settings: AppSettings) -> None:
        self._source = source
        self._settings = settings

    # ------------------------------------------------------------------
    # I/O
    # ------------------------------------------------------------------

    async def _execute(self, context: str, call: ApiCall) -> Any:
        try:
            return await self._source.execute(call)
        except ApiError:
            raise
        except Exception as exc:
            raise normalize(exc, context) from exc

    # ------------------------------------------------------------------
    # Input validation
    # ------------------------------------------------------------------

    def _list_params(self, context: str, params: ListParams | Mapping[str, Any] | None) -> ListParams:
        if isinstance(params, ListParams):
            parsed = params
        else:
            try:
                parsed = ListParams.model_validate(dict(params or {}))
            except ValidationError as exc:
                raise validation_error(context, describe_validation_error(exc)) from None
        if "page_size" not in parsed.model_fields_set:
            parsed = parsed.model_copy(update={"page_size": self._settings.default_page_size})
        return parsed.with_page_size_limit(self._settings.max_page_size)

    def _draft(self, context: str, draft_type: type[D], payload: D | Mapping[str, Any] | None) -> D:
        if isinstance(payload, draft_type):
            return payload
        if payload is None:
            raise validation_error(context, "Payload is required")
        if isinstance(payload, BaseModel):
            payload = payload.model_dump()
        if not isinstance(payload, Mapping):
            raise validation_error(context, "Payload must be an object")
        try:
            return draft_type.model_validate(dict(payload))
        except ValidationError as exc:
            raise validation_error(context, describe_validation_error(exc)) from None

    def _check_upload(self, context: str, file: UploadFile | None) -> UploadFile:
        if not isinstance(file, UploadFile):
            raise validation_error(context, "File is required")
        size = file.size
        limit = self._settings.max_upload_bytes
        if size is not None and size > limit:
            raise validation_error(context, f"File size must be less than {limit // _MIB}MB")
        return file

    def _body(
        self,
        context: str,
        draft: DraftModel,
        on_progress: ProgressCallback | None = None,
    ) -> RequestBody:
        files = draft.file_fields()
        for upload in files.values():
            self._check_upload(context, upload)
        progress = UploadProgressReporter(on_progress) if files else None
        return RequestBody(fields=draft.to_wire(), files=files, progress=progress)

    @staticmethod
    def _id(value: Any, context: str, name: str = "ID") -> int:
        return require_positive_id(value, context, name)

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @staticmethod
    def _page(raw: Any, model: type[M], params: ListParams, context: str) -> PaginatedResult[M]:
        decoded = decode_page(raw, model, page_number=params.page_number, page_size=params.page_size)
        if isinstance(decoded, Malformed):
            log.warning("[%s] %s; returning an empty page", context, decoded.reason)
            return PaginatedResult[model].empty(params.page_size)  # type: ignore[valid-type]
        return decoded.value

    @staticmethod
    def _entity(raw: Any, model: type[M], context: str, label: str) -> M:
        decoded = decode_entity(raw, model)
        if isinstance(decoded, Malformed):
            log.info("[%s] %s", context, decoded.reason)
            raise not_found(context, label)
        return decoded.value

    @staticmethod
    def _items(raw: Any, model: type[M], context: str) -> list[M]:
        decoded = decode_list(raw, model)
        if isinstance(decoded, Malformed):
            log.warning("[%s] %s; returning []", context, decoded.reason)
            return []
        return decoded.value

    @staticmethod
    def _written(raw: Any, model: type[M]) -> M | Any:
        """Decoded resource, or the server acknowledgement untouched."""

        decoded = decode_entity(raw, model)
        if isinstance(decoded, Malformed):
            return raw
        return decoded.value


class ResourceApi(ApiModule, Generic[M]):
    """list / get_by_id / create / update / delete for one resource."""

    spec: ResourceSpec

    def __init__(self, source: DataSource, settings: AppSettings, spec: ResourceSpec | None = None) -> None:
        super().__init__(source, settings)
        if spec is not None:
            self.spec = spec

    def _context(self, template: str) -> str:
        return template.format(singular=self.spec.singular, plural=self.spec.plural)

    async def list(self, params: ListParams | Mapping[str, Any] | None = None) -> PaginatedResult[M]:
        context = self._context("List {plural}")
        parsed = self._list_params(context, params)
        raw = await self._execute(context, ApiCall(self.spec.action("list"), params=parsed.to_query()))
        return self._page(raw, self.spec.model, parsed, context)  # type: ignore[arg-type, return-value]

    async def get_by_id(self, id: int) -> M:
        context = self._context("Get {singular} by ID")
        self._id(id, context)
        raw = await self._execute(context, ApiCall(self.spec.action("get"), path_args={"id": id}))
        return self._entity(raw, self.spec.model, context, self.spec.singular)  # type: ignore[arg-type, return-value]

    async def create(
        self,
        payload: DraftModel | Mapping[str, Any],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> M | Any:
        context = self._context("Create {singular}")
        draft = self._draft(context, self.spec.draft, payload)  # type: ignore[arg-type]
        call = ApiCall(
            self.spec.action("create"),
            path_args=self._create_path_args(draft),
            body=self._body(context, draft, on_progress),
        )
        raw = await self._execute(context, call)
        return self._written(raw, self.spec.model)  # type: ignore[arg-type]

    async def update(
        self,
        id: int,
        payload: DraftModel | Mapping[str, Any],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> M | Any:
        context = self._context("Update {singular}")
        self._id(id, context)
        draft = self._draft(context, self.spec.draft, payload)  # type: ignore[arg-type]
        if draft.file_fields() and not self.spec.update_accepts_files:
            raise validation_error(context, f"File replacement is not supported for {self.spec.plural}")
        call = ApiCall(self.spec.action("update"), path_args={"id": id}, body=self._body(context, draft, on_progress))
        raw = await self._execute(context, call)
        return self._written(raw, self.spec.model)  # type: ignore[arg-type]

    async def delete(self, id: int) -> Any:
        context = self._context("Delete {singular}")
        self._id(id, context)
        return await self._execute(context, ApiCall(self.spec.action("delete"), path_args={"id": id}))

    def _create_path_args(self, draft: DraftModel) -> dict[str, int]:
        return {}
