# src/homedash/services/dashboard_service.py
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Tuple

from homedash.config import Settings
from homedash.dal import DocumentStore, IconAssetManager, IconFile
from homedash.errors import NotFoundError, ReferenceIntegrityError, ValidationFailed
from homedash.models import (
    APP_LOGO_ID,
    AppSettings,
    AppSettingsUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    DashboardConfig,
    ImageIcon,
    Service,
    ServiceCreate,
    ServiceUpdate,
)
from homedash.services.validation import parse_payload, permutation_errors

logger = logging.getLogger("homedash.services.dashboard")

DEFAULT_APP_TITLE = "Homedash"


def _utcnow() -> str:
    # same shape as JavaScript's Date.toISOString(), e.g. 2024-05-01T10:00:00.000Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _new_id() -> str:
    return str(uuid.uuid4())


def _id_list(ordered_ids: Any) -> List[str]:
    if not isinstance(ordered_ids, (list, tuple)) or not all(isinstance(i, str) for i in ordered_ids):
        raise ValidationFailed("orderedIds must be a list of ids", field="orderedIds")
    return list(ordered_ids)


class DashboardService:
    """
    Mutation and query operations over the dashboard configuration.

    Every mutation follows the same shape: validate input, then inside one
    store transaction load the document, check invariants, apply the change
    and commit. Icon files are removed only after the commit has succeeded;
    uploads are written before the commit that references them.
    """

    def __init__(
        self,
        store: DocumentStore,
        icons: IconAssetManager,
        *,
        default_app_title: str = DEFAULT_APP_TITLE,
    ) -> None:
        self.store = store
        self.icons = icons
        self.default_app_title = default_app_title

    @classmethod
    def from_settings(cls, settings: Settings) -> "DashboardService":
        return cls(
            DocumentStore(settings.config_path),
            IconAssetManager(settings.icons_dir, max_bytes=settings.max_icon_bytes),
            default_app_title=settings.default_app_title,
        )

    # ─────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────
    def get_config(self) -> DashboardConfig:
        return self.store.load()

    def list_categories(self) -> List[Category]:
        return self.store.load().categories

    def get_category(self, category_id: str) -> Optional[Category]:
        doc = self.store.load()
        idx = doc.category_index(category_id)
        return doc.categories[idx] if idx != -1 else None

    def list_services(self, *, active_only: bool = False) -> List[Service]:
        services = self.store.load().services
        return [s for s in services if s.active] if active_only else services

    def list_services_by_category(self, category_id: str) -> List[Service]:
        return self.store.load().services_in(category_id)

    def get_service(self, service_id: str) -> Optional[Service]:
        doc = self.store.load()
        idx = doc.service_index(service_id)
        return doc.services[idx] if idx != -1 else None

    def get_app_settings(self) -> AppSettings:
        return self._settings_view(self.store.load())

    def export_config(self) -> Tuple[str, bytes]:
        return self.store.export()

    def read_icon(self, filename: str) -> IconFile:
        return self.icons.read(filename)

    # ─────────────────────────────────────────────────────────────
    # Categories
    # ─────────────────────────────────────────────────────────────
    def create_category(self, payload: Any) -> Category:
        data = parse_payload(CategoryCreate, payload)
        with self.store.transaction() as doc:
            category_id = data.id or _new_id()
            if doc.has_category(category_id):
                raise ValidationFailed(f"Category with id '{category_id}' already exists", field="id")
            category = Category(id=category_id, name=data.name, icon=data.icon, created_at=_utcnow())
            doc.categories.append(category)
        logger.info("Category created: %s", category.id)
        return category

    def update_category(self, category_id: str, payload: Any) -> Category:
        data = parse_payload(CategoryUpdate, payload, entity_id=category_id)
        with self.store.transaction() as doc:
            idx = doc.category_index(category_id)
            if idx == -1:
                raise NotFoundError("Category not found")
            changes = {f: getattr(data, f) for f in data.model_fields_set}
            category = doc.categories[idx].model_copy(update=changes)
            doc.categories[idx] = category
        logger.info("Category updated: %s (%s)", category_id, ", ".join(sorted(changes)) or "no changes")
        return category

    def delete_category(self, category_id: str) -> None:
        with self.store.transaction() as doc:
            idx = doc.category_index(category_id)
            if idx == -1:
                raise NotFoundError("Category not found")
            count = len(doc.services_in(category_id))
            if count:
                raise ReferenceIntegrityError(
                    f"Cannot delete category with {count} associated service(s). "
                    "Delete or move them first."
                )
            del doc.categories[idx]
        logger.info("Category deleted: %s", category_id)

    def reorder_categories(self, ordered_ids: Sequence[str]) -> List[Category]:
        ordered = _id_list(ordered_ids)
        with self.store.transaction() as doc:
            errors = permutation_errors([c.id for c in doc.categories], ordered)
            if errors:
                raise ValidationFailed(errors)
            by_id = {c.id: c for c in doc.categories}
            doc.categories = [by_id[i] for i in ordered]
        logger.info("Categories reordered (%d)", len(ordered))
        return doc.categories

    # ─────────────────────────────────────────────────────────────
    # Services
    # ─────────────────────────────────────────────────────────────
    def create_service(self, payload: Any) -> Service:
        data = parse_payload(ServiceCreate, payload)
        with self.store.transaction() as doc:
            service_id = data.id or _new_id()
            if doc.service_index(service_id) != -1:
                raise ValidationFailed(f"Service with id '{service_id}' already exists", field="id")
            if not doc.has_category(data.category_id):
                raise ReferenceIntegrityError("Selected category does not exist", field="categoryId")
            self._check_image_ref(data.icon, owner=service_id, field="icon")
            service = Service(
                id=service_id,
                name=data.name,
                description=data.description,
                url=data.url,
                category_id=data.category_id,
                icon=data.icon,
                active=data.active,
                created_at=_utcnow(),
            )
            doc.services.append(service)
        logger.info("Service created: %s in %s", service.id, service.category_id)
        return service

    def update_service(self, service_id: str, payload: Any) -> Service:
        data = parse_payload(ServiceUpdate, payload, entity_id=service_id)
        with self.store.transaction() as doc:
            idx = doc.service_index(service_id)
            if idx == -1:
                raise NotFoundError("Service not found")
            if "category_id" in data.model_fields_set and not doc.has_category(data.category_id):
                raise ReferenceIntegrityError("Selected category does not exist", field="categoryId")
            previous = doc.services[idx]
            if "icon" in data.model_fields_set:
                self._check_image_ref(data.icon, owner=service_id, field="icon", current=previous.icon)
            changes = {f: getattr(data, f) for f in data.model_fields_set}
            service = previous.model_copy(update=changes)
            doc.services[idx] = service
        logger.info("Service updated: %s (%s)", service_id, ", ".join(sorted(changes)) or "no changes")

        self._drop_replaced_image(service_id, previous.icon, service.icon)
        return service

    def delete_service(self, service_id: str) -> None:
        with self.store.transaction() as doc:
            idx = doc.service_index(service_id)
            if idx == -1:
                raise NotFoundError("Service not found")
            del doc.services[idx]
        logger.info("Service deleted: %s", service_id)
        self.icons.delete(service_id)

    def reorder_services(self, category_id: str, ordered_ids: Sequence[str]) -> List[Service]:
        """
        Reorder the services of one category. Only the array slots already
        held by that category are rewritten; other services keep their places.
        """
        ordered = _id_list(ordered_ids)
        with self.store.transaction() as doc:
            if not doc.has_category(category_id):
                raise NotFoundError("Category not found", field="categoryId")
            slots = [i for i, s in enumerate(doc.services) if s.category_id == category_id]
            current = [doc.services[i].id for i in slots]
            errors = permutation_errors(current, ordered, scope=f"category '{category_id}'")
            if errors:
                raise ValidationFailed(errors)
            by_id = {doc.services[i].id: doc.services[i] for i in slots}
            for slot, service_id in zip(slots, ordered):
                doc.services[slot] = by_id[service_id]
        logger.info("Services reordered in %s (%d)", category_id, len(ordered))
        return doc.services_in(category_id)

    def upload_service_icon(self, service_id: str, data: bytes, mime_type: Optional[str],
                            filename: Optional[str]) -> Service:
        """Store an uploaded image for an existing service and point its icon at it."""
        errors = self.icons.validate_upload(service_id, data, mime_type, filename)
        if errors:
            raise ValidationFailed(errors)
        with self.store.transaction() as doc:
            idx = doc.service_index(service_id)
            if idx == -1:
                raise NotFoundError("Service not found", field="serviceId")
            path = self.icons.write(service_id, data, mime_type, filename)
            service = doc.services[idx].model_copy(update={"icon": ImageIcon(value=path)})
            doc.services[idx] = service
        self.icons.remove_stale(service_id, keep=service.icon.filename)
        return service

    # ─────────────────────────────────────────────────────────────
    # App settings
    # ─────────────────────────────────────────────────────────────
    def update_app_settings(self, payload: Any) -> AppSettings:
        data = parse_payload(AppSettingsUpdate, payload)
        fields = data.model_fields_set
        with self.store.transaction() as doc:
            previous_logo = doc.app_logo
            if "app_title" in fields:
                doc.app_title = data.app_title
            if "app_logo" in fields:
                self._check_image_ref(data.app_logo, owner=APP_LOGO_ID, field="appLogo", current=previous_logo)
                doc.app_logo = data.app_logo
        logger.info("App settings updated (%s)", ", ".join(sorted(fields)) or "no changes")

        if "app_logo" in fields:
            self._drop_replaced_image(APP_LOGO_ID, previous_logo, doc.app_logo)
        return self._settings_view(doc)

    def upload_app_logo(self, data: bytes, mime_type: Optional[str], filename: Optional[str]) -> AppSettings:
        errors = self.icons.validate_upload(APP_LOGO_ID, data, mime_type, filename)
        if errors:
            raise ValidationFailed(errors)
        with self.store.transaction() as doc:
            path = self.icons.write(APP_LOGO_ID, data, mime_type, filename)
            doc.app_logo = ImageIcon(value=path)
        self.icons.remove_stale(APP_LOGO_ID, keep=doc.app_logo.filename)
        return self._settings_view(doc)

    # ─────────────────────────────────────────────────────────────
    # Icon maintenance
    # ─────────────────────────────────────────────────────────────
    def orphan_icons(self) -> List[str]:
        """Files in the icons directory that the document does not reference."""
        doc = self.store.load()
        referenced = {s.icon.filename for s in doc.services if isinstance(s.icon, ImageIcon)}
        if doc.app_logo is not None:
            referenced.add(doc.app_logo.filename)
        return [name for name in self.icons.list_files() if name not in referenced]

    def prune_orphan_icons(self) -> List[str]:
        """
        Remove unreferenced icon files (e.g. left behind by an upload whose
        commit failed). Holds the document lock so no upload can slip in.
        """
        with self.store.locked():
            orphans = self.orphan_icons()
            for name in orphans:
                self.icons.remove_file(name)
        if orphans:
            logger.info("Pruned %d orphan icon(s): %s", len(orphans), ", ".join(orphans))
        return orphans

    def _check_image_ref(self, icon: Any, *, owner: str, field: str, current: Any = None) -> None:
        """
        Image references are only set through uploads: a new one must name the
        owner's own file, and that file must exist. Re-sending the current
        reference is accepted as is.
        """
        if not isinstance(icon, ImageIcon):
            return
        if isinstance(current, ImageIcon) and current.value == icon.value:
            return
        if icon.basename != owner:
            raise ValidationFailed(f"Image icon must be an upload for '{owner}'", field=field)
        if not self.icons.exists(icon.filename):
            raise ValidationFailed(f"Icon file '{icon.value}' does not exist", field=field)

    def _drop_replaced_image(self, owner: str, before: Any, after: Any) -> None:
        # runs after commit; before/after are the icon values around the change
        if not isinstance(before, ImageIcon):
            return
        if not isinstance(after, ImageIcon):
            self.icons.delete(owner)
        elif after.filename != before.filename:
            self.icons.remove_file(before.filename)

    def _settings_view(self, doc: DashboardConfig) -> AppSettings:
        return AppSettings(
            app_title=doc.app_title,
            app_logo=doc.app_logo,
            display_title=doc.app_title or self.default_app_title,
        )
