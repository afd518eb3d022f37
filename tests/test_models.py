from __future__ import annotations

import pytest

from homedash.errors import ValidationFailed
from homedash.models import (
    AppSettingsUpdate,
    Category,
    CategoryCreate,
    CategoryUpdate,
    DashboardConfig,
    EmojiIcon,
    ImageIcon,
    LucideIcon,
    ServiceCreate,
    ServiceUpdate,
)
from homedash.services.validation import parse_payload, permutation_errors


def _fields(exc: ValidationFailed) -> list[str]:
    return [e.field for e in exc.errors]


# ─────────────────────────────────────────────────────────────
# Categories
# ─────────────────────────────────────────────────────────────
def test_category_create_normalizes_and_resolves_icon():
    data = parse_payload(CategoryCreate, {"name": "  Media  ", "icon": {"type": "icon", "value": "film"}})
    assert data.name == "Media"
    assert data.id is None
    assert data.icon == LucideIcon(value="Film")


def test_category_rejects_image_icons():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryCreate, {"name": "Media", "icon": {"type": "image", "value": "icons/media.png"}})
    assert _fields(ei.value) == ["icon"]
    assert "not allowed" in ei.value.errors[0].message


def test_category_rejects_unknown_icon_name():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryCreate, {"name": "Media", "icon": {"type": "icon", "value": "nope-nope"}})
    assert ei.value.errors[0].field.startswith("icon")
    assert "Unknown icon name" in ei.value.errors[0].message


@pytest.mark.parametrize("name", ["", "   ", "x" * 101])
def test_category_name_length(name):
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryCreate, {"name": name})
    assert _fields(ei.value) == ["name"]


@pytest.mark.parametrize("bad_id", ["has space", "-leading", "a/b", "x" * 65, "dot.ted"])
def test_category_id_must_be_filesystem_safe(bad_id):
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryCreate, {"id": bad_id, "name": "Ok"})
    assert _fields(ei.value) == ["id"]


def test_category_update_is_partial_and_cannot_clear_name():
    upd = parse_payload(CategoryUpdate, {"icon": None})
    assert upd.model_fields_set == {"icon"}
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryUpdate, {"name": None})
    assert _fields(ei.value) == ["name"]


def test_update_rejects_changed_id_but_tolerates_echo():
    assert parse_payload(CategoryUpdate, {"id": "media", "name": "Films"}, entity_id="media").name == "Films"
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(CategoryUpdate, {"id": "other", "name": "Films"}, entity_id="media")
    assert _fields(ei.value) == ["id"]


# ─────────────────────────────────────────────────────────────
# Services
# ─────────────────────────────────────────────────────────────
def test_service_create_reports_all_errors_together():
    payload = {"name": "", "description": "", "url": "not a url", "categoryId": ""}
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(ServiceCreate, payload)
    assert _fields(ei.value) == ["name", "description", "url", "categoryId"]


def test_validation_errors_are_deterministic():
    payload = {"name": "x" * 200, "url": "plex.local", "icon": {"type": "icon", "value": "bogus"}}
    with pytest.raises(ValidationFailed) as first:
        parse_payload(ServiceCreate, payload)
    with pytest.raises(ValidationFailed) as second:
        parse_payload(ServiceCreate, payload)
    assert first.value.errors == second.value.errors
    assert first.value.to_dict() == second.value.to_dict()


def test_service_url_is_kept_verbatim():
    data = parse_payload(ServiceCreate, {
        "name": "Plex", "description": "x", "url": "https://plex.local", "categoryId": "media",
    })
    assert data.url == "https://plex.local"
    assert data.active is True


@pytest.mark.parametrize("url", ["plex.local", "/relative/path", "http://", ""])
def test_service_url_must_be_absolute(url):
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(ServiceCreate, {"name": "P", "description": "x", "url": url, "categoryId": "media"})
    assert _fields(ei.value) == ["url"]


def test_service_accepts_all_icon_kinds():
    for icon in (
        {"type": "image", "value": "icons/plex.png"},
        {"type": "icon", "value": "tv"},
        {"type": "emoji", "value": "🎬"},
    ):
        data = parse_payload(ServiceCreate, {
            "name": "Plex", "description": "x", "url": "https://plex.local", "categoryId": "media", "icon": icon,
        })
        assert data.icon.type == icon["type"]


def test_service_id_app_logo_is_reserved():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(ServiceCreate, {
            "id": "app-logo", "name": "P", "description": "x", "url": "https://p.local", "categoryId": "media",
        })
    assert _fields(ei.value) == ["id"]


def test_service_update_rejects_unknown_fields_and_nulls():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(ServiceUpdate, {"colour": "red", "url": None})
    assert set(_fields(ei.value)) == {"colour", "url"}


# ─────────────────────────────────────────────────────────────
# Icons
# ─────────────────────────────────────────────────────────────
@pytest.mark.parametrize("value", ["icons/plex.png", "icons/app-logo.svg", "/icons/plex.webp"])
def test_image_icon_paths(value):
    icon = ImageIcon(value=value)
    assert icon.value.startswith("icons/")
    assert icon.basename in ("plex", "app-logo")


@pytest.mark.parametrize("value", ["plex.png", "icons/../config.json", "icons/sub/plex.png", "icons/plex.exe", "icons/.png"])
def test_image_icon_rejects_paths_outside_icons(value):
    with pytest.raises(Exception):
        ImageIcon(value=value)


def test_emoji_must_be_short():
    assert EmojiIcon(value="🚀").value == "🚀"
    with pytest.raises(Exception):
        EmojiIcon(value="x" * 33)


def test_emoji_is_kept_verbatim():
    assert EmojiIcon(value=" 🚀 ").value == " 🚀 "
    assert LucideIcon(value="  tv ").value == "Tv"


def test_service_input_rejects_names_outside_catalog():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(ServiceUpdate, {"icon": {"type": "icon", "value": "AlarmClockCheck"}})
    assert _fields(ei.value) == ["icon"]
    assert "Unknown icon name" in ei.value.errors[0].message


def test_stored_entities_keep_names_outside_catalog():
    cat = Category(id="alerts", name="Alerts", icon={"type": "icon", "value": "AlarmClockCheck"})
    assert cat.icon == LucideIcon(value="AlarmClockCheck")
    assert LucideIcon(value="film").value == "Film"


# ─────────────────────────────────────────────────────────────
# App settings / document
# ─────────────────────────────────────────────────────────────
def test_blank_title_means_unset():
    assert parse_payload(AppSettingsUpdate, {"appTitle": "   "}).app_title is None
    assert parse_payload(AppSettingsUpdate, {"appTitle": "  Home Lab "}).app_title == "Home Lab"


def test_title_too_long():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(AppSettingsUpdate, {"appTitle": "t" * 101})
    assert _fields(ei.value) == ["appTitle"]


def test_app_logo_must_be_an_image():
    with pytest.raises(ValidationFailed) as ei:
        parse_payload(AppSettingsUpdate, {"appLogo": {"type": "emoji", "value": "🏠"}})
    assert _fields(ei.value)[0].startswith("appLogo")


def test_document_dump_uses_camel_case_and_omits_unset():
    doc = DashboardConfig.model_validate({
        "categories": [{"id": "media", "name": "Media"}],
        "services": [{
            "id": "plex", "name": "Plex", "description": "x",
            "url": "https://plex.local", "categoryId": "media",
        }],
    })
    out = doc.to_document()
    assert "appTitle" not in out and "appLogo" not in out
    assert out["services"][0]["categoryId"] == "media"
    assert out["services"][0]["active"] is True
    assert "icon" not in out["categories"][0]


# ─────────────────────────────────────────────────────────────
# Permutations
# ─────────────────────────────────────────────────────────────
def test_permutation_errors():
    assert permutation_errors(["a", "b"], ["b", "a"]) == []
    assert len(permutation_errors(["a", "b"], ["a"])) == 1
    assert len(permutation_errors(["a", "b"], ["a", "b", "c"])) == 1
    assert len(permutation_errors(["a", "b"], ["a", "a"])) == 2
