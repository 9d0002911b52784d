"""Manifest codec — deterministic JSON for interchange and publication.

Encoding emits every declared field (unset optionals as ``null``), sorts
map keys and indents by two spaces. Decoding drops unknown fields so
documents from stages built at different times still load.

Full manifests and standalone fragments (``{key: Asset}`` or
``{key: Image}``) encode their elements through ``element_payload``, so an
element produced on its own is interchangeable with the same element
inside a full Manifest.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from relmanifest.core.errors import DecodeError
from relmanifest.models.keys import PlatformKey, RegistryKey
from relmanifest.models.manifest import SCHEMA_VERSION_V1, Asset, Image, Manifest

logger = logging.getLogger(__name__)

_INDENT = 2
_MAP_FIELDS = frozenset({"assets", "images"})

_ASSET_FRAGMENT = TypeAdapter(dict[PlatformKey, Asset])
_IMAGE_FRAGMENT = TypeAdapter(dict[RegistryKey, Image])

# Image keys written by schema "1" pipelines, which only published to GHCR.
_LEGACY_INDEX_IMAGE_KEY = "index"
_LEGACY_ARCH_IMAGE_KEYS = frozenset({"linux-amd64", "linux-arm64"})


def _dumps(payload: Any) -> str:
    return json.dumps(payload, indent=_INDENT, ensure_ascii=False)


def _key(key: Enum | str) -> str:
    return key.value if isinstance(key, Enum) else str(key)


# ----------------------------------------------------------------------
# Encoding
# ----------------------------------------------------------------------


def element_payload(element: BaseModel) -> dict[str, Any]:
    """JSON-ready dict for a single Asset, Image or descriptor."""
    return element.model_dump(mode="json", by_alias=True)


def fragment_payload(fragment: Mapping[Any, BaseModel]) -> dict[str, Any]:
    """JSON-ready dict for a key->element mapping, keys sorted."""
    ordered = sorted(fragment.items(), key=lambda item: _key(item[0]))
    return {_key(key): element_payload(value) for key, value in ordered}


def manifest_payload(manifest: Manifest) -> dict[str, Any]:
    """JSON-ready dict for a full Manifest in declared field order."""
    scalars = manifest.model_dump(mode="json", by_alias=True, exclude=set(_MAP_FIELDS))
    payload: dict[str, Any] = {}
    for name, field in Manifest.model_fields.items():
        alias = field.alias or name
        if name in _MAP_FIELDS:
            payload[alias] = fragment_payload(getattr(manifest, name))
        else:
            payload[alias] = scalars[alias]
    return payload


def encode_manifest(manifest: Manifest) -> str:
    """Serialize a Manifest to pretty-printed, field-complete JSON."""
    return _dumps(manifest_payload(manifest))


def encode_fragment(fragment: Mapping[Any, BaseModel]) -> str:
    """Serialize a key->Asset or key->Image mapping."""
    return _dumps(fragment_payload(fragment))


# ----------------------------------------------------------------------
# Decoding
# ----------------------------------------------------------------------


def _load_object(text: str, label: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(label, text, str(exc)) from exc
    if not isinstance(data, dict):
        raise DecodeError(
            label, text, f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def _validate(adapter: TypeAdapter, data: Any, text: str, label: str) -> Any:
    try:
        return adapter.validate_python(data)
    except ValidationError as exc:
        raise DecodeError(label, text, str(exc)) from exc


def _upgrade_legacy_images(data: dict[str, Any], label: str) -> dict[str, Any]:
    """Re-key the images map of a schema "1" document by registry.

    The old ``index`` entry becomes the GHCR index image. Per-architecture
    entries are dropped, since the index resolves to them.
    """
    images = data.get("images")
    if data.get("version") != SCHEMA_VERSION_V1 or not isinstance(images, dict):
        return data
    upgraded: dict[str, Any] = {}
    for key, image in images.items():
        if key == _LEGACY_INDEX_IMAGE_KEY:
            if isinstance(image, dict):
                image = {**image, "isIndex": True}
            upgraded[RegistryKey.GHCR.value] = image
        elif key in _LEGACY_ARCH_IMAGE_KEYS:
            logger.warning(
                "Dropping legacy per-architecture image %r from %s", key, label
            )
        else:
            upgraded[key] = image
    return {**data, "images": upgraded}


def decode_manifest(text: str, label: str = "manifest") -> Manifest:
    """Parse a full Manifest document, ignoring unknown fields.

    Schema "1" documents keyed their images by role (``index``,
    ``linux-amd64``); those keys are mapped onto registry keys first.
    """
    data = _upgrade_legacy_images(_load_object(text, label), label)
    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(label, text, str(exc)) from exc


def decode_asset_fragment(
    text: str, label: str = "asset fragment"
) -> dict[PlatformKey, Asset]:
    """Parse a ``{platform-key: Asset}`` fragment."""
    return _validate(_ASSET_FRAGMENT, _load_object(text, label), text, label)


def decode_image_fragment(
    text: str, label: str = "images fragment"
) -> dict[RegistryKey, Image]:
    """Parse a ``{registry-key: Image}`` fragment."""
    return _validate(_IMAGE_FRAGMENT, _load_object(text, label), text, label)
