"""RAML 0.8 / 1.0 document loader.

Reads a RAML source (file, URL, raw text or already-parsed mapping) and
normalizes it into the shape the templates consume: named declarations as
ordered lists of single-entry mappings, and resources as a nested list with
traits and resource types merged in.
"""

import copy
import logging
import re
from pathlib import Path
from urllib.parse import urljoin

import httpx
import yaml

from raml2html.errors import RamlLoadError
from raml2html.models import ApiDocument, SourceDescriptor

logger = logging.getLogger(__name__)

RAML_HEADER = re.compile(r"^#%RAML\s+(0\.8|1\.0)\b")
HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace", "connect")
NAMED_SECTIONS = ("securitySchemes", "schemas", "types", "traits", "resourceTypes")
YAML_SUFFIXES = (".raml", ".yaml", ".yml")
PLACEHOLDER = re.compile(r"<<\s*(\w+)\s*>>")
FETCH_TIMEOUT = 30.0


def parse(source) -> ApiDocument:
    """Load a RAML source into a normalized ApiDocument."""
    descriptor = SourceDescriptor.from_value(source)

    if descriptor.kind == "object":
        if isinstance(descriptor.value, ApiDocument):
            return ApiDocument(data=copy.deepcopy(descriptor.value.data))
        if not isinstance(descriptor.value, dict):
            raise RamlLoadError("Unsupported RAML source", type(descriptor.value).__name__)
        return ApiDocument(data=normalize(copy.deepcopy(descriptor.value)))

    text, base = _read_source(descriptor)
    if not RAML_HEADER.match(text.lstrip()):
        raise RamlLoadError("Invalid RAML header", "expected '#%RAML 0.8' or '#%RAML 1.0'")

    raw = _load_yaml(text, base)
    if not isinstance(raw, dict):
        raise RamlLoadError("Invalid RAML document", "root must be a mapping")
    if not raw.get("title"):
        raise RamlLoadError("Invalid RAML document", "missing title")

    return ApiDocument(data=normalize(raw))


def normalize(raw: dict) -> dict:
    """Normalize a raw RAML mapping into the structure the templates expect."""
    doc = {key: value for key, value in raw.items() if not str(key).startswith("/")}

    for section in NAMED_SECTIONS:
        if section in doc:
            doc[section] = _as_named_list(doc[section])
    doc.setdefault("securitySchemes", [])

    context = {
        "traits": _as_mapping(doc.get("traits")),
        "resourceTypes": _as_mapping(doc.get("resourceTypes")),
        "securedBy": doc.get("securedBy"),
    }

    resources = [
        _build_resource(str(uri), node, "", context)
        for uri, node in raw.items()
        if str(uri).startswith("/")
    ]
    if resources:
        doc["resources"] = resources
    return doc


# ---------- reading ----------


def _read_source(descriptor: SourceDescriptor) -> tuple[str, object]:
    if descriptor.kind == "text":
        return descriptor.value, Path.cwd()

    if descriptor.kind == "url":
        return _fetch(descriptor.value), descriptor.value

    path = Path(descriptor.value)
    logger.debug("Reading RAML from %s", path)
    try:
        return path.read_text(encoding="utf-8"), path.parent
    except (OSError, UnicodeDecodeError) as e:
        raise RamlLoadError(f"Cannot read {path}", str(e)) from e


def _fetch(url: str) -> str:
    logger.debug("Fetching RAML from %s", url)
    try:
        response = httpx.get(url, follow_redirects=True, timeout=FETCH_TIMEOUT)
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise RamlLoadError(f"Cannot fetch {url}", str(e)) from e
    return response.text


def _read_include(base, target: str) -> tuple[str, object]:
    """Read an included file relative to ``base`` (a directory or a URL)."""
    if isinstance(base, str):
        url = urljoin(base, target)
        return _fetch(url), url

    path = Path(base) / target
    try:
        return path.read_text(encoding="utf-8"), path.parent
    except (OSError, UnicodeDecodeError) as e:
        raise RamlLoadError(f"Cannot include {target}", str(e)) from e


def _load_yaml(text: str, base):
    try:
        return yaml.load(text, Loader=_include_loader(base))
    except yaml.YAMLError as e:
        raise RamlLoadError("Invalid RAML syntax", str(e)) from e


def _include_loader(base) -> type:
    """Build a SafeLoader subclass whose ``!include`` resolves against ``base``."""

    class IncludeLoader(yaml.SafeLoader):
        pass

    def _include(loader, node):
        target = loader.construct_scalar(node)
        text, include_base = _read_include(base, target)
        if target.lower().endswith(YAML_SUFFIXES):
            return _load_yaml(text, include_base)
        return text

    IncludeLoader.add_constructor("!include", _include)
    return IncludeLoader


# ---------- normalization ----------


def _as_named_list(section) -> list[dict]:
    """RAML 1.0 maps and RAML 0.8 lists both become lists of single-entry maps."""
    if isinstance(section, dict):
        return [{name: value} for name, value in section.items()]
    if isinstance(section, list):
        items = []
        for entry in section:
            if isinstance(entry, dict):
                items.extend({name: value} for name, value in entry.items())
        return items
    return []


def _as_mapping(section) -> dict:
    merged = {}
    for entry in _as_named_list(section):
        merged.update(entry)
    return merged


def _build_resource(relative_uri: str, node, parent_url: str, context: dict) -> dict:
    full_path = parent_url + relative_uri
    if node is not None and not isinstance(node, dict):
        raise RamlLoadError("Invalid resource", full_path)
    node = dict(node or {})
    params = {
        "resourcePath": full_path,
        "resourcePathName": _resource_path_name(full_path),
    }

    if "type" in node:
        node = _apply_resource_type(node, context, params)

    resource = {
        "relativeUri": relative_uri,
        "parentUrl": parent_url,
        "uniqueId": re.sub(r"\W", "_", full_path),
        "displayName": node.get("displayName", relative_uri),
    }

    methods = []
    children = []
    for key, value in node.items():
        key = str(key)
        if key.startswith("/"):
            children.append(_build_resource(key, value, full_path, context))
        elif key.lower() in HTTP_METHODS:
            if value is not None and not isinstance(value, dict):
                raise RamlLoadError("Invalid method", f"{key} {full_path}")
            traits = _trait_refs(node.get("is")) + _trait_refs((value or {}).get("is"))
            methods.append(_build_method(key.lower(), value, traits, context, params))
        elif key not in resource:
            resource[key] = value

    if methods:
        resource["methods"] = methods
    if children:
        resource["resources"] = children
    return resource


def _build_method(name: str, node, traits: list, context: dict, params: dict) -> dict:
    method = dict(node or {})
    method_params = dict(params, methodName=name)

    for trait_name, trait_params in traits:
        trait = context["traits"].get(trait_name)
        if trait is None:
            raise RamlLoadError("Unknown trait", trait_name)
        if not isinstance(trait, dict):
            raise RamlLoadError("Invalid trait", trait_name)
        trait = _substitute(copy.deepcopy(trait), dict(method_params, **trait_params))
        method = _merge(trait, method)

    if "securedBy" not in method and context.get("securedBy"):
        secured_by = context["securedBy"]
        method["securedBy"] = list(secured_by) if isinstance(secured_by, list) else [secured_by]

    method["method"] = name
    return method


def _apply_resource_type(node: dict, context: dict, params: dict, depth: int = 0) -> dict:
    type_name, type_params = _reference(node.pop("type"))
    resource_type = context["resourceTypes"].get(type_name)
    if resource_type is None:
        raise RamlLoadError("Unknown resource type", type_name)
    if not isinstance(resource_type, dict):
        raise RamlLoadError("Invalid resource type", type_name)
    if depth > 10:
        raise RamlLoadError("Resource type nesting too deep", type_name)

    resource_type = _substitute(copy.deepcopy(resource_type), dict(params, **type_params))
    resource_type.pop("usage", None)
    if "type" in resource_type:
        resource_type = _apply_resource_type(resource_type, context, params, depth + 1)

    merged = {}
    for key, value in resource_type.items():
        key = str(key)
        if key.endswith("?"):
            # Optional methods only apply when the resource declares them
            if key[:-1] in node:
                merged[key[:-1]] = value
        else:
            merged[key] = value
    return _merge(merged, node)


def _trait_refs(refs) -> list[tuple[str, dict]]:
    if not refs:
        return []
    if not isinstance(refs, list):
        refs = [refs]
    return [_reference(ref) for ref in refs]


def _reference(ref) -> tuple[str, dict]:
    """A trait/type reference is either a name or ``{name: {param: value}}``."""
    if isinstance(ref, dict):
        if len(ref) != 1:
            raise RamlLoadError("Invalid reference", str(ref))
        name, params = next(iter(ref.items()))
        if params is not None and not isinstance(params, dict):
            raise RamlLoadError("Invalid reference parameters", str(name))
        return str(name), dict(params or {})
    return str(ref), {}


def _substitute(value, params: dict):
    if isinstance(value, str):
        return PLACEHOLDER.sub(lambda m: str(params.get(m.group(1), m.group(0))), value)
    if isinstance(value, dict):
        return {_substitute(k, params): _substitute(v, params) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute(v, params) for v in value]
    return value


def _merge(base: dict, override: dict) -> dict:
    """Deep-merge ``override`` onto ``base``; values from ``override`` win."""
    result = dict(base)
    for key, value in override.items():
        if value is None and isinstance(result.get(key), dict):
            # `get:` with no body still picks up the inherited definition
            continue
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def _resource_path_name(full_path: str) -> str:
    segments = [s for s in full_path.split("/") if s and not s.startswith("{")]
    return segments[-1] if segments else ""
