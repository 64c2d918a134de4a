"""JSON schema expander.

Inlines ``$ref`` references between the schemas declared in a RAML document
so every body schema can be read on its own.
"""

import copy
import json

from raml2html.models import ApiDocument


def expand_json_schemas(document: ApiDocument) -> ApiDocument:
    """Return a copy of ``document`` with referenced JSON schemas inlined."""
    data = copy.deepcopy(document.data)
    catalog = _schema_catalog(data.get("schemas", []))

    for resource in data.get("resources", []):
        _expand_resource(resource, catalog)

    return document.model_copy(update={"data": data})


def _schema_catalog(schemas: list[dict]) -> dict[str, dict]:
    """Index declared JSON schemas by name and by their ``id``/``$id``."""
    catalog = {}
    for entry in schemas:
        for name, schema in entry.items():
            parsed = _load_json(schema)
            if parsed is None:
                continue
            catalog[str(name)] = parsed
            for key in ("id", "$id"):
                if isinstance(parsed.get(key), str):
                    catalog[parsed[key].rstrip("#")] = parsed
    return catalog


def _expand_resource(resource: dict, catalog: dict) -> None:
    for method in resource.get("methods", []):
        _expand_body(method.get("body"), catalog)
        for response in (method.get("responses") or {}).values():
            if isinstance(response, dict):
                _expand_body(response.get("body"), catalog)

    for child in resource.get("resources", []):
        _expand_resource(child, catalog)


def _expand_body(body, catalog: dict) -> None:
    if not isinstance(body, dict):
        return

    for entry in body.values():
        if not isinstance(entry, dict) or not isinstance(entry.get("schema"), str):
            continue
        schema = entry["schema"]
        parsed = catalog.get(schema) or _load_json(schema)
        if parsed is None:
            continue
        entry["schema"] = json.dumps(_resolve(parsed, catalog, ()), indent=2)


def _resolve(node, catalog: dict, seen: tuple):
    if isinstance(node, list):
        return [_resolve(item, catalog, seen) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str):
        target = ref.rstrip("#")
        if target in catalog and target not in seen:
            return _resolve(catalog[target], catalog, seen + (target,))
        return dict(node)

    return {key: _resolve(value, catalog, seen) for key, value in node.items()}


def _load_json(schema) -> dict | None:
    if isinstance(schema, dict):
        return schema
    if not isinstance(schema, str):
        return None
    try:
        parsed = json.loads(schema)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None
