"""
Reconciliation of a partial update against the persisted product.

Images: the final list is the kept existing images (in the caller's order)
followed by the newly uploaded ones. When the caller sends no keep
instruction every existing image is kept.

Scalars: absent leaves the stored value alone, an empty value clears it and
anything else overwrites it. The Validator has already turned empty inputs
into "" or None, so reconciliation here only has to drop UNSET fields.
"""

import json
from dataclasses import fields as dataclass_fields
from typing import Any, Dict, List, Optional, Sequence

from catalog.domain.exceptions import ProductValidationError
from catalog.domain.services.validator import UNSET, ProductUpdateFields, validate_image_count


def parse_keep_images(raw) -> Optional[List[str]]:
    """
    Parse the ``keepImages`` instruction.

    Returns None when the instruction is absent, meaning "keep everything".
    Accepts a list of URLs, its JSON serialization, or a single bare URL; an
    empty JSON list or empty string means "keep nothing".
    """
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return []
        if not text.startswith("["):
            return [text]
        try:
            raw = json.loads(text)
        except ValueError:
            raise ProductValidationError("keepImages", "keepImages must be a JSON list of image URLs")

    if not isinstance(raw, (list, tuple)):
        raise ProductValidationError("keepImages", "keepImages must be a list of image URLs")

    urls: List[str] = []
    for item in raw:
        if not isinstance(item, str) or not item.strip():
            raise ProductValidationError("keepImages", "keepImages must contain only image URLs")
        url = item.strip()
        if url not in urls:
            urls.append(url)
    return urls


def kept_images(existing: Sequence[str], keep: Optional[Sequence[str]]) -> List[str]:
    """Resolve which existing images survive. Kept URLs must belong to the product."""
    if keep is None:
        return list(existing)

    unknown = [url for url in keep if url not in existing]
    if unknown:
        raise ProductValidationError(
            "keepImages", f"Cannot keep images that do not belong to this product: {', '.join(unknown)}"
        )
    return list(keep)


def plan_images(existing: Sequence[str], keep: Optional[Sequence[str]], new_count: int) -> List[str]:
    """
    Check the final image count before anything is uploaded.

    Returns the kept images so the caller can merge the uploaded URLs later.
    """
    kept = kept_images(existing, keep)
    validate_image_count(len(kept) + new_count)
    return kept


def merge_images(existing: Sequence[str], keep: Optional[Sequence[str]], new_urls: Sequence[str]) -> List[str]:
    kept = kept_images(existing, keep)
    merged = kept + [url for url in new_urls if url not in kept]
    validate_image_count(len(merged))
    return merged


def removed_images(existing: Sequence[str], final: Sequence[str]) -> List[str]:
    return [url for url in existing if url not in final]


def reconcile_fields(update: ProductUpdateFields) -> Dict[str, Any]:
    """Model-field changes for every field that was present in the update."""
    changes = {}
    for f in dataclass_fields(update):
        value = getattr(update, f.name)
        if value is UNSET:
            continue
        changes[f.name] = value
    return changes
