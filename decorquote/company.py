# decorquote/company.py
from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .errors import PaymentSplitError
from .pricing import round2
from .records import SETTINGS, CompanySettings
from .store import DocumentStore

logger = logging.getLogger(__name__)


def get_settings(store: DocumentStore) -> CompanySettings:
    """
    Stored settings shallow-merged over the defaults, so fields added in a
    later release still get a value. Nothing is written when nothing is stored.
    """
    stored = store.read(SETTINGS)
    defaults = CompanySettings().model_dump(mode="json")
    merged = dict(defaults)
    if isinstance(stored, dict):
        merged.update(stored)
    try:
        return CompanySettings.model_validate(merged)
    except ValidationError as exc:
        # e.g. a restored backup with a bad field: fall back per field
        bad = sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]})
        logger.warning("Ignoring invalid stored settings: %s", ", ".join(bad))
        merged.update({k: defaults[k] for k in bad if k in defaults})
        return CompanySettings.model_validate(merged)


def check_payment_split(settings: CompanySettings) -> None:
    observed = round2(
        settings.default_payment_deposit
        + settings.default_payment_second
        + settings.default_payment_balance
    )
    if observed != 100:
        raise PaymentSplitError(observed)


def update_settings(store: DocumentStore, changes: Mapping[str, Any]) -> CompanySettings:
    current = get_settings(store).model_dump(mode="json")
    updated = CompanySettings.model_validate({**current, **changes})
    check_payment_split(updated)
    store.write(SETTINGS, updated.model_dump(mode="json"))
    logger.info("Company settings updated (%s)", ", ".join(sorted(changes)) or "no fields")
    return updated
