"""Convert stored rows and aggregation results to JSON friendly dictionaries."""

from __future__ import annotations

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping

from .models import AggregationResult
from .money import from_cents

HIDDEN_FIELDS = frozenset({"password_hash"})
_CENTS_SUFFIX = "_cents"


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class ApiExporter:
    """Shape rows the way the dashboard expects them: camelCase keys, decimal strings."""

    def record(self, row: Any) -> Dict[str, Any]:
        raw: Mapping[str, Any] = row if isinstance(row, Mapping) else row.model_dump()
        payload: Dict[str, Any] = {}
        for key, value in raw.items():
            if key in HIDDEN_FIELDS:
                continue
            if key.endswith(_CENTS_SUFFIX):
                key = key[: -len(_CENTS_SUFFIX)]
                value = None if value is None else from_cents(value)
            payload[camel_case(key)] = self._serialise_value(value)
        return payload

    def records(self, rows: Iterable[Any]) -> List[Dict[str, Any]]:
        return [self.record(row) for row in rows]

    def payment_settings(self, settings: Any) -> Dict[str, Any]:
        """Flatten the stored drago pricing next to the payout tiers."""

        payload = self.record(settings)
        raw_points = payload.pop("dragoPoints", None) or "{}"
        try:
            drago_points = json.loads(raw_points)
        except ValueError:
            drago_points = {}
        if isinstance(drago_points, dict):
            payload.update({key: value for key, value in drago_points.items() if isinstance(value, int)})
        return payload

    def aggregation(self, result: AggregationResult) -> Dict[str, Any]:
        return result.to_dict()

    def _serialise_value(self, value: Any) -> Any:
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return value


__all__ = ["ApiExporter", "camel_case"]
