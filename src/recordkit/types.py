"""Framework-neutral data aliases."""

from __future__ import annotations

from typing import Any

type Record = Any
type FieldMapping = dict[str, Any]
