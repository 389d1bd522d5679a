"""
Profiles, field specs and fill reports exchanged with the engine
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


class FieldType(Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    DATE = "date"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    SELECT = "select"
    BUTTON = "button"

    @classmethod
    def parse(cls, raw):
        """Map a stored type string (including legacy aliases) to a FieldType."""
        if isinstance(raw, cls):
            return raw
        key = str(raw or "text").strip().lower()
        key = TYPE_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            logger.warning(f"Unknown field type '{raw}', treating as text")
            return cls.TEXT


TYPE_ALIASES = {
    "email": "text",
    "phone": "text",
    "tel": "text",
    "number": "text",
    "url": "text",
    "password": "text",
    "search": "text",
}


class FailureKind(Enum):
    LOCATE = "locate"
    FILL = "fill"
    UNEXPECTED = "unexpected"


class ChainStatus(Enum):
    COMPLETED = "completed"
    CIRCULAR = "circular"
    TOO_LONG = "too_long"
    NOT_FOUND = "not_found"
    FAILED = "failed"
    BUSY = "busy"


@dataclass
class FieldSpec:
    name: str
    type: FieldType = FieldType.TEXT
    value: str = ""
    selector: Optional[str] = None
    required: bool = False

    def __post_init__(self):
        self.type = FieldType.parse(self.type)
        self.value = "" if self.value is None else str(self.value)
        self.selector = (self.selector or "").strip() or None

    @classmethod
    def from_dict(cls, data):
        return cls(
            name=str(data.get("name") or ""),
            type=data.get("type", "text"),
            value=data.get("value", ""),
            selector=data.get("selector"),
            required=bool(data.get("required", False)),
        )

    def to_dict(self):
        data = {"name": self.name, "type": self.type.value, "value": self.value}
        if self.selector:
            data["selector"] = self.selector
        if self.required:
            data["required"] = True
        return data


@dataclass
class Profile:
    id: str
    name: str
    fields: List[FieldSpec] = field(default_factory=list)
    next_profile_id: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data):
        """Accepts both the extension's camelCase export and snake_case keys."""
        metadata = dict(data.get("metadata") or {})
        for source, target in (("usageCount", "usage_count"), ("lastUsed", "last_used"),
                               ("createdAt", "created_at")):
            if source in data and target not in metadata:
                metadata[target] = data[source]
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            fields=[FieldSpec.from_dict(f) for f in data.get("fields") or []],
            next_profile_id=data.get("next_profile_id") or data.get("nextProfileId") or None,
            metadata=metadata,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "next_profile_id": self.next_profile_id,
            "metadata": dict(self.metadata),
        }

    def record_usage(self, now=None):
        self.metadata["last_used"] = now if now is not None else int(time.time() * 1000)
        self.metadata["usage_count"] = int(self.metadata.get("usage_count") or 0) + 1


@dataclass
class FillResult:
    field: str
    success: bool
    error: Optional[str] = None
    failure: Optional[FailureKind] = None
    candidate_index: Optional[int] = None


@dataclass
class FillReport:
    filled: int = 0
    total: int = 0
    results: List[FillResult] = field(default_factory=list)

    @property
    def success(self):
        return self.filled > 0

    def add(self, result):
        self.results.append(result)
        self.total += 1
        if result.success:
            self.filled += 1

    def summary(self):
        return f"{self.filled} of {self.total} fields filled"


@dataclass(frozen=True)
class ChainContext:
    visited: frozenset = frozenset()
    depth: int = 0

    def __post_init__(self):
        object.__setattr__(self, "visited", frozenset(self.visited))

    def advance(self, profile_id):
        return ChainContext(visited=self.visited | {profile_id}, depth=self.depth + 1)


@dataclass
class ChainOutcome:
    status: ChainStatus
    reports: List[Tuple[str, FillReport]] = field(default_factory=list)
    message: str = ""

    @property
    def executed(self):
        return [profile_id for profile_id, _ in self.reports]

    @property
    def success(self):
        return self.status == ChainStatus.COMPLETED and any(r.success for _, r in self.reports)
