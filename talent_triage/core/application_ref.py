"""
Application references.

Applications come in two variants stored in different collections. Inside
the engine an application is addressed by an ApplicationRef (variant plus
raw store id); the ``candidate-`` / ``public-`` prefixed string is only the
client-facing spelling of a ref.
"""

from dataclasses import dataclass
from typing import Iterable

from talent_triage.core.exceptions import InputError
from talent_triage.utils.constants import ApplicationKind


@dataclass(frozen=True, order=True)
class ApplicationRef:
    """Identity of one application: which variant, and its id in that variant's store."""

    kind: ApplicationKind
    raw_id: str

    def __post_init__(self) -> None:
        if not self.raw_id:
            raise InputError(f"Empty {self.kind.value} application id", field="applicationIds")

    @classmethod
    def parse(cls, value: str) -> "ApplicationRef":
        """
        Parse a client-facing application id.

        Raises:
            InputError: If the id carries no known variant prefix or no id after it
        """
        if isinstance(value, str):
            for kind in ApplicationKind:
                if value.startswith(kind.id_prefix):
                    raw_id = value[len(kind.id_prefix):].strip()
                    if raw_id:
                        return cls(kind=kind, raw_id=raw_id)
                    break
        raise InputError(f"Invalid application ID format: {value!r}", field="applicationIds")

    @classmethod
    def candidate(cls, raw_id: object) -> "ApplicationRef":
        return cls(kind=ApplicationKind.CANDIDATE, raw_id=str(raw_id))

    @classmethod
    def public(cls, raw_id: object) -> "ApplicationRef":
        return cls(kind=ApplicationKind.PUBLIC, raw_id=str(raw_id))

    def __str__(self) -> str:
        return f"{self.kind.id_prefix}{self.raw_id}"


def parse_application_ids(values: Iterable[str]) -> list[ApplicationRef]:
    """
    Parse client-facing ids, dropping repeats but keeping first-seen order.

    Raises:
        InputError: Listing every id that could not be parsed
    """
    refs: list[ApplicationRef] = []
    invalid: list[str] = []

    for value in values:
        try:
            ref = ApplicationRef.parse(value)
        except InputError:
            invalid.append(repr(value))
            continue
        if ref not in refs:
            refs.append(ref)

    if invalid:
        raise InputError(
            f"Invalid application ID format: {', '.join(invalid)}",
            field="applicationIds",
        )
    return refs


def partition_by_kind(refs: Iterable[ApplicationRef]) -> dict[ApplicationKind, list[str]]:
    """Group refs into per-variant buckets of raw ids; empty buckets are omitted."""
    buckets: dict[ApplicationKind, list[str]] = {}
    for ref in refs:
        bucket = buckets.setdefault(ref.kind, [])
        if ref.raw_id not in bucket:
            bucket.append(ref.raw_id)
    return buckets
