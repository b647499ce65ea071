from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class GenerationFailure:
    entity_id: str
    message: str


@dataclass
class GenerationResult:
    """Outcome of a batch generation run.

    `generated == 0` with no failures is the normal "nothing to bill" outcome.
    """

    document_ids: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)

    @property
    def generated(self) -> int:
        return len(self.document_ids)

    def as_dict(self) -> dict:
        return {
            "generated": self.generated,
            "document_ids": list(self.document_ids),
            "skipped": list(self.skipped),
            "failures": [{"entity_id": f.entity_id, "message": f.message} for f in self.failures],
        }
