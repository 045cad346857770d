"""Value objects produced by a multi-section medicine analysis."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from models.language import Language


class SectionStatus(str, Enum):
    LOADING = "loading"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class AnalysisSection:
    """One independently prompted slice of the analysis.

    Attributes:
        key: Catalog key (e.g. ``dosage``).
        title: Localized heading used in the assembled report.
        content: Completion text once the section is complete.
        status: Lifecycle state; leaves ``loading`` exactly once.
        error: Failure detail when the section settled with an error.
    """

    key: str
    title: str
    content: str = ""
    status: SectionStatus = SectionStatus.LOADING
    error: Optional[str] = None

    @property
    def settled(self) -> bool:
        return self.status is not SectionStatus.LOADING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "content": self.content,
            "status": self.status.value,
            "error": self.error,
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Final outcome of an orchestrator run, sections in catalog order."""

    language: Language
    sections: Tuple[AnalysisSection, ...]
    report: str

    @property
    def failed_sections(self) -> Tuple[str, ...]:
        return tuple(s.key for s in self.sections if s.status is SectionStatus.ERROR)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lang": self.language.value,
            "sections": [section.to_dict() for section in self.sections],
            "report": self.report,
        }
