from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Athlete:
    name: str
    team: str

    @property
    def file_name(self) -> str:
        return f"{self.team}_{self.name}.pdf"


@dataclass(frozen=True)
class ProcessingProgress:
    current: int
    total: int
    current_athlete: Optional[str] = None
    is_complete: bool = False

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.current / self.total * 100


class LogStatus(str, Enum):
    SUCCESS = "success"
    SKIP = "skip"
    ERROR = "error"


LOG_HEADER = ["Timestamp", "Name", "Team", "Status", "Message", "Reference"]


@dataclass(frozen=True)
class LogEntry:
    timestamp: str
    athlete_name: str
    team: str
    status: LogStatus
    message: str
    pdf_reference: Optional[str] = None

    def to_row(self) -> List[str]:
        """Cells written to the PDF_Log tab, in LOG_HEADER order."""
        return [
            self.timestamp,
            self.athlete_name,
            self.team,
            self.status.value,
            self.message,
            self.pdf_reference or "",
        ]


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass
class Settings:
    theme: Theme = Theme.SYSTEM
    company_logo: Optional[str] = None
    company_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme.value,
            "companyLogo": self.company_logo,
            "companyName": self.company_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        return cls(
            theme=Theme(data.get("theme") or Theme.SYSTEM.value),
            company_logo=data.get("companyLogo") or None,
            company_name=data.get("companyName") or None,
        )
