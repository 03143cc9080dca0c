"""Damaged-baggage incident reporting for the airport station."""
from regisbags.application.use_cases import GenerateReportUseCase, ReportContext
from regisbags.domain.assembler import ReportAssembler
from regisbags.domain.models import IncidentRecord, PeriodSpec
from regisbags.domain.periods import resolve_period
from regisbags.domain.services import IncidentAggregator
from regisbags.infrastructure.repositories.memory_repository import InMemoryIncidentRepository
from regisbags.infrastructure.repositories.tabular_repository import TabularIncidentRepository

__all__ = [
    "GenerateReportUseCase",
    "ReportContext",
    "ReportAssembler",
    "IncidentRecord",
    "PeriodSpec",
    "resolve_period",
    "IncidentAggregator",
    "InMemoryIncidentRepository",
    "TabularIncidentRepository",
]
