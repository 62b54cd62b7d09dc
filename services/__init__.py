"""
Application services layer.

Services validate caller input and orchestrate the domain services.
"""

# Result type for consistent error handling
from services.result import GenerationResult

# Service interfaces (ABCs)
from services.interfaces import IRosterSource, ITeamGenerationService

from services.team_generation_service import TeamGenerationService, generate

__all__ = [
    # Concrete services
    "TeamGenerationService",
    "generate",
    # Result type
    "GenerationResult",
    # Interfaces
    "IRosterSource",
    "ITeamGenerationService",
]
