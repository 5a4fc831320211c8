# eco9/state.py
# Per-application state, created in the FastAPI lifespan and torn down with it.
from dataclasses import dataclass, field

from .config import Settings
from .repository import ActivityRepository, build_repository
from .service import ActivityService


@dataclass
class AppState:
    settings: Settings
    repository: ActivityRepository | None = None
    activities: ActivityService | None = field(default=None, repr=False)

    @classmethod
    def open(cls, settings: Settings, repository: ActivityRepository | None = None):
        state = cls(settings=settings)
        state.repository = repository or build_repository(settings)
        state.activities = ActivityService(state.repository)
        return state

    def close(self):
        if self.repository is not None:
            self.repository.close()
        self.repository = None
        self.activities = None
