import logging

from onboarding_tutor.agents.models import UserProfile
from onboarding_tutor.core.workspace import PROFILE_FILENAME, WorkspaceConfig
from onboarding_tutor.services.json_store import JsonDocumentStore

logger = logging.getLogger(__name__)


class ProfileStore:
    """Reads and writes the learner profile (`user_profile.json`)."""

    def __init__(self, config: WorkspaceConfig):
        self._store: JsonDocumentStore[UserProfile] = JsonDocumentStore(
            config.state_file(PROFILE_FILENAME), UserProfile
        )

    def load_profile(self) -> UserProfile | None:
        return self._store.read()

    def save_profile(self, profile: UserProfile) -> None:
        self._store.write(profile)
        logger.info(
            f"💾 Saved profile (role={profile.primary_role or '-'}, "
            f"experience={profile.experience_level or '-'})"
        )

    def profile_exists(self) -> bool:
        return self._store.exists()

    def delete_profile(self) -> None:
        self._store.delete()
