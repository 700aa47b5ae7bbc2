from functools import partial

from .config.settings import Settings
from .services import (
    PollScheduler,
    Publisher,
    Supervisor,
    create_git_manager_from_settings,
    create_sink_from_settings,
)
from .services.credentials import GitCredentials, resolve_credentials


def get_credentials(settings: Settings) -> GitCredentials:
    return resolve_credentials(
        repo_url=settings.repo_url,
        key_path=settings.SSH_KEY_PATH,
        identity=settings.SSH_IDENTITY,
        token=settings.GIT_TOKEN,
    )


def get_publisher(settings: Settings) -> Publisher:
    return Publisher(create_sink_from_settings(settings))


def get_scheduler(settings: Settings) -> PollScheduler:
    return PollScheduler(interval=settings.POLL_INTERVAL_SECONDS)


# The supervisor resolves credentials and builds the git manager itself, so
# failures there go through its fail-fast handling.
def get_supervisor(settings: Settings) -> Supervisor:
    return Supervisor(
        repo=settings.REPO,
        branch=settings.BRANCH,
        credentials_provider=partial(get_credentials, settings),
        git_manager_factory=partial(create_git_manager_from_settings, settings),
        publisher=get_publisher(settings),
        scheduler=get_scheduler(settings),
        max_walk=settings.SYNC_MAX_WALK,
        startup_delay=settings.STARTUP_DELAY_SECONDS,
        fatal_grace=settings.FATAL_GRACE_SECONDS,
    )
