"""Exception hierarchy for the sourcing pipeline."""


class SourcingError(Exception):
    """Base class for all sourcing failures."""


class ProviderError(SourcingError):
    """A provider adapter failed on configuration or transport.

    Zero results is never a ProviderError; adapters return an empty list.
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class ProviderNotConfiguredError(ProviderError):
    """Credentials required by a provider are missing."""


class NoCredentialsAvailable(ProviderError):
    """Every configured token is exhausted.

    ``retry_after`` is the number of seconds until the earliest token resets.
    """

    def __init__(self, retry_after: float, *, source: str | None = None) -> None:
        hours = retry_after / 3600
        msg = (
            "No available tokens: all credentials have hit their usage limit. "
            f"Next reset in {hours:.1f} hours"
        )
        super().__init__(msg, source=source)
        self.retry_after = retry_after


class JobNotFoundError(SourcingError):
    """The requested job id does not exist."""

    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class PersistenceError(SourcingError):
    """The persistence gateway could not complete a read or write."""
