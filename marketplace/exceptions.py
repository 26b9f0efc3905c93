# marketplace/exceptions.py


class MarketplaceError(Exception):
    """Base class for failures the admin panel and sell form report."""

    public_message = "Something went wrong. Please try again."


class ValidationError(MarketplaceError):
    """Input failed shape/range checks. Raised before any side effect."""

    public_message = "Please fix the errors below."

    def __init__(self, errors):
        if isinstance(errors, str):
            errors = {"__all__": [errors]}
        self.errors = {field: [str(m) for m in msgs] for field, msgs in dict(errors).items()}
        super().__init__(self.errors)


class NotFound(MarketplaceError):
    public_message = "Not found."

    def __init__(self, kind: str, pk):
        self.kind = kind
        self.pk = pk
        super().__init__(f"{kind} #{pk} does not exist")


class UploadError(MarketplaceError):
    """The blob store rejected or could not finish an upload."""

    public_message = "Failed to upload one or more images."


class StoreUnavailable(MarketplaceError):
    """Transient record store failure."""


class UpstreamError(MarketplaceError):
    """The price suggestion provider failed; message is shown verbatim."""

    @property
    def public_message(self):
        return str(self)


class DeletionWarning(MarketplaceError):
    """
    Orphaned blobs could not be removed after a successful write.
    Logged only; never raised out of a mutation.
    """

    def __init__(self, bucket: str, failures: dict):
        self.bucket = bucket
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"could not delete from {bucket}: {names}")
