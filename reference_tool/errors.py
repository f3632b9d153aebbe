# reference_tool/errors.py

from __future__ import annotations

from typing import Optional


class ReferenceToolError(RuntimeError):
    """
    Base class for every error this package raises on purpose.

    The CLI catches this type and turns it into a readable message plus a
    non-zero exit code.
    """


class FetchError(ReferenceToolError):
    """
    A single request to the bibliographic API failed.

    Covers transport errors, timeouts, non-2xx responses and bodies that
    are not the JSON shape we expect.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class PaperNotFoundError(FetchError):
    """The search returned no record for the requested identifier."""


class MalformedRecordError(FetchError):
    """A paper record is missing a field we cannot do without."""


class MalformedReference(ReferenceToolError):
    """
    One entry of a reference list could not be parsed.

    Only that entry is dropped; the rest of the batch is kept.
    """


class RootResolutionFailed(ReferenceToolError):
    """The root paper of a network build could not be resolved."""

    def __init__(self, message: str, *, external_id: str) -> None:
        super().__init__(message)
        self.external_id = external_id


class ReferenceFetchFailed(ReferenceToolError):
    """References for one paper could not be fetched during a build."""

    def __init__(self, message: str, *, paper_id: str) -> None:
        super().__init__(message)
        self.paper_id = paper_id


class ConfigError(ReferenceToolError):
    """The configuration file exists but cannot be read or validated."""
