"""Content fetch interface for the semantic diff engine."""

from abc import ABC, abstractmethod


class IContentFetcher(ABC):
    """
    Abstract interface for obtaining the plain text of a document version.

    Extraction from binary formats happens behind this interface; the diff
    engine only ever sees plain text.
    """

    @abstractmethod
    def fetch_version_content(self, version_id: str, document_id: str) -> str:
        """
        Fetch the plain-text content of a document version.

        Args:
            version_id: Identifier of the version to fetch.
            document_id: Identifier of the document the version belongs to.

        Returns:
            The plain text of the version.

        Raises:
            ContentFetchError: If the content cannot be obtained.
        """
        pass
