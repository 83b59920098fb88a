"""Fetch pipeline: message source -> extractor -> candidate store."""

from smsledger.database.base import Database
from smsledger.domain.candidates import CandidateService
from smsledger.domain.entities import FetchResult
from smsledger.domain.extractor import TransactionExtractor
from smsledger.domain.message_source import MessageSource
from smsledger.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


class FetchService:
    """Service that pulls messages once and stores the new candidates."""

    def __init__(self, db: Database):
        """Initialize fetch service.

        Args:
            db: Database instance
        """
        self.db = db
        self.candidates = CandidateService(db)

    def fetch(self, source: MessageSource) -> FetchResult:
        """Pull all messages from source and merge new candidates.

        Messages whose id was seen before, applied or not, are ignored, so
        fetching the same inbox twice adds nothing the second time.

        Raises:
            PermissionDeniedError: If the source refuses access
        """
        with LogContext(logger, "fetch"):
            messages = source.list()
            extractor = TransactionExtractor(self.db.load_accounts())
            extracted, duplicates, discarded = extractor.extract_all(
                messages, known_ids=self.candidates.known_ids()
            )
            added = self.candidates.merge(extracted)

        logger.info(
            "Fetched %d message(s): %d new, %d already seen, %d discarded",
            len(messages),
            len(added),
            duplicates,
            discarded,
        )
        return FetchResult(
            fetched=len(messages), added=added, duplicates=duplicates, discarded=discarded
        )
