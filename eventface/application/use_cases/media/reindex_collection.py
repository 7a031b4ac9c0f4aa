# Standard library imports
import logging

# Local application imports
from ...dto.media_dto import FailedAssetResponse, ReindexResponse
from ...services.batch_indexer import BatchIndexer

logger = logging.getLogger(__name__)


class ReindexCollectionUseCase:
    """Use case for indexing every stored photo and video frame of a collection"""

    def __init__(self, batch_indexer: BatchIndexer) -> None:
        self.batch_indexer = batch_indexer

    async def execute(self, collection_id: str) -> ReindexResponse:
        if not collection_id:
            raise ValueError("Collection ID is required")

        result = await self.batch_indexer.index_all_outstanding(collection_id)
        logger.info(
            f"Reindexed {collection_id}: {len(result.successful)} ok, {len(result.failed)} failed"
        )
        return ReindexResponse(
            collection_id=collection_id,
            successful=list(result.successful),
            failed=[FailedAssetResponse(asset=f.asset_key, error=f.error) for f in result.failed],
            total=result.total,
        )
