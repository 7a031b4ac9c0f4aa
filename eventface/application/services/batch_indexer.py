"""
Bounded-concurrency batch indexing.

Assets are indexed in windows of `window_size` concurrent tasks with a pause
between windows. A rate-limited asset is retried with exponential backoff
and jitter; any other error fails that asset only. The whole batch is
aborted only when the index service itself is unreachable.
"""
import asyncio
import logging
import random
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Sequence, Union

from ...domain import storage_keys
from ...domain.constants.media_constants import INDEXABLE_IMAGE_EXTENSIONS
from ...domain.exceptions import (
    EventFaceError,
    IndexFailure,
    IndexServiceUnavailable,
    RateLimited,
)
from ...domain.gateways.object_storage import ObjectStorage
from ...domain.identifiers import disambiguate, frame_identifier, sanitize
from ...domain.models.indexing import AssetState, BatchResult, FailedAsset, IndexRequest
from ...domain.repositories.identifier_map_repository import IdentifierMapRepository
from ...infrastructure.utils.retry import retry_with_backoff
from ...infrastructure.utils.scheduler import AsyncioScheduler, Scheduler
from .index_client import IndexClient

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


class _BatchRun:
    """Mutable bookkeeping of one index_batch call."""

    def __init__(self, requests: List[IndexRequest], on_progress: Optional[ProgressCallback]) -> None:
        self.total = len(requests)
        self.states: Dict[str, AssetState] = {r.asset_key: AssetState.PENDING for r in requests}
        self.attempts: Dict[str, int] = {r.asset_key: 0 for r in requests}
        self.result = BatchResult()
        self.on_progress = on_progress

    def succeed(self, asset_key: str) -> None:
        self.states[asset_key] = AssetState.SUCCEEDED
        self.result.successful.append(asset_key)
        self._progress(asset_key)

    def fail(self, asset_key: str, error: str) -> None:
        self.states[asset_key] = AssetState.FAILED
        self.result.failed.append(FailedAsset(asset_key=asset_key, error=error))
        self._progress(asset_key)

    def _progress(self, asset_key: str) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(self.result.total, self.total, asset_key)
        except Exception as e:
            logger.warning(f"Progress callback failed: {e}")


class BatchIndexer:
    """Indexes many assets into one collection."""

    def __init__(
        self,
        index_client: IndexClient,
        storage: ObjectStorage,
        identifier_map: IdentifierMapRepository,
        scheduler: Optional[Scheduler] = None,
        window_size: int = 10,
        window_pause: float = 1.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        jitter: float = 1.0,
        asset_timeout: Optional[float] = 60.0,
        random_fn: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if window_size < 1:
            raise ValueError("Window size must be at least 1")
        self.index_client = index_client
        self.storage = storage
        self.identifier_map = identifier_map
        self.scheduler = scheduler or AsyncioScheduler()
        self.window_size = window_size
        self.window_pause = window_pause
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.jitter = jitter
        self.asset_timeout = asset_timeout
        self.random_fn = random_fn

    async def index_batch(
        self,
        collection_id: str,
        assets: Sequence[Union[IndexRequest, str]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """
        Index `assets` (asset keys or IndexRequests) into the collection.

        The collection must already exist. Results are collected in completion
        order and every distinct asset key appears exactly once.

        Raises:
            IndexServiceUnavailable: the index service cannot be reached; raised
                once the current window has settled
        """
        requests = self._normalize(assets)
        if not requests:
            return BatchResult()

        run = _BatchRun(requests, on_progress)
        windows = [requests[i:i + self.window_size] for i in range(0, len(requests), self.window_size)]
        logger.info(
            f"Indexing {len(requests)} asset(s) into collection {collection_id} "
            f"in {len(windows)} window(s) of up to {self.window_size}"
        )

        for number, window in enumerate(windows, start=1):
            outcomes = await asyncio.gather(
                *(self._index_one(collection_id, request, run) for request in window),
                return_exceptions=True,
            )
            for outcome in outcomes:
                if isinstance(outcome, IndexServiceUnavailable):
                    logger.error(f"Index service unavailable, aborting batch for {collection_id}: {outcome}")
                    raise outcome
                if isinstance(outcome, BaseException):
                    raise outcome

            if number < len(windows):
                logger.debug(f"Window {number}/{len(windows)} done, pausing {self.window_pause}s")
                await self.scheduler.sleep(self.window_pause)

        logger.info(
            f"Batch indexing for {collection_id} completed. "
            f"Successful: {len(run.result.successful)}, Failed: {len(run.result.failed)}"
        )
        return run.result

    async def index_all_outstanding(
        self,
        collection_id: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> BatchResult:
        """
        Index every stored image and every extracted video frame of the
        collection. Used to rebuild a collection that was never created.

        Returns an empty result, without creating the collection, when the
        collection has no indexable asset.
        """
        requests = await self.list_outstanding(collection_id)
        if not requests:
            logger.info(f"No indexable assets found for collection {collection_id}")
            return BatchResult()

        await self.index_client.ensure_collection(collection_id)
        return await self.index_batch(collection_id, requests, on_progress=on_progress)

    async def list_outstanding(self, collection_id: str) -> List[IndexRequest]:
        """Index requests for every image and frame stored under the collection."""
        requests: List[IndexRequest] = []

        for key in await self.storage.list_keys(storage_keys.images_prefix(collection_id)):
            extension = storage_keys.basename(key).rpartition(".")[2].lower()
            if f".{extension}" in INDEXABLE_IMAGE_EXTENSIONS:
                requests.append(IndexRequest(asset_key=key))

        video_names: Dict[str, str] = {}
        frames: "OrderedDict[str, List[str]]" = OrderedDict()
        for key in await self.storage.list_keys(storage_keys.videos_prefix(collection_id)):
            directory = storage_keys.video_dir_of(key)
            if directory is None:
                continue
            if storage_keys.is_video_file_key(key):
                video_names[directory] = storage_keys.basename(key)
            elif storage_keys.is_frame_key(key):
                frames.setdefault(directory, []).append(key)

        for directory, frame_keys in frames.items():
            # Without the video file, fall back to the video id
            video_name = video_names.get(directory) or directory.rstrip("/").rsplit("/", 1)[-1]
            for key in sorted(frame_keys, key=storage_keys.frame_number_from_key):
                number = storage_keys.frame_number_from_key(key)
                requests.append(IndexRequest(asset_key=key, external_id=frame_identifier(video_name, number)))

        logger.debug(f"Found {len(requests)} indexable asset(s) for collection {collection_id}")
        return requests

    async def claim_identifier(self, collection_id: str, asset_key: str, external_id: str) -> str:
        """
        Reserve external_id for asset_key in the identifier side index.
        A name already taken by a different asset gets a digest suffix.
        """
        owner = await self.identifier_map.claim(collection_id, external_id, asset_key)
        if owner == asset_key:
            return external_id

        alternative = disambiguate(external_id, asset_key)
        logger.info(
            f"Identifier {external_id} already belongs to {owner}, using {alternative} for {asset_key}"
        )
        owner = await self.identifier_map.claim(collection_id, alternative, asset_key)
        if owner != asset_key:
            raise IndexFailure(f"Could not reserve a unique identifier for {asset_key}")
        return alternative

    def _normalize(self, assets: Sequence[Union[IndexRequest, str]]) -> List[IndexRequest]:
        requests: List[IndexRequest] = []
        seen = set()
        for asset in assets:
            request = asset if isinstance(asset, IndexRequest) else IndexRequest(asset_key=asset)
            if not request.asset_key or request.asset_key in seen:
                continue
            seen.add(request.asset_key)
            requests.append(request)
        return requests

    async def _index_one(self, collection_id: str, request: IndexRequest, run: _BatchRun) -> None:
        asset_key = request.asset_key
        run.states[asset_key] = AssetState.IN_FLIGHT

        try:
            external_id = request.external_id or sanitize(storage_keys.basename(asset_key))
            if not external_id:
                raise IndexFailure(f"No usable identifier can be derived from {asset_key}")
            external_id = await self.claim_identifier(collection_id, asset_key, external_id)

            async def attempt() -> List[str]:
                run.states[asset_key] = AssetState.IN_FLIGHT
                run.attempts[asset_key] += 1
                call = self.index_client.index_asset(collection_id, asset_key, external_id)
                if self.asset_timeout:
                    return await asyncio.wait_for(call, timeout=self.asset_timeout)
                return await call

            def on_retry(retry: int, error: BaseException, delay: float) -> None:
                run.states[asset_key] = AssetState.RETRY_SCHEDULED

            await retry_with_backoff(
                attempt,
                max_retries=self.max_retries,
                initial_delay=self.base_delay,
                max_delay=self.max_delay,
                jitter=self.jitter,
                exceptions=(RateLimited,),
                scheduler=self.scheduler,
                random_fn=self.random_fn,
                on_retry=on_retry,
                description=f"index {asset_key}",
            )
        except IndexServiceUnavailable as e:
            run.fail(asset_key, e.message)
            raise
        except asyncio.TimeoutError:
            logger.error(f"Indexing {asset_key} timed out after {self.asset_timeout}s")
            run.fail(asset_key, f"Timed out after {self.asset_timeout}s")
        except RateLimited as e:
            logger.error(f"Failed to index {asset_key} after {run.attempts[asset_key]} attempts: {e.message}")
            run.fail(asset_key, f"Rate limited after {run.attempts[asset_key]} attempts: {e.message}")
        except EventFaceError as e:
            logger.error(f"Failed to index {asset_key}: {e.message}")
            run.fail(asset_key, e.message)
        except Exception as e:
            logger.error(f"Unexpected error indexing {asset_key}: {e}", exc_info=True)
            run.fail(asset_key, str(e) or e.__class__.__name__)
        else:
            run.succeed(asset_key)
