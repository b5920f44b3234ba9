# Released under MIT License.
# Copyright (c) 2025 Ladislav Bartos and Robert Vacha Lab

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from pathlib import Path
from typing import Self

from zipd_lib.build.builder import Builder
from zipd_lib.core.common import format_duration
from zipd_lib.core.config import CFG
from zipd_lib.core.error import ZipdError
from zipd_lib.core.logger import get_logger
from zipd_lib.ident.generator import new_id
from zipd_lib.properties.member import ArchiveJob, MemberRequest
from zipd_lib.publish.publisher import Publisher
from zipd_lib.resolve.resolver import Resolver

logger = get_logger(__name__, show_time=True)


class Orchestrator:
    """
    Accepts archive requests and builds and publishes their archives in the background.

    Every request runs on its own worker thread and shares no mutable state
    with other requests. The outcome of a request is observable only through
    the logs and the presence of the published archive.
    """

    def __init__(
        self,
        builder: Builder,
        publisher: Publisher,
        max_workers: int = CFG.orchestrator.max_workers,
    ):
        """
        Initialize the Orchestrator.

        Args:
            builder (Builder): Builder used to create temporary archives.
            publisher (Publisher): Publisher used to make the archives visible.
            max_workers (int): Maximum number of archives built at the same time.
        """
        self._builder = builder
        self._publisher = publisher
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="zipd-job"
        )

    @classmethod
    def fromConfig(cls) -> Self:
        """
        Create an Orchestrator reading from and writing to the configured directories.
        """
        resolver = Resolver(Path(CFG.paths.storage_root))
        temp_dir = Path(CFG.paths.temp_dir) if CFG.paths.temp_dir else None
        return cls(
            Builder(resolver, temp_dir),
            Publisher(Path(CFG.paths.output_root)),
            CFG.orchestrator.max_workers,
        )

    @property
    def publisher(self) -> Publisher:
        return self._publisher

    def submit(self, members: Iterable[MemberRequest]) -> str:
        """
        Accept an archive request and schedule it for processing.

        The identifier is generated before any archive work begins and is
        returned without waiting for the archive to be built.

        Args:
            members (Iterable[MemberRequest]): The requested members in order.

        Returns:
            str: Identifier of the request. The archive will be published
                as `<output_root>/<id>.zip`.

        Raises:
            IdentifierError: If the identifier cannot be generated.
        """
        job = ArchiveJob(new_id(), tuple(members))
        logger.info(
            f"Accepted request '{job.id}' with {len(job.members)} member{'' if len(job.members) == 1 else 's'}."
        )

        self._executor.submit(self.run, job)
        return job.id

    def run(self, job: ArchiveJob) -> Path | None:
        """
        Build and publish the archive of a single request.

        Failures are logged and never propagate. No temporary archive
        of the job is left on disk once this method returns.

        Args:
            job (ArchiveJob): The request to process.

        Returns:
            Path | None: Path to the published archive or `None` if the job failed.
        """
        temp_path = None
        try:
            result = self._builder.build(job.members)
            temp_path = result.path
            destination = self._publisher.publish(result.path, job.id)
        except ZipdError as e:
            logger.error(f"Archive '{job.id}' could not be created: {e}")
            return None
        except Exception as e:
            logger.critical(e, exc_info=True, stack_info=True)
            return None
        finally:
            if temp_path is not None:
                Orchestrator._discard(temp_path)

        logger.info(
            f"Archive '{job.id}' published to '{destination}' "
            f"({len(result.added)} added, {len(result.skipped)} skipped) "
            f"in {format_duration(datetime.now() - job.started_at)}."
        )
        return destination

    def shutdown(self, wait: bool = True) -> None:
        """
        Stop accepting requests.

        Args:
            wait (bool): Whether to block until all accepted requests are processed.
        """
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_) -> None:
        self.shutdown(wait=True)

    @staticmethod
    def _discard(path: Path) -> None:
        """Remove a temporary archive that is still present."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temporary archive '{path}': {e}.")
