"""
Base class for event trainers.

A trainer is configured once with ``init`` and then turns an event stream
(``train``) or an already indexed corpus (``train_model``) into a model.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, MutableMapping
from typing import ClassVar

from maxentkit.config.parameters import (
    TRAINER_TYPE_EVENT,
    TRAINER_TYPE_PARAM,
    TRAINING_EVENT_HASH,
    TrainingParameters,
)
from maxentkit.config.settings import DataIndexerType, TrainerSettings
from maxentkit.errors import ConfigurationError, InvalidInputError
from maxentkit.events.event import Event
from maxentkit.events.streams import HashSumEventStream
from maxentkit.indexing.base import DataIndexer, IndexedCorpus
from maxentkit.indexing.onepass import OnePassDataIndexer
from maxentkit.indexing.twopass import TwoPassDataIndexer
from maxentkit.model.base import AbstractModel
from maxentkit.monitor import Monitor
from maxentkit.utils.logging import get_logger, log_context

log = get_logger(__name__)


class AbstractEventTrainer(ABC):
    """
    Abstract base class for event trainers.

    Subclasses declare the algorithm names they answer to and implement
    ``_do_train`` on an indexed corpus.
    """

    ALGORITHM_NAMES: ClassVar[tuple[str, ...]] = ()

    def __init__(self, monitor: Monitor | None = None) -> None:
        self.monitor = monitor
        self.parameters: TrainingParameters | None = None
        self.settings: TrainerSettings | None = None
        self.report_map: MutableMapping[str, str] = {}

    def init(
        self,
        parameters: TrainingParameters,
        report_map: MutableMapping[str, str] | None = None,
        check_algorithm: bool = True,
    ) -> None:
        """
        Configure the trainer.

        Args:
            parameters: Training parameters.
            report_map: Optional map receiving training metadata such as
                the event hash.
            check_algorithm: Whether the ``Algorithm`` parameter must name
                one of ``ALGORITHM_NAMES``. Trainers registered under a
                custom name skip this check.

        Raises:
            ConfigurationError: If the parameters are invalid for this
                trainer.
        """
        settings = TrainerSettings.from_parameters(parameters)
        self.validate(settings, check_algorithm=check_algorithm)
        self.parameters = parameters
        self.settings = settings
        self.report_map = report_map if report_map is not None else {}

    def validate(
        self, settings: TrainerSettings, check_algorithm: bool = True
    ) -> None:
        """
        Trainer-specific checks on top of the settings schema.

        Raises:
            ConfigurationError: If the algorithm name belongs to another
                trainer.
        """
        algorithm = settings.algorithm
        if not check_algorithm or algorithm is None:
            return
        if algorithm.upper() not in self.ALGORITHM_NAMES:
            msg = (
                f"{self.__class__.__name__} cannot train algorithm {algorithm!r}; "
                f"expected one of {list(self.ALGORITHM_NAMES)}"
            )
            raise ConfigurationError(msg)

    @property
    def is_initialized(self) -> bool:
        """Whether ``init`` has been called."""
        return self.settings is not None

    def _check_is_initialized(self) -> TrainerSettings:
        if self.settings is None:
            raise RuntimeError(
                f"{self.__class__.__name__} has not been initialized. "
                "Call init() before train()."
            )
        return self.settings

    def is_sort_and_merge(self) -> bool:
        """Whether the indexer should emit rows in sorted order."""
        return True

    def get_data_indexer(self, events: Iterable[Event]) -> DataIndexer:
        """Create the indexer selected by the ``DataIndexer`` parameter."""
        settings = self._check_is_initialized()
        indexer_cls = (
            OnePassDataIndexer
            if settings.data_indexer == DataIndexerType.ONE_PASS
            else TwoPassDataIndexer
        )
        return indexer_cls(
            events,
            cutoff=settings.cutoff,
            sort=self.is_sort_and_merge(),
            monitor=self.monitor,
        )

    def train(self, events: Iterable[Event]) -> AbstractModel:
        """
        Index an event stream and train a model on it.

        Args:
            events: Training events.

        Returns:
            Trained model.

        Raises:
            RuntimeError: If the trainer was not initialized.
            InvalidInputError: If no event survives indexing.
            TrainingCancelledError: If cancelled during indexing.
        """
        self._check_is_initialized()
        hash_stream = HashSumEventStream(events)
        corpus = self.get_data_indexer(hash_stream).execute()
        self.report_map[TRAINING_EVENT_HASH] = hash_stream.calculate_hash_sum()
        self.report_map[TRAINER_TYPE_PARAM] = TRAINER_TYPE_EVENT
        return self.train_model(corpus)

    def train_model(self, corpus: IndexedCorpus) -> AbstractModel:
        """
        Train a model on an indexed corpus.

        Raises:
            RuntimeError: If the trainer was not initialized.
            InvalidInputError: If the corpus is empty.
        """
        settings = self._check_is_initialized()
        if corpus.num_rows == 0 or corpus.num_outcomes == 0:
            raise InvalidInputError("Cannot train a model on an empty corpus")

        with log_context(trainer=self.__class__.__name__):
            log.info(
                "Training started",
                iterations=settings.iterations,
                n_events=corpus.num_events,
                n_predicates=corpus.num_predicates,
                n_outcomes=corpus.num_outcomes,
            )
            model = self._do_train(corpus)
            log.info("Training finished", model=repr(model))
        return model

    @abstractmethod
    def _do_train(self, corpus: IndexedCorpus) -> AbstractModel:
        """Fit a model. Implemented by subclasses."""
        ...

    def _cancelled(self) -> bool:
        return self.monitor is not None and self.monitor.is_cancelled

    def _display(self, text: str) -> None:
        if self.monitor is not None:
            self.monitor.message(text)
