"""
Flat string-keyed training parameter bag.

Collaborators configure trainers through a flat ``key -> string`` map, the
same shape as a Java-style properties file. Keys may be
namespaced (``"tokenizer.Iterations"``) so one file can carry settings for
several components.
"""

from collections.abc import Iterator, Mapping
from typing import IO, Any

ALGORITHM_PARAM = "Algorithm"
TRAINER_TYPE_PARAM = "TrainerType"
ITERATIONS_PARAM = "Iterations"
CUTOFF_PARAM = "Cutoff"
TOLERANCE_PARAM = "Tolerance"
STEP_SIZE_DECREASE_PARAM = "StepSizeDecrease"
USE_AVERAGE_PARAM = "UseAverage"
USE_SKIPPED_AVERAGING_PARAM = "UseSkippedAveraging"
DATA_INDEXER_PARAM = "DataIndexer"
CORRECTION_CONSTANT_PARAM = "CorrectionConstant"
SMOOTHING_PARAM = "Smoothing"
SMOOTHING_OBSERVATION_PARAM = "SmoothingObservation"
GAUSSIAN_SMOOTHING_PARAM = "GaussianSmoothing"
SIGMA_PARAM = "Sigma"
L2_COST_PARAM = "L2Cost"
MEMORY_PARAM = "M"
TRAINING_EVENT_HASH = "Training-Eventhash"

DATA_INDEXER_ONE_PASS = "OnePass"
DATA_INDEXER_TWO_PASS = "TwoPass"

TRAINER_TYPE_EVENT = "Event"
TRAINER_TYPE_SEQUENCE = "Sequence"
TRAINER_TYPE_EVENT_MODEL_SEQUENCE = "EventModelSequence"

ITERATIONS_DEFAULT = 100
CUTOFF_DEFAULT = 5


def _to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class TrainingParameters:
    """
    Mutable string-to-string parameter map.

    Values are stored as strings; typed access goes through
    ``maxentkit.config.settings.TrainerSettings``.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, str] = {}
        if values:
            for key, value in values.items():
                self.set(key, value)

    @classmethod
    def default_parameters(cls) -> "TrainingParameters":
        """Parameters used when a component does not specify any."""
        return cls(
            {
                ALGORITHM_PARAM: "MAXENT",
                TRAINER_TYPE_PARAM: TRAINER_TYPE_EVENT,
                ITERATIONS_PARAM: ITERATIONS_DEFAULT,
                CUTOFF_PARAM: CUTOFF_DEFAULT,
            }
        )

    def get(self, key: str, default: str | None = None) -> str | None:
        """Get a raw value, or ``default`` when the key is absent."""
        return self._values.get(key, default)

    def get_ns(self, namespace: str, key: str, default: str | None = None) -> str | None:
        """Get a namespaced value (``namespace.key``)."""
        return self._values.get(f"{namespace}.{key}", default)

    def set(self, key: str, value: Any) -> None:
        """
        Set a value, converting it to its string form.

        Raises:
            ValueError: If the key is empty.
        """
        if not key:
            raise ValueError("Parameter key must not be empty")
        self._values[key] = _to_string(value)

    def set_ns(self, namespace: str, key: str, value: Any) -> None:
        """Set a namespaced value (``namespace.key``)."""
        if not namespace:
            raise ValueError("Parameter namespace must not be empty")
        self.set(f"{namespace}.{key}", value)

    def remove(self, key: str) -> None:
        """Remove a key if present."""
        self._values.pop(key, None)

    def get_namespace(self, namespace: str) -> "TrainingParameters":
        """
        Extract the parameters of one namespace with the prefix stripped.

        Args:
            namespace: Namespace name, with or without the trailing dot.

        Returns:
            New parameter bag.
        """
        prefix = namespace if namespace.endswith(".") else namespace + "."
        return TrainingParameters(
            {k[len(prefix) :]: v for k, v in self._values.items() if k.startswith(prefix)}
        )

    def to_dict(self) -> dict[str, str]:
        """Copy of the underlying map."""
        return dict(self._values)

    def is_valid(self) -> bool:
        """
        Check the integer parameters every trainer relies on.

        Returns:
            False when Cutoff is present but not a non-negative integer,
            or Iterations is present but not a positive integer.
        """
        for key, minimum in ((CUTOFF_PARAM, 0), (ITERATIONS_PARAM, 1)):
            raw = self._values.get(key)
            if raw is None:
                continue
            try:
                value = int(raw)
            except ValueError:
                return False
            if value < minimum:
                return False
        return True

    def load(self, stream: IO[str]) -> None:
        """
        Read ``key=value`` (or ``key: value``) lines into this bag.

        Blank lines and lines starting with ``#`` or ``!`` are ignored.
        """
        for raw_line in stream:
            line = raw_line.strip()
            if not line or line[0] in "#!":
                continue
            positions = [p for p in (line.find("="), line.find(":")) if p > 0]
            if not positions:
                self.set(line, "")
                continue
            split = min(positions)
            self.set(line[:split].strip(), line[split + 1 :].strip())

    def serialize(self, stream: IO[str]) -> None:
        """Write the bag as sorted ``key=value`` lines."""
        for key in sorted(self._values):
            stream.write(f"{key}={self._values[key]}\n")

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"TrainingParameters({self._values!r})"
