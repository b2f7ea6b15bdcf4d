"""
Typed trainer settings using Pydantic.

The flat parameter bag is parsed into a frozen, validated settings object
before a trainer touches any data, so bad values fail fast.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from maxentkit.config.parameters import (
    CUTOFF_DEFAULT,
    DATA_INDEXER_ONE_PASS,
    DATA_INDEXER_TWO_PASS,
    ITERATIONS_DEFAULT,
    TRAINER_TYPE_EVENT,
    TrainingParameters,
)
from maxentkit.errors import ConfigurationError


class DataIndexerType(str, Enum):
    """Strategy used to turn an event stream into an indexed corpus."""

    ONE_PASS = DATA_INDEXER_ONE_PASS  # events kept in memory
    TWO_PASS = DATA_INDEXER_TWO_PASS  # events spilled to a temporary file


class TrainerSettings(BaseModel):
    """Validated view of a TrainingParameters bag.

    Field aliases are the parameter keys, so a bag converts directly.
    Unknown keys (including namespaced ones) are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    algorithm: str | None = Field(default=None, alias="Algorithm")
    trainer_type: str = Field(default=TRAINER_TYPE_EVENT, alias="TrainerType")
    iterations: int = Field(default=ITERATIONS_DEFAULT, gt=0, alias="Iterations")
    cutoff: int = Field(default=CUTOFF_DEFAULT, ge=0, alias="Cutoff")
    tolerance: float | None = Field(default=None, ge=0.0, lt=1.0, alias="Tolerance")
    step_size_decrease: float | None = Field(
        default=None, gt=0.0, le=1.0, alias="StepSizeDecrease"
    )
    use_average: bool = Field(default=True, alias="UseAverage")
    use_skipped_averaging: bool = Field(default=False, alias="UseSkippedAveraging")
    data_indexer: DataIndexerType = Field(
        default=DataIndexerType.TWO_PASS, alias="DataIndexer"
    )
    correction_constant: float | None = Field(
        default=None, gt=0.0, alias="CorrectionConstant"
    )
    smoothing: bool = Field(default=False, alias="Smoothing")
    smoothing_observation: float = Field(
        default=0.1, gt=0.0, alias="SmoothingObservation"
    )
    gaussian_smoothing: bool = Field(default=False, alias="GaussianSmoothing")
    sigma: float = Field(default=2.0, gt=0.0, alias="Sigma")
    l2_cost: float = Field(default=0.1, ge=0.0, alias="L2Cost")
    memory: int = Field(default=15, gt=0, alias="M")

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v: str | None) -> str | None:
        """Reject blank algorithm names."""
        if v is not None and not v.strip():
            msg = "Algorithm must not be blank"
            raise ValueError(msg)
        return v.strip() if v is not None else None

    @field_validator("trainer_type")
    @classmethod
    def validate_trainer_type(cls, v: str) -> str:
        """Only event trainers are supported."""
        if v != TRAINER_TYPE_EVENT:
            msg = f"Unsupported trainer type: {v!r}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_parameters(cls, parameters: TrainingParameters) -> "TrainerSettings":
        """
        Parse and validate a parameter bag.

        Args:
            parameters: Raw parameters.

        Returns:
            Validated settings.

        Raises:
            ConfigurationError: If any recognized value is invalid.
        """
        try:
            return cls.model_validate(parameters.to_dict())
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid training parameters: {problems}") from e
