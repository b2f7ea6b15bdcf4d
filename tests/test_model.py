"""Tests for contexts and the model scoring API."""

import math

import numpy as np
import pytest

from maxentkit.model import (
    Context,
    GISModel,
    ModelType,
    MutableContext,
    PerceptronModel,
    QNModel,
)


def _gis_model(**kwargs: float) -> GISModel:
    return GISModel(
        [Context([0], [1.0]), Context([0, 1], [0.5, 2.0])],
        ["p", "q"],
        ["A", "B"],
        **kwargs,
    )


class TestContext:
    """Tests for per-predicate parameter storage."""

    def test_length_mismatch(self) -> None:
        """Test that outcomes and parameters must be parallel."""
        with pytest.raises(ValueError, match="2 outcomes but 1 parameters"):
            Context([0, 1], [1.0])

    def test_context_is_read_only(self) -> None:
        """Test that a plain Context cannot be modified."""
        ctx = Context([0, 1], [1.0, 2.0])
        with pytest.raises(ValueError):
            ctx.parameters[0] = 5.0

    def test_mutable_context_updates(self) -> None:
        """Test set/update on a MutableContext and freezing."""
        ctx = MutableContext([0, 2], [0.0, 0.0])
        ctx.set_parameter(0, 1.5)
        ctx.update_parameter(0, 0.5)
        ctx.update_parameter(1, -1.0)

        assert ctx.parameters.tolist() == [2.0, -1.0]
        assert ctx.contains(2)
        assert not ctx.contains(1)
        frozen = ctx.freeze()
        assert frozen == Context([0, 2], [2.0, -1.0])
        ctx.update_parameter(0, 1.0)
        assert frozen.parameters.tolist() == [2.0, -1.0]


class TestGISModel:
    """Tests for GIS scoring."""

    def test_eval(self) -> None:
        """Test the normalized exponential of summed weights."""
        probs = _gis_model().eval(["p"])
        expected_a = math.e / (math.e + 1.0)
        assert probs == pytest.approx([expected_a, 1.0 - expected_a])

    def test_eval_with_values(self) -> None:
        """Test that weights are scaled by predicate values."""
        probs = _gis_model().eval(["q"], [2.0])
        expected_a = math.exp(1.0) / (math.exp(1.0) + math.exp(4.0))
        assert probs == pytest.approx([expected_a, 1.0 - expected_a])

    def test_correction_feature(self) -> None:
        """Test scoring with a correction constant and parameter."""
        model = _gis_model(correction_constant=2.0, correction_param=0.5)
        probs = model.eval(["p"])
        # exponent difference: (1 / C) + (1 - 1/C) * 0.5 - 0.5 = 0.25
        expected_a = 1.0 / (1.0 + math.exp(-0.25))
        assert probs[0] == pytest.approx(expected_a)

    def test_unknown_predicates_skipped(self) -> None:
        """Test that unmapped predicates do not affect scores."""
        model = _gis_model()
        assert model.eval(["p", "unknown"]) == pytest.approx(model.eval(["p"]))
        assert model.eval(["unknown"]) == pytest.approx([0.5, 0.5])

    def test_undecodable_predicate_skipped(self) -> None:
        """Test that predicates holding lone surrogates are looked up like any other."""
        model = _gis_model()
        assert model.eval(["p", "\udcff"]) == pytest.approx(model.eval(["p"]))
        assert model.eval(["\udcff"]) == pytest.approx([0.5, 0.5])

    def test_eval_idempotent(self) -> None:
        """Test that repeated calls return identical results."""
        model = _gis_model()
        assert model.eval(["p", "q"]) == model.eval(["p", "q"])

    def test_outsums_buffer(self) -> None:
        """Test that a caller buffer is overwritten and returned."""
        model = _gis_model()
        buffer = [9.0, 9.0]
        result = model.eval(["q"], outsums=buffer)
        assert result is buffer
        assert buffer == model.eval(["q"])

        array = np.zeros(2)
        assert model.eval(["q"], outsums=array) is array
        assert array.tolist() == model.eval(["q"])

    def test_outsums_wrong_length(self) -> None:
        """Test that a buffer of the wrong size is rejected."""
        with pytest.raises(ValueError, match="outsums"):
            _gis_model().eval(["p"], outsums=[0.0])

    def test_values_length_mismatch(self) -> None:
        """Test that values must be parallel to the context."""
        with pytest.raises(ValueError, match="values"):
            _gis_model().eval(["p", "q"], [1.0])


class TestOutcomeApi:
    """Tests for outcome lookup helpers."""

    def test_outcome_lookup(self) -> None:
        """Test mapping between outcome ids and names."""
        model = _gis_model()
        assert model.num_outcomes == 2
        assert model.get_outcome(1) == "B"
        assert model.get_index("A") == 0
        assert model.get_index("Z") == -1
        assert model.contains_outcome("B")
        assert model.contains_outcomes(["A", "B"])
        assert not model.contains_outcomes(["A", "Z"])

    def test_best_and_all_outcomes(self) -> None:
        """Test the best outcome and the rendered distribution."""
        model = _gis_model()
        assert model.get_best_outcome([0.4, 0.6]) == "B"
        assert model.get_all_outcomes([0.4, 0.6]) == "A[0.4000] B[0.6000]"
        with pytest.raises(ValueError):
            model.get_all_outcomes([1.0])

    def test_data_structures(self) -> None:
        """Test the internals exposed for persistence."""
        params, pmap, outcomes, constant, param = _gis_model().get_data_structures()
        assert len(params) == 2
        assert pmap.lookup("q") == 1
        assert outcomes == ("A", "B")
        assert (constant, param) == (1.0, 0.0)

    def test_model_type_and_equality(self) -> None:
        """Test model types and structural equality."""
        assert _gis_model().model_type == ModelType.MAXENT
        assert _gis_model() == _gis_model()
        assert _gis_model() != _gis_model(correction_param=0.1)

    def test_parameter_count_mismatch(self) -> None:
        """Test that each predicate needs one context."""
        with pytest.raises(ValueError, match="parameter contexts"):
            GISModel([Context([0], [1.0])], ["p", "q"], ["A"])


class TestPerceptronModel:
    """Tests for perceptron scoring."""

    def test_eval_scales_by_max_sum(self) -> None:
        """Test division by the largest absolute sum before exponentiating."""
        model = PerceptronModel([Context([0, 1], [3.0, -1.0])], ["p"], ["A", "B"])
        probs = model.eval(["p"])
        a, b = math.exp(1.0), math.exp(-1.0 / 3.0)
        assert probs == pytest.approx([a / (a + b), b / (a + b)])
        assert model.model_type == ModelType.PERCEPTRON

    def test_small_sums_not_scaled_up(self) -> None:
        """Test that sums below 1 are used as they are."""
        model = PerceptronModel([Context([0, 1], [0.5, 0.0])], ["p"], ["A", "B"])
        a, b = math.exp(0.5), 1.0
        assert model.eval(["p"]) == pytest.approx([a / (a + b), b / (a + b)])


class TestQNModel:
    """Tests for quasi-Newton model scoring."""

    def test_softmax(self) -> None:
        """Test softmax over summed weights."""
        model = QNModel([Context([0, 1], [3.0, -1.0])], ["p"], ["A", "B"])
        a, b = math.exp(3.0), math.exp(-1.0)
        assert model.eval(["p"]) == pytest.approx([a / (a + b), b / (a + b)])
        assert model.model_type == ModelType.MAXENT_QN
