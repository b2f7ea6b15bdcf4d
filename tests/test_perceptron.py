"""Tests for the perceptron trainer."""

from pathlib import Path

import pytest

from maxentkit.errors import ConfigurationError
from maxentkit.events import Event
from maxentkit.model import PerceptronModel
from maxentkit.monitor import Monitor
from maxentkit.training import PerceptronTrainer
from maxentkit.training.perceptron import is_perfect_square


def _train(events, parameters, monitor=None):
    trainer = PerceptronTrainer(monitor=monitor)
    trainer.init(parameters)
    return trainer.train(events)


def _perceptron_parameters(make_parameters, **values):
    return make_parameters(Algorithm="PERCEPTRON", **values)


def _read_ppa(path: Path) -> list[Event]:
    """Read prepositional phrase attachment data ('id verb noun prep pobj label')."""
    events = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            parts = line.split()
            if len(parts) != 6:
                continue
            _, verb, noun, prep, pobj, label = parts
            events.append(
                Event(
                    label,
                    [f"verb={verb}", f"noun={noun}", f"prep={prep}", f"prep_obj={pobj}"],
                )
            )
    return events


class TestPerceptronTraining:
    """Tests for end-to-end perceptron training."""

    def test_classifies_unseen_combination(self, toy_events, make_parameters):
        """Test that a held-out context is labelled by its vocabulary."""
        model = _train(toy_events, _perceptron_parameters(make_parameters, Iterations=10))

        assert isinstance(model, PerceptronModel)
        assert model.get_best_outcome(model.eval(["x", "y"])) == "0"
        assert model.get_best_outcome(model.eval(["y"])) == "0"

    def test_without_averaging(self, toy_events, make_parameters):
        """Test that the last weights are used when averaging is off."""
        model = _train(
            toy_events,
            _perceptron_parameters(make_parameters, Iterations=10, UseAverage=False),
        )

        params, pmap, _, _, _ = model.get_data_structures()
        x_weights = params[pmap.lookup("x")].parameters.tolist()
        assert x_weights == [-1.0, 1.0]

    def test_weights_cover_all_outcomes(self, weather_events, make_parameters):
        """Test that every predicate carries a weight per outcome."""
        model = _train(weather_events, _perceptron_parameters(make_parameters))

        params, _, _, _, _ = model.get_data_structures()
        assert all(len(context) == model.num_outcomes for context in params)

    def test_step_size_decrease(self, toy_events, make_parameters):
        """Test that a shrinking step size still separates the toy data."""
        model = _train(
            toy_events,
            _perceptron_parameters(make_parameters, Iterations=10, StepSizeDecrease=0.5),
        )

        assert model.get_best_outcome(model.eval(["x", "y"])) == "0"

    def test_skipped_averaging(self, toy_events, make_parameters):
        """Test that skipped averaging trains even when plain averaging is off."""
        model = _train(
            toy_events,
            _perceptron_parameters(
                make_parameters,
                Iterations=30,
                UseAverage=False,
                UseSkippedAveraging=True,
            ),
        )

        assert model.get_best_outcome(model.eval(["x", "y"])) == "0"


class TestPerceptronStopping:
    """Tests for the iteration count and the tolerance stop."""

    def test_runs_all_iterations_without_tolerance(self, toy_events, make_parameters):
        """Test that one message is reported per iteration."""
        monitor = Monitor()
        _train(toy_events, _perceptron_parameters(make_parameters, Iterations=12), monitor)

        assert len(monitor.messages) == 12
        assert monitor.messages[0] == f"1 5 of 6 - {5 / 6}"
        assert monitor.messages[1] == "2 6 of 6 - 1.0"

    def test_tolerance_stops_early(self, toy_events, make_parameters):
        """Test that training stops once accuracy is stable over three iterations."""
        monitor = Monitor()
        _train(
            toy_events,
            _perceptron_parameters(make_parameters, Iterations=100, Tolerance=0.0001),
            monitor,
        )

        assert len(monitor.messages) == 5

    def test_cancel_keeps_completed_iterations(self, toy_events, make_parameters):
        """Test that cancellation returns the model of the finished iterations."""
        monitor = Monitor(on_message=lambda _: monitor.cancel())

        model = _train(
            toy_events, _perceptron_parameters(make_parameters, Iterations=50), monitor
        )

        assert len(monitor.messages) == 1
        assert model.get_best_outcome(model.eval(["x", "y"])) == "0"

    @pytest.mark.parametrize(
        "values",
        [
            {"Tolerance": 1.0},
            {"Tolerance": -0.1},
            {"StepSizeDecrease": 0},
            {"StepSizeDecrease": 1.5},
        ],
    )
    def test_invalid_options(self, make_parameters, values):
        """Test that out-of-range tolerance and step size options are rejected."""
        with pytest.raises(ConfigurationError):
            PerceptronTrainer().init(_perceptron_parameters(make_parameters, **values))


class TestSkippedAveraging:
    """Tests for the skipped averaging schedule."""

    @pytest.mark.parametrize(
        "n, expected",
        [(0, True), (1, True), (4, True), (20, False), (25, True), (26, False), (400, True)],
    )
    def test_is_perfect_square(self, n, expected):
        """Test perfect square detection."""
        assert is_perfect_square(n) is expected

    def test_averaging_schedule(self, make_parameters):
        """Test that early iterations and perfect squares are averaged."""
        trainer = PerceptronTrainer()
        trainer.init(_perceptron_parameters(make_parameters, UseSkippedAveraging=True))

        averaged = [i for i in range(1, 50) if trainer._do_averaging(i)]

        assert averaged == [*range(1, 20), 25, 36, 49]

    def test_plain_averaging_schedule(self, make_parameters):
        """Test that plain averaging uses every iteration."""
        trainer = PerceptronTrainer()
        trainer.init(_perceptron_parameters(make_parameters))

        assert all(trainer._do_averaging(i) for i in range(1, 50))


class TestPrepAttachBenchmark:
    """Accuracy on the prepositional phrase attachment benchmark."""

    @pytest.fixture
    def ppa_data(self, test_data_dir):
        ppa_dir = test_data_dir / "ppa"
        if not (ppa_dir / "training").exists() or not (ppa_dir / "devset").exists():
            pytest.skip("PPA benchmark data not available")
        return _read_ppa(ppa_dir / "training"), _read_ppa(ppa_dir / "devset")

    def _accuracy(self, model, events):
        correct = sum(
            1 for e in events if model.get_best_outcome(model.eval(e.context)) == e.outcome
        )
        return correct / len(events)

    @pytest.mark.parametrize(
        "values, expected",
        [
            ({}, 0.765),
            ({"UseSkippedAveraging": True}, 0.774),
            ({"Tolerance": 0.0001, "Iterations": 500}, 0.768),
        ],
    )
    def test_accuracy(self, ppa_data, make_parameters, values, expected):
        """Test dev set accuracy for the supported option combinations."""
        training, devset = ppa_data
        parameters = _perceptron_parameters(make_parameters, Cutoff=1, **values)

        model = _train(training, parameters)

        assert self._accuracy(model, devset) == pytest.approx(expected, abs=0.01)
