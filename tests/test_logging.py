"""Tests for logging helpers."""

import numpy as np

from maxentkit.utils.logging import _numpy_to_builtin


class TestNumpyToBuiltin:
    """Tests for the numpy-coercing log processor."""

    def test_scalars_and_arrays(self):
        """Test that numpy values become plain Python values."""
        event = _numpy_to_builtin(
            None,
            "info",
            {
                "event": "QN iteration",
                "loss": np.float64(1.5),
                "iteration": np.int64(3),
                "weights": np.array([0.5, -0.5]),
            },
        )

        assert event == {
            "event": "QN iteration",
            "loss": 1.5,
            "iteration": 3,
            "weights": [0.5, -0.5],
        }
        assert type(event["iteration"]) is int

    def test_other_values_untouched(self):
        """Test that plain values pass through."""
        event = {"event": "Saved model", "path": "model.bin", "binary": True}

        assert _numpy_to_builtin(None, "info", dict(event)) == event
