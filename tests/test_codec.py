"""Tests for the binary and plain-text model encodings."""

import gzip
import struct

import pytest

from maxentkit.errors import CorruptModelError
from maxentkit.io import deserialize, is_binary, load_model, save_model, serialize
from maxentkit.model import Context, GISModel, PerceptronModel, QNModel
from maxentkit.training import get_event_trainer


def _small_gis():
    return GISModel(
        [Context([0], [1.0]), Context([0, 1], [0.5, 2.0])],
        ["p", "q"],
        ["A", "B"],
    )


def _utf(text: str) -> bytes:
    data = text.encode("utf-8")
    return struct.pack(">H", len(data)) + data


def _text_model(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture(params=["MAXENT", "PERCEPTRON", "QN"])
def trained_model(request, weather_events, make_parameters):
    """Model trained on the weather corpus with each algorithm."""
    trainer = get_event_trainer(make_parameters(Algorithm=request.param, Iterations=20))
    return trainer.train(weather_events)


class TestRoundTrip:
    """Tests that decoded models score like the models they encode."""

    @pytest.mark.parametrize("binary", [True, False])
    def test_same_predictions(self, trained_model, weather_events, binary):
        """Test that every training context gets the same distribution."""
        decoded = deserialize(serialize(trained_model, binary=binary))

        assert decoded.model_type == trained_model.model_type
        assert decoded.outcome_names == trained_model.outcome_names
        for event in weather_events:
            assert decoded.eval(event.context) == pytest.approx(
                trained_model.eval(event.context), abs=1e-12
            )

    def test_gis_model_equal(self):
        """Test that a GIS model survives both encodings unchanged."""
        model = _small_gis()

        assert deserialize(serialize(model, binary=True)) == model
        assert deserialize(serialize(model, binary=False)) == model

    def test_qn_tag(self, make_parameters, toy_events):
        """Test that QN models are tagged as such."""
        model = get_event_trainer(make_parameters(Algorithm="QN")).train(toy_events)

        assert serialize(model, binary=False).startswith(b"QN\n")
        assert isinstance(deserialize(serialize(model)), QNModel)


class TestLayout:
    """Tests for the exact encoded layout."""

    def test_binary_gis_layout(self):
        """Test the byte layout of a small GIS model."""
        expected = (
            _utf("GIS")
            + struct.pack(">i", 1)
            + struct.pack(">d", 0.0)
            + struct.pack(">i", 2)
            + _utf("A")
            + _utf("B")
            + struct.pack(">i", 2)
            + _utf("1 0")
            + _utf("1 0 1")
            + struct.pack(">i", 2)
            + _utf("p")
            + _utf("q")
            + struct.pack(">ddd", 1.0, 0.5, 2.0)
        )

        data = serialize(_small_gis(), binary=True)

        assert data.startswith(b"\x00\x03GIS")
        assert data == expected

    def test_text_gis_layout(self):
        """Test the line layout of a small GIS model."""
        data = serialize(_small_gis(), binary=False)

        assert data.decode("utf-8").splitlines() == [
            "GIS",
            "1",
            "0.0",
            "2",
            "A",
            "B",
            "2",
            "1 0",
            "1 0 1",
            "2",
            "p",
            "q",
            "1.0",
            "0.5",
            "2.0",
        ]

    def test_predicates_grouped_by_pattern(self):
        """Test that predicates sharing outcomes share one pattern line."""
        model = GISModel(
            [
                Context([0, 1], [0.1, 0.2]),
                Context([1], [0.3]),
                Context([0, 1], [0.4, 0.5]),
            ],
            ["first", "second", "third"],
            ["A", "B"],
        )

        lines = serialize(model, binary=False).decode("utf-8").splitlines()

        assert lines[6:9] == ["2", "2 0 1", "1 1"]
        assert lines[9:13] == ["3", "first", "third", "second"]

    def test_perceptron_drops_zero_weights(self):
        """Test that zero perceptron weights and empty predicates are not written."""
        model = PerceptronModel(
            [Context([0, 1], [0.0, 1.0]), Context([0, 1], [0.0, 0.0])],
            ["p", "q"],
            ["A", "B"],
        )

        lines = serialize(model, binary=False).decode("utf-8").splitlines()

        assert lines == ["Perceptron", "2", "A", "B", "1", "1 1", "1", "p", "1.0"]
        decoded = deserialize(serialize(model))
        assert decoded.eval(["p"]) == pytest.approx(model.eval(["p"]))
        assert decoded.eval(["q"]) == pytest.approx([0.5, 0.5])

    def test_unicode_labels(self):
        """Test that non-ASCII labels are encoded as UTF-8."""
        model = GISModel([Context([0], [1.0])], ["größe=ä"], ["Ja"])

        decoded = deserialize(serialize(model))

        assert decoded.pred_labels == ["größe=ä"]

    def test_is_binary(self):
        """Test encoding detection."""
        model = _small_gis()

        assert is_binary(serialize(model, binary=True))
        assert not is_binary(serialize(model, binary=False))
        assert not is_binary(b"")


class TestCorruptData:
    """Tests that invalid data is rejected."""

    def test_unknown_type(self):
        """Test that an unknown type tag is rejected."""
        with pytest.raises(CorruptModelError, match="Unknown model type"):
            deserialize(_text_model("Bayes", "1", "A"))

    def test_empty(self):
        """Test that empty data is rejected."""
        with pytest.raises(CorruptModelError):
            deserialize(b"")

    def test_truncated_binary(self):
        """Test that truncated binary data is rejected."""
        data = serialize(_small_gis(), binary=True)

        with pytest.raises(CorruptModelError, match="Unexpected end"):
            deserialize(data[:-3])

    def test_truncated_text(self):
        """Test that truncated text data is rejected."""
        lines = serialize(_small_gis(), binary=False).decode("utf-8").splitlines()

        with pytest.raises(CorruptModelError, match="Unexpected end"):
            deserialize(_text_model(*lines[:-1]))

    @pytest.mark.parametrize("binary", [True, False])
    def test_trailing_data(self, binary):
        """Test that data after the last parameter is rejected."""
        data = serialize(_small_gis(), binary=binary)
        extra = b"\x00" if binary else b"1.0\n"

        with pytest.raises(CorruptModelError, match="Trailing data"):
            deserialize(data + extra, binary=binary)

    def test_pattern_count_mismatch(self):
        """Test that patterns must cover exactly the declared predicates."""
        data = _text_model("GIS", "1", "0.0", "1", "A", "1", "2 0", "1", "p", "1.0")

        with pytest.raises(CorruptModelError, match="cover 2 predicates"):
            deserialize(data)

    @pytest.mark.parametrize(
        "pattern, message",
        [
            ("one 0", "Invalid outcome pattern"),
            ("", "Invalid outcome pattern"),
            ("1 0 0", "Repeated outcome id"),
            ("1 3", "out of range"),
        ],
    )
    def test_invalid_pattern(self, pattern, message):
        """Test that malformed outcome patterns are rejected."""
        data = _text_model("GIS", "1", "0.0", "1", "A", "1", pattern, "1", "p", "1.0")

        with pytest.raises(CorruptModelError, match=message):
            deserialize(data)

    def test_invalid_number(self):
        """Test that non-numeric parameters are rejected."""
        data = _text_model("GIS", "1", "0.0", "1", "A", "1", "1 0", "1", "p", "heavy")

        with pytest.raises(CorruptModelError, match="Expected a number"):
            deserialize(data)

    def test_invalid_correction_constant(self):
        """Test that a non-positive correction constant is rejected."""
        data = _text_model("GIS", "0", "0.0", "1", "A", "1", "1 0", "1", "p", "1.0")

        with pytest.raises(CorruptModelError, match="correction constant"):
            deserialize(data)


class TestFiles:
    """Tests for saving and loading model files."""

    @pytest.mark.parametrize(
        "name, prefix",
        [
            ("model.bin", b"\x00\x03GIS"),
            ("model.txt", b"GIS\n"),
            ("model.bin.gz", b"\x1f\x8b"),
            ("model.txt.gz", b"\x1f\x8b"),
        ],
    )
    def test_save_and_load(self, tmp_path, name, prefix):
        """Test that the file name selects the encoding."""
        model = _small_gis()
        path = save_model(model, tmp_path / "models" / name)

        assert path.read_bytes().startswith(prefix)
        assert load_model(path) == model

    def test_gzip_wraps_encoding(self, tmp_path):
        """Test that the compressed file holds the encoding of the inner suffix."""
        path = save_model(_small_gis(), tmp_path / "model.bin.gz")

        with gzip.open(path, "rb") as f:
            assert f.read() == serialize(_small_gis(), binary=True)

    def test_load_missing(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_model(tmp_path / "missing.bin")

    def test_load_invalid_gzip(self, tmp_path):
        """Test that a broken gzip file is reported as a corrupt model."""
        path = tmp_path / "model.bin.gz"
        path.write_bytes(b"not gzip at all")

        with pytest.raises(CorruptModelError, match="gzip"):
            load_model(path)
