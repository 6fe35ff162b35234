"""Tests for the Line aggregate."""

import uuid

import pytest
from app.domain import (
    Connection,
    InvalidDistanceError,
    Line,
    MinimumSizeError,
    SectionError,
    Station,
    StationsChanged,
)

A, B, C, D = (Station(name) for name in "ABCD")


class TestLineCreate:
    """Test Line.create() - a line always starts with one section."""

    def test_create_with_initial_section(self) -> None:
        """Should hold exactly the two initial stations."""
        line = Line.create("Line 2", "green", A, B, 10)

        assert line.get_stations() == [A, B]
        assert line.total_distance == 10
        assert line.id is None

    def test_create_propagates_line_id_to_sections(self) -> None:
        """Should stamp the initial section with the line id."""
        line_id = uuid.uuid4()

        line = Line.create("Line 2", "green", A, B, 10, line_id=line_id)

        assert line.id == line_id
        assert [section.line_id for section in line.sections] == [line_id]

    @pytest.mark.parametrize(
        ("up_station", "down_station", "distance"),
        [(A, A, 10), (A, B, 0), (A, B, -5)],
    )
    def test_create_rejects_invalid_initial_section(
        self, up_station: Station, down_station: Station, distance: int
    ) -> None:
        """Should raise ValueError instead of building an empty line."""
        with pytest.raises(ValueError):
            Line.create("Line 2", "green", up_station, down_station, distance)


class TestLineRestore:
    """Test Line.restore() - rebuilding a stored line."""

    def test_restore_orders_stored_sections(self) -> None:
        """Should rebuild the chain from unordered stored sections."""
        line_id = uuid.uuid4()

        line = Line.restore(line_id, "Line 2", "green", [Connection(B, C, 4), Connection(A, B, 6)])

        assert line.get_stations() == [A, B, C]
        assert [section.distance for section in line.sections] == [6, 4]

    def test_restore_rejects_line_without_sections(self) -> None:
        """Should refuse to restore an empty line."""
        with pytest.raises(ValueError, match="no sections"):
            Line.restore(uuid.uuid4(), "Line 2", "green", [])


class TestLineSections:
    """Section edits are delegated to the connection chain."""

    def test_add_and_remove_section(self) -> None:
        """Should return StationsChanged for accepted edits."""
        line = Line.create("Line 2", "green", A, B, 10)

        assert line.add_section(B, C, 5) == StationsChanged([A, B, C])
        assert line.add_section(A, D, 4) == StationsChanged([A, D, B, C])
        assert line.remove_section(D) == StationsChanged([A, B, C])
        assert line.total_distance == 15

    def test_rejected_edit_returns_error_value(self) -> None:
        """Should return a SectionError without raising."""
        line = Line.create("Line 2", "green", A, B, 10)

        result = line.add_section(A, C, 10)

        assert isinstance(result, InvalidDistanceError)
        assert isinstance(result, SectionError)
        assert line.get_stations() == [A, B]

    def test_cannot_remove_last_section(self) -> None:
        """Should keep the initial section forever."""
        line = Line.create("Line 2", "green", A, B, 10)

        assert isinstance(line.remove_section(A), MinimumSizeError)


class TestLineUpdate:
    """Test update() - name and color only."""

    def test_update_changes_only_given_fields(self) -> None:
        """Should leave omitted attributes untouched."""
        line = Line.create("Line 2", "green", A, B, 10)

        line.update(color="red")
        assert (line.name, line.color) == ("Line 2", "red")

        line.update(name="Line 3")
        assert (line.name, line.color) == ("Line 3", "red")
        assert line.get_stations() == [A, B]

    def test_repr(self) -> None:
        """Should include name and section count."""
        line = Line.create("Line 2", "green", A, B, 10)

        assert "Line 2" in repr(line)
        assert "sections=1" in repr(line)
