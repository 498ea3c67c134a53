"""Tests for location models."""

import pytest

from weather_lookup.models.location import Coordinates, FavoriteLocation


class TestCoordinates:
    """Tests for the Coordinates model."""

    def test_valid_coordinates(self):
        """Test creating valid coordinates."""
        coords = Coordinates(latitude=40.7128, longitude=-74.0060)
        assert coords.latitude == 40.7128
        assert coords.longitude == -74.0060

    def test_boundary_values(self):
        """Test boundary latitude/longitude values."""
        # North pole
        north = Coordinates(latitude=90, longitude=0)
        assert north.latitude == 90

        # South pole
        south = Coordinates(latitude=-90, longitude=0)
        assert south.latitude == -90

        # Date line
        east = Coordinates(latitude=0, longitude=180)
        west = Coordinates(latitude=0, longitude=-180)
        assert east.longitude == 180
        assert west.longitude == -180

    def test_invalid_latitude(self):
        """Test that invalid latitude raises error."""
        with pytest.raises(ValueError):
            Coordinates(latitude=91, longitude=0)

        with pytest.raises(ValueError):
            Coordinates(latitude=-91, longitude=0)

    def test_invalid_longitude(self):
        """Test that invalid longitude raises error."""
        with pytest.raises(ValueError):
            Coordinates(latitude=0, longitude=181)

    def test_str_representation(self):
        """Test string representation of coordinates."""
        coords = Coordinates(latitude=40.7128, longitude=-74.0060)
        assert str(coords) == "40.7128,-74.006"

    def test_to_tuple(self):
        """Test converting to tuple."""
        coords = Coordinates(latitude=40.7128, longitude=-74.0060)
        assert coords.to_tuple() == (40.7128, -74.0060)


class TestFavoriteLocation:
    """Tests for the FavoriteLocation record."""

    def test_key_is_exact_pair(self):
        fav = FavoriteLocation(48.85, 2.35, "Paris")
        assert fav.key == (48.85, 2.35)

    def test_same_coordinates_same_key(self):
        """Different names at the same coordinate share a key."""
        a = FavoriteLocation(48.85, 2.35, "Paris")
        b = FavoriteLocation(48.85, 2.35, "Paris-dup")
        assert a.key == b.key
        assert a != b

    def test_coordinates_validated_on_demand(self):
        """A missing coordinate is accepted at construction, rejected on use."""
        fav = FavoriteLocation(None, 2.35, "Broken")
        with pytest.raises(ValueError):
            fav.coordinates()

    def test_coordinates(self):
        coords = FavoriteLocation(40.71, -74.0, "NYC").coordinates()
        assert coords == Coordinates(latitude=40.71, longitude=-74.0)
