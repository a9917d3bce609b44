"""
==============================================================================
Orientation Tests
==============================================================================

Tests for rotation, EXIF orientation and page loading.

==============================================================================
"""

import base64
import io

import numpy as np
import pytest
from PIL import Image

from docscan.scanner import Orientation, PageLoader, normalize, read_orientation, rotate


def jpeg_with_orientation(orientation: int) -> bytes:
    """60x40 JPEG, black left half, with an EXIF orientation tag."""
    pixels = np.full((40, 60, 3), 255, np.uint8)
    pixels[:, :30] = 0

    exif = Image.Exif()
    exif[0x0112] = orientation

    buffer = io.BytesIO()
    Image.fromarray(pixels).save(buffer, "JPEG", quality=95, exif=exif)
    return buffer.getvalue()


class TestRotate:
    """Tests for the rotation primitive."""

    def test_zero_is_identity(self):
        """Test angle 0 returns the input unchanged."""
        image = np.arange(24, dtype=np.uint8).reshape(4, 6)
        assert rotate(image, 0) is image

    @pytest.mark.parametrize("angle", [90, -90, 270])
    def test_quarter_turn_swaps_dimensions(self, angle):
        """Test quarter turns swap width and height."""
        image = np.zeros((4, 6, 3), np.uint8)
        assert rotate(image, angle).shape == (6, 4, 3)

    def test_clockwise(self):
        """Test positive angles rotate clockwise."""
        image = np.zeros((2, 3), np.uint8)
        image[0, 0] = 1
        rotated = rotate(image, 90)
        # top-left moves to top-right
        assert rotated[0, -1] == 1

    def test_counter_clockwise(self):
        """Test negative angles rotate counter-clockwise."""
        image = np.zeros((2, 3), np.uint8)
        image[0, 0] = 1
        rotated = rotate(image, -90)
        # top-left moves to bottom-left
        assert rotated[-1, 0] == 1

    def test_half_turn(self):
        """Test 180 keeps dimensions and inverts both axes."""
        image = np.arange(6, dtype=np.uint8).reshape(2, 3)
        assert np.array_equal(rotate(image, 180), image[::-1, ::-1])

    def test_inverse_rotations(self):
        """Test +90 undoes -90."""
        image = np.arange(24, dtype=np.uint8).reshape(4, 6)
        assert np.array_equal(rotate(rotate(image, -90), 90), image)

    @pytest.mark.parametrize("angle", [45, 1, 360, -270])
    def test_unsupported_angle(self, angle):
        """Test non quarter-turn angles are rejected."""
        with pytest.raises(ValueError):
            rotate(np.zeros((2, 2), np.uint8), angle)


class TestNormalize:
    """Tests for orientation normalization."""

    def test_normal_is_identity(self):
        """Test NORMAL leaves the image untouched."""
        image = np.arange(24, dtype=np.uint8).reshape(4, 6)
        result = normalize(image, Orientation.NORMAL)
        assert result is image
        assert np.array_equal(result, image)

    def test_missing_orientation(self):
        """Test missing metadata leaves the image untouched."""
        image = np.zeros((4, 6), np.uint8)
        assert normalize(image, None) is image

    @pytest.mark.parametrize("orientation,angle", [
        (Orientation.ROTATE_90, 90),
        (Orientation.ROTATE_180, 180),
        (Orientation.ROTATE_270, -90),
    ])
    def test_rotation_angles(self, orientation, angle):
        """Test each orientation applies its quarter turn."""
        image = np.arange(24, dtype=np.uint8).reshape(4, 6)
        assert np.array_equal(normalize(image, orientation), rotate(image, angle))


class TestReadOrientation:
    """Tests for EXIF orientation reading."""

    @pytest.mark.parametrize("value,expected", [
        (1, Orientation.NORMAL),
        (3, Orientation.ROTATE_180),
        (6, Orientation.ROTATE_90),
        (8, Orientation.ROTATE_270),
        (2, Orientation.NORMAL),
        (5, Orientation.NORMAL),
    ])
    def test_exif_values(self, value, expected):
        """Test EXIF values map to orientations; mirrored ones read as NORMAL."""
        assert read_orientation(jpeg_with_orientation(value)) is expected

    def test_corrupt_metadata(self):
        """Test unreadable bytes read as NORMAL."""
        assert read_orientation(b"not an image") is Orientation.NORMAL

    def test_from_exif_unknown(self):
        """Test unknown values fall back to NORMAL."""
        assert Orientation.from_exif(None) is Orientation.NORMAL
        assert Orientation.from_exif(42) is Orientation.NORMAL


class TestPageLoader:
    """Tests for page loading."""

    def test_exif_rotation_applied_once(self, tmp_path):
        """Test an orientation 6 page loads upright."""
        path = tmp_path / "page.jpg"
        path.write_bytes(jpeg_with_orientation(6))

        image = PageLoader().load(str(path))

        assert image is not None
        assert image.shape[:2] == (60, 40)
        # the black left half is now the top half
        assert image[:25].mean() < 50
        assert image[35:].mean() > 200

    def test_file_uri(self, tmp_path):
        """Test file URIs resolve to their path."""
        path = tmp_path / "page one.jpg"
        path.write_bytes(jpeg_with_orientation(1))

        image = PageLoader().load(path.as_uri())

        assert image is not None
        assert image.shape[:2] == (40, 60)

    def test_data_uri(self):
        """Test base64 data URIs are decoded."""
        payload = base64.b64encode(jpeg_with_orientation(1)).decode("ascii")
        image = PageLoader().load(f"data:image/jpeg;base64,{payload}")
        assert image is not None

    def test_trims_handle(self, tmp_path):
        """Test surrounding whitespace is ignored."""
        path = tmp_path / "page.jpg"
        path.write_bytes(jpeg_with_orientation(1))
        assert PageLoader().load(f"  {path}\n") is not None

    @pytest.mark.parametrize("handle", ["/tmp/a\x00b.jpg", "file:///tmp/a%00b.jpg"])
    def test_null_byte_in_path(self, handle):
        """Test paths with an embedded NUL byte read as unreadable."""
        assert PageLoader().read_bytes(handle) is None
        assert PageLoader().load(handle) is None

    @pytest.mark.parametrize("handle", ["", "   ", "/does/not/exist.jpg", "data:image/jpeg;base64,@@@"])
    def test_unreadable_source(self, handle):
        """Test unreadable sources yield None."""
        assert PageLoader().load(handle) is None

    def test_undecodable_bytes(self, tmp_path):
        """Test files that are not images yield None."""
        path = tmp_path / "page.jpg"
        path.write_bytes(b"plain text")
        assert PageLoader().load(str(path)) is None
