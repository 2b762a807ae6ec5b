"""Unit tests for FileFormat, FileType and IndexResult enums."""

import pytest

from photo_index.models import FileFormat, FileType, IndexResult


class TestFileFormat:
    """Tests for the FileFormat enum."""

    @pytest.mark.parametrize("extension,expected", [
        ("jpg", FileFormat.JPEG),
        (".JPEG", FileFormat.JPEG),
        ("tif", FileFormat.TIFF),
        ("CR2", FileFormat.CR2),
        (".nef", FileFormat.NEF),
        ("heic", FileFormat.HEIC),
        ("xmp", FileFormat.XMP),
        ("MOV", FileFormat.MOV),
        ("txt", FileFormat.UNKNOWN),
        ("", FileFormat.UNKNOWN),
    ])
    def test_from_extension(self, extension, expected):
        assert FileFormat.from_extension(extension) == expected

    @pytest.mark.parametrize("filename,expected", [
        ("photo.jpg", FileFormat.JPEG),
        ("/photos/2025/01/IMG_1234.CR2", FileFormat.CR2),
        ("photo.CR2.xmp", FileFormat.XMP),
        ("README", FileFormat.UNKNOWN),
    ])
    def test_from_filename(self, filename, expected):
        assert FileFormat.from_filename(filename) == expected

    def test_raw_formats(self):
        """Test that all RAW formats report is_raw and is_image."""
        raw_formats = [
            FileFormat.CR2, FileFormat.CR3, FileFormat.NEF,
            FileFormat.ARW, FileFormat.DNG, FileFormat.RAF,
            FileFormat.ORF, FileFormat.RW2
        ]
        for fmt in raw_formats:
            assert fmt.is_raw
            assert fmt.is_image
            assert not fmt.is_decodable

    def test_decodable_formats(self):
        assert FileFormat.JPEG.is_decodable
        assert FileFormat.PNG.is_decodable
        assert not FileFormat.HEIC.is_decodable

    def test_sidecar_and_video_are_not_images(self):
        for fmt in (FileFormat.XMP, FileFormat.THM, FileFormat.AAE):
            assert fmt.is_sidecar
            assert not fmt.is_image
        for fmt in (FileFormat.MP4, FileFormat.MOV, FileFormat.AVI):
            assert fmt.is_video
            assert not fmt.is_image


class TestFileType:
    """Tests for the FileType enum."""

    @pytest.mark.parametrize("fmt,expected", [
        (FileFormat.JPEG, FileType.JPEG),
        (FileFormat.DNG, FileType.RAW),
        (FileFormat.HEIC, FileType.HEIF),
        (FileFormat.HEIF, FileType.HEIF),
        (FileFormat.PNG, FileType.PNG),
        (FileFormat.TIFF, FileType.TIFF),
        (FileFormat.WEBP, FileType.WEBP),
        (FileFormat.MP4, FileType.VIDEO),
        (FileFormat.XMP, FileType.SIDECAR),
        (FileFormat.UNKNOWN, FileType.OTHER),
    ])
    def test_from_format(self, fmt, expected):
        assert FileType.from_format(fmt) == expected

    def test_jpeg_value(self):
        """Test the value stored in the catalog for the displayable type."""
        assert FileType.JPEG.value == "jpg"


class TestIndexResult:
    """Tests for the IndexResult enum."""

    def test_values(self):
        assert len(IndexResult) == 2
        assert str(IndexResult.ADDED) == "Added"
        assert str(IndexResult.UPDATED) == "Updated"
