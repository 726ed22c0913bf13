import pytest
from PIL import Image

from faceindex.images import find_images, sniff_media_type


def test_content_decides_not_extension(tmp_path, make_image):
    make_image(tmp_path / "real.dat", "JPEG")
    (tmp_path / "fake.jpg").write_bytes(b"definitely not a jpeg")
    make_image(tmp_path / "shot.png", "PNG")

    assert sniff_media_type(tmp_path / "real.dat") == "image/jpeg"
    assert sniff_media_type(tmp_path / "shot.png") == "image/png"
    assert sniff_media_type(tmp_path / "fake.jpg") is None

    assert [img.filename for img in find_images(tmp_path)] == ["real.dat", "shot.png"]


def test_other_image_formats_are_excluded(tmp_path, make_image):
    make_image(tmp_path / "anim.gif", "GIF")
    make_image(tmp_path / "old.bmp", "BMP")
    assert find_images(tmp_path) == []


def test_subdirectories_are_ignored(tmp_path, make_image):
    nested = tmp_path / "nested.jpg"
    nested.mkdir()
    make_image(nested / "inner.jpg")
    make_image(tmp_path / "b.jpg")
    make_image(tmp_path / "a.jpg")

    assert [img.filename for img in find_images(tmp_path)] == ["a.jpg", "b.jpg"]


def test_filter_is_idempotent(tmp_path, make_image):
    make_image(tmp_path / "a.jpg")
    (tmp_path / "notes.txt").write_text("hello")
    assert find_images(tmp_path) == find_images(tmp_path)


def test_multi_picture_jpeg_counts_as_jpeg(tmp_path):
    path = tmp_path / "phone.jpg"
    left = Image.new("RGB", (16, 16), color=(10, 20, 30))
    right = Image.new("RGB", (16, 16), color=(30, 20, 10))
    left.save(path, format="MPO", save_all=True, append_images=[right])

    assert path.read_bytes()[:3] == b"\xff\xd8\xff"
    assert sniff_media_type(path) == "image/jpeg"
    assert [img.filename for img in find_images(tmp_path)] == ["phone.jpg"]


@pytest.mark.parametrize("name, fmt, expected", [("big.png", "PNG", "image/png"), ("big.dat", "JPEG", "image/jpeg")])
def test_images_over_pixel_limit_are_kept(tmp_path, monkeypatch, name, fmt, expected):
    path = tmp_path / name
    Image.new("RGB", (100, 100)).save(path, format=fmt)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    assert sniff_media_type(path) == expected


def test_oversized_non_image_is_still_rejected(tmp_path, monkeypatch):
    path = tmp_path / "big.gif"
    Image.new("RGB", (100, 100)).save(path, format="GIF")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)

    assert sniff_media_type(path) is None
