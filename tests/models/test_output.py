"""Tests for GenerationResult.from_response and accessors."""
import pytest

from craiyon.errors import MalformedResponseError
from craiyon.models.image import ImageAsset
from craiyon.models.output import GenerationResult


def test_from_response_keeps_order_and_version():
    result = GenerationResult.from_response({"images": ["YQ==", "Yg==", "Yw=="], "version": "v3-test"})

    assert len(result) == 3
    assert result.version == "v3-test"
    assert result.as_base64() == ["YQ==", "Yg==", "Yw=="]
    assert result.as_bytes() == [b"a", b"b", b"c"]
    assert [image.as_base64() for image in result] == ["YQ==", "Yg==", "Yw=="]
    assert all(isinstance(image, ImageAsset) for image in result.images)


def test_from_response_without_version():
    result = GenerationResult.from_response({"images": ["YQ=="]})
    assert result.version is None


@pytest.mark.parametrize(
    "raw",
    [
        None,
        ["YQ=="],
        {},
        {"images": "YQ=="},
        {"images": []},
        {"images": ["YQ==", 7]},
        {"images": ["YQ=="], "version": 3},
    ],
)
def test_from_response_rejects_malformed_bodies(raw):
    with pytest.raises(MalformedResponseError):
        GenerationResult.from_response(raw)


def test_images_are_immutable_sequence():
    result = GenerationResult([ImageAsset("YQ==")], "v")
    assert isinstance(result.images, tuple)


def test_save_all_writes_each_image_in_order(tmp_path):
    result = GenerationResult.from_response({"images": ["YQ==", "Yg=="], "version": "v"})

    paths = result.save_all(tmp_path, prefix="fox", extension="png")

    assert [p.name for p in paths] == ["fox_0.png", "fox_1.png"]
    assert [p.read_bytes() for p in paths] == [b"a", b"b"]


@pytest.mark.asyncio
async def test_save_all_async(tmp_path):
    result = GenerationResult.from_response({"images": ["YQ==", "Yg=="], "version": "v"})

    paths = await result.save_all_async(tmp_path)

    assert [p.name for p in paths] == ["craiyon_0.webp", "craiyon_1.webp"]
    assert [p.read_bytes() for p in paths] == [b"a", b"b"]
