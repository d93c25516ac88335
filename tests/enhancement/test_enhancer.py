"""
Unit tests for the enhancement module.
"""

import numpy as np
import pytest

from src.common.types import RasterImage
from src.enhancement.enhancer import build_lookup_table, enhance_document
from src.enhancement.types import EnhancementOptions


@pytest.fixture
def gradient_image():
    """16x16 RGBA image holding every byte value in R, G and B."""
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)
    data = np.stack([values, values[::-1], values.T, np.full_like(values, 77)], axis=-1)
    return RasterImage(data=np.ascontiguousarray(data))


class TestEnhancementOptions:
    def test_defaults(self):
        options = EnhancementOptions()
        assert options.contrast == 1.2
        assert options.brightness == 1.05

    @pytest.mark.parametrize("kwargs", [{"contrast": -0.1}, {"brightness": -1.0}])
    def test_negative_values_rejected(self, kwargs):
        with pytest.raises(ValueError, match="cannot be negative"):
            EnhancementOptions(**kwargs)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"contrast": float("nan")},
            {"brightness": float("nan")},
            {"contrast": float("inf")},
        ],
    )
    def test_non_finite_values_rejected(self, kwargs):
        with pytest.raises(ValueError, match="must be finite"):
            EnhancementOptions(**kwargs)

    def test_is_identity(self):
        assert EnhancementOptions(1.0, 1.0).is_identity()
        assert not EnhancementOptions().is_identity()


class TestLookupTable:
    def test_identity(self):
        lut = build_lookup_table(EnhancementOptions(contrast=1.0, brightness=1.0))
        np.testing.assert_array_equal(lut, np.arange(256))

    @pytest.mark.parametrize(
        "value,expected",
        [(0, 0), (128, 134), (200, 225), (255, 255), (100, 99)],
    )
    def test_default_transform(self, value, expected):
        # ((v - 128) * 1.2 + 128) * 1.05, clamped and rounded
        lut = build_lookup_table(EnhancementOptions())
        assert lut[value] == expected

    @pytest.mark.parametrize("contrast", [0.0, 0.5, 1.0, 2.5, 40.0])
    @pytest.mark.parametrize("brightness", [0.0, 0.3, 1.0, 1.05, 9.0])
    def test_bounds(self, contrast, brightness):
        lut = build_lookup_table(EnhancementOptions(contrast, brightness))

        values = np.arange(256, dtype=np.float64)
        expected = np.clip(
            np.rint(((values - 128) * contrast + 128) * brightness), 0, 255
        )

        assert lut.dtype == np.uint8
        np.testing.assert_array_equal(lut, expected)

    def test_zero_contrast_flattens_to_mid_gray(self):
        lut = build_lookup_table(EnhancementOptions(contrast=0.0, brightness=1.0))
        assert np.all(lut == 128)


class TestEnhanceDocument:
    def test_identity_preserves_image(self, gradient_image):
        result = enhance_document(
            gradient_image, EnhancementOptions(contrast=1.0, brightness=1.0)
        )
        np.testing.assert_array_equal(result.data, gradient_image.data)

    def test_alpha_untouched(self, gradient_image):
        result = enhance_document(gradient_image, EnhancementOptions(3.0, 2.0))
        np.testing.assert_array_equal(result.data[..., 3], gradient_image.data[..., 3])

    def test_channels_independent(self, gradient_image):
        options = EnhancementOptions()
        lut = build_lookup_table(options)

        result = enhance_document(gradient_image, options)

        for channel in range(3):
            np.testing.assert_array_equal(
                result.data[..., channel], lut[gradient_image.data[..., channel]]
            )

    def test_default_options(self, gradient_image):
        assert np.array_equal(
            enhance_document(gradient_image).data,
            enhance_document(gradient_image, EnhancementOptions(1.2, 1.05)).data,
        )

    def test_returns_new_image(self, gradient_image):
        before = gradient_image.data.copy()

        result = enhance_document(gradient_image)

        assert result.size == gradient_image.size
        assert not np.shares_memory(result.data, gradient_image.data)
        np.testing.assert_array_equal(gradient_image.data, before)

    def test_deterministic(self, gradient_image):
        first = enhance_document(gradient_image)
        second = enhance_document(gradient_image)
        np.testing.assert_array_equal(first.data, second.data)
