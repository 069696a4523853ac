"""Tests for the fixed-point scale engine and stream resize."""

from unittest.mock import patch

import numpy as np
import pytest

from gifxform.codec import ZlibFrameCodec, compress_frame, release_uncompressed, uncompress_frame
from gifxform.exceptions import FatalTransformError, TransformError
from gifxform.model import Frame, Stream
from gifxform.transforms import resize_stream, scale_image
from gifxform.transforms.scale import (
    MAX_DIMENSION,
    scaled_geometry,
    scaled_step,
    unscale,
)


class TestFixedPoint:
    """Test the 10-bit fixed-point helpers."""

    def test_unscale_rounds_half_up(self):
        assert unscale(511) == 0
        assert unscale(512) == 1
        assert unscale(1535) == 1
        assert unscale(1536) == 2

    def test_scaled_step(self):
        assert scaled_step(1.0) == 1024
        assert scaled_step(0.5) == 512
        assert scaled_step(1 / 3) == 341

    def test_max_dimension(self):
        assert MAX_DIMENSION == 2097151


class TestScaledGeometry:
    """Test edge-derived frame geometry."""

    def test_offsets_scale_with_edges(self, make_frame):
        geometry = scaled_geometry(make_frame(4, 4, left=3, top=5), 512, 512)
        assert (geometry.left, geometry.top) == (2, 3)

    def test_clamps_to_one_pixel(self, make_frame):
        geometry = scaled_geometry(make_frame(1, 1), scaled_step(0.1), scaled_step(0.1))
        assert (geometry.width, geometry.height) == (1, 1)

    @pytest.mark.parametrize("factor", [0.3, 0.6, 0.75, 1.3, 2.5])
    def test_adjacent_frames_still_touch(self, make_frame, factor):
        step = scaled_step(factor)
        a = scaled_geometry(make_frame(3, 2), step, step)
        b = scaled_geometry(make_frame(4, 2, left=3), step, step)
        assert a.right == b.left


class TestScaleImage:
    """Test scaling frames."""

    def test_identity(self, single_frame_stream):
        frame = single_frame_stream.frames[0]
        before = frame.pixels.copy()
        scale_image(single_frame_stream, frame, 1.0, 1.0)
        np.testing.assert_array_equal(frame.pixels, before)
        assert (frame.left, frame.top) == (0, 0)

    def test_upscale_replicates_pixels(self, small_frame):
        scale_image(Stream(), small_frame, 2.0, 2.0)
        expected = np.repeat(np.repeat(np.array([[0, 1, 2], [3, 4, 5]]), 2, axis=0), 2, axis=1)
        np.testing.assert_array_equal(small_frame.pixels, expected)
        assert (small_frame.left, small_frame.top) == (2, 4)
        assert (small_frame.width, small_frame.height) == (6, 4)

    def test_downscale_samples_pixels(self, make_frame):
        frame = make_frame(4, 4)
        scale_image(Stream(), frame, 0.5, 0.5)
        assert frame.rows() == [[4, 6], [12, 14]]

    def test_non_uniform_factors(self, make_frame):
        frame = make_frame(4, 4)
        scale_image(Stream(), frame, 2.0, 0.5)
        assert (frame.width, frame.height) == (8, 2)
        assert frame.pixels.shape == (2, 8)

    def test_fractional_downscale_of_offset_row(self):
        frame = Frame.from_rows([[0, 1, 2, 3, 4]], left=1)
        scale_image(Stream(), frame, 0.6, 1.0)
        assert frame.rows() == [[1, 3, 4]]
        assert frame.left == 1

    def test_fractional_upscale_of_offset_row(self):
        frame = Frame.from_rows([[0, 1, 2]], left=1)
        scale_image(Stream(), frame, 1.5, 1.0)
        assert frame.rows() == [[0, 1, 1, 2]]
        assert frame.left == 2

    def test_fractional_downscale_of_offset_column(self):
        """Rows only emit once the next destination row boundary is passed."""
        frame = Frame.from_rows([[0], [1], [2], [3], [4]], top=1)
        scale_image(Stream(), frame, 1.0, 0.6)
        assert frame.rows() == [[2], [4], [4]]
        assert frame.top == 1

    def test_tiny_frame_keeps_one_pixel(self):
        frame = Frame.from_rows([[9]])
        scale_image(Stream(), frame, 0.1, 0.1)
        assert frame.rows() == [[9]]

    def test_invalidates_compressed(self, small_frame):
        small_frame.compressed = b"stale"
        scale_image(Stream(), small_frame, 2.0, 2.0)
        assert small_frame.compressed is None

    def test_compressed_frame_is_recompressed(self, make_frame):
        codec = ZlibFrameCodec()
        stream = Stream(codec=codec)
        frame = make_frame(4, 4)
        compress_frame(frame, codec)
        release_uncompressed(frame)

        scale_image(stream, frame, 0.5, 0.5)

        assert frame.pixels is None
        assert frame.compressed is not None
        assert (frame.width, frame.height) == (2, 2)
        uncompress_frame(frame, codec)
        assert frame.rows() == [[4, 6], [12, 14]]

    def test_empty_frame_skipped(self):
        frame = Frame()
        scale_image(Stream(), frame, 2.0, 2.0)
        assert frame.pixels is None
        assert (frame.width, frame.height) == (0, 0)

    def test_too_big_is_fatal(self, make_frame, diagnostics):
        frame = make_frame(10, 10)
        with pytest.raises(FatalTransformError, match="too big"):
            scale_image(Stream(), frame, 300000.0, 1.0, diagnostics)
        assert frame.width == 10

    @pytest.mark.parametrize("factors", [(0.0, 1.0), (1.0, -2.0)])
    def test_non_positive_factor_raises(self, small_frame, factors):
        with pytest.raises(TransformError, match="positive"):
            scale_image(Stream(), small_frame, *factors)


class TestResizeStream:
    """Test resizing whole streams."""

    def test_width_only_keeps_aspect(self, single_frame_stream):
        resize_stream(single_frame_stream, 50, None)
        frame = single_frame_stream.frames[0]
        assert (single_frame_stream.screen_width, single_frame_stream.screen_height) == (50, 50)
        assert (frame.width, frame.height) == (50, 50)
        assert (frame.left, frame.top) == (0, 0)

    def test_height_only_keeps_aspect(self, animation_stream):
        resize_stream(animation_stream, None, 4)
        assert (animation_stream.screen_width, animation_stream.screen_height) == (5, 4)

    def test_non_uniform(self, animation_stream):
        resize_stream(animation_stream, 20, 4)
        frame = animation_stream.frames[0]
        assert (animation_stream.screen_width, animation_stream.screen_height) == (20, 4)
        assert (frame.width, frame.height) == (20, 4)

    @pytest.mark.parametrize("size", [(None, None), (0, 0), (-1, None)])
    def test_unset_is_no_op(self, animation_stream, size):
        with patch("gifxform.transforms.resize.scale_image") as mock_scale:
            resize_stream(animation_stream, *size)
        mock_scale.assert_not_called()
        assert (animation_stream.screen_width, animation_stream.screen_height) == (10, 8)

    def test_fit_never_enlarges(self, single_frame_stream):
        resize_stream(single_frame_stream, 200, 200, fit=True)
        assert single_frame_stream.screen_width == 100
        assert single_frame_stream.frames[0].width == 100

    def test_fit_uses_smaller_width_factor(self, animation_stream):
        resize_stream(animation_stream, 5, 8, fit=True)
        assert (animation_stream.screen_width, animation_stream.screen_height) == (5, 4)
        assert (animation_stream.frames[0].width, animation_stream.frames[0].height) == (5, 4)

    def test_fit_uses_smaller_height_factor(self, animation_stream):
        resize_stream(animation_stream, 10, 2, fit=True)
        assert (animation_stream.screen_width, animation_stream.screen_height) == (3, 2)
        assert (animation_stream.frames[0].width, animation_stream.frames[0].height) == (3, 2)

    def test_one_factor_pair_for_all_frames(self, animation_stream):
        with patch("gifxform.transforms.resize.scale_image") as mock_scale:
            resize_stream(animation_stream, 5, None)
        assert mock_scale.call_count == 3
        for call in mock_scale.call_args_list:
            assert call.args[2:4] == (0.5, 0.5)

    def test_screen_recomputed_first(self, make_frame):
        stream = Stream(frames=[make_frame(10, 10)])
        resize_stream(stream, 5, None)
        assert (stream.screen_width, stream.screen_height) == (5, 5)
        assert stream.frames[0].width == 5

    def test_compressed_frames_resized(self, animation_stream):
        codec = animation_stream.codec
        for frame in animation_stream.frames:
            compress_frame(frame, codec)
            release_uncompressed(frame)
        resize_stream(animation_stream, 20, 16)
        first = animation_stream.frames[0]
        assert first.is_compressed_only
        uncompress_frame(first, codec)
        assert first.pixels.shape == (16, 20)
