"""Tests for gifxform.model and gifxform.codec modules."""

import numpy as np
import pytest

from gifxform.codec import (
    ZlibFrameCodec,
    compress_frame,
    release_compressed,
    release_uncompressed,
    uncompress_frame,
)
from gifxform.exceptions import TransformError
from gifxform.model import Color, Colormap, Frame, Stream


class TestColor:
    """Test Color entries."""

    def test_rgb_without_pixel(self):
        color = Color(1, 2, 3)
        assert color.rgb == (1, 2, 3)
        assert color.has_pixel is False

    def test_pinned_pixel(self):
        color = Color(0, 0, 0, pixel=7)
        assert color.has_pixel is True
        assert color.pixel == 7

    def test_same_rgb_ignores_pixel(self):
        assert Color(9, 9, 9, pixel=1).same_rgb(Color(9, 9, 9))

    def test_component_out_of_range_raises(self):
        with pytest.raises(TransformError, match="out of range"):
            Color(256, 0, 0)

    def test_negative_component_raises(self):
        with pytest.raises(TransformError, match="out of range"):
            Color(0, -1, 0)

    def test_str_hex(self):
        assert str(Color(255, 0, 16)) == "#ff0010"

    def test_str_index(self):
        assert str(Color(0, 0, 0, pixel=3)) == "index 3"


class TestColormap:
    """Test Colormap containers."""

    def test_from_rgb(self):
        cmap = Colormap.from_rgb([(1, 2, 3), (4, 5, 6)])
        assert cmap.ncol == 2
        assert cmap.rgb_list() == [(1, 2, 3), (4, 5, 6)]

    def test_setitem_replaces_entry(self):
        cmap = Colormap.from_rgb([(1, 2, 3)])
        cmap[0] = Color(7, 8, 9)
        assert cmap[0].rgb == (7, 8, 9)

    def test_copy_is_independent(self):
        cmap = Colormap.from_rgb([(1, 2, 3)])
        copy = cmap.copy()
        copy[0] = Color(0, 0, 0)
        assert cmap[0].rgb == (1, 2, 3)


class TestFrame:
    """Test Frame construction."""

    def test_from_rows_sets_size(self):
        frame = Frame.from_rows([[1, 2, 3], [4, 5, 6]])
        assert frame.width == 3
        assert frame.height == 2
        assert frame.pixels.dtype == np.uint8

    def test_edges(self):
        frame = Frame.from_rows([[1, 2, 3], [4, 5, 6]], left=4, top=5)
        assert frame.right == 7
        assert frame.bottom == 7

    def test_one_dimensional_pixels_raise(self):
        with pytest.raises(TransformError, match="2-D"):
            Frame(pixels=np.zeros(4, dtype=np.uint8))

    def test_read_only_pixels_are_copied(self):
        buffer = np.frombuffer(bytes([1, 2, 3, 4, 5, 6]), dtype=np.uint8).reshape(2, 3)
        frame = Frame(pixels=buffer)
        assert frame.pixels.flags.writeable
        assert not np.shares_memory(frame.pixels, buffer)

    def test_writable_pixels_are_kept(self):
        pixels = np.zeros((2, 2), dtype=np.uint8)
        assert Frame(pixels=pixels).pixels is pixels

    def test_compressed_only(self):
        frame = Frame(width=2, height=2, compressed=b"data")
        assert frame.is_compressed_only
        assert frame.rows() == []

    def test_empty(self):
        assert Frame().is_empty


class TestCalculateScreenSize:
    """Test screen size recomputation."""

    def test_grows_to_cover_frames(self):
        stream = Stream(
            screen_width=5,
            screen_height=5,
            frames=[Frame.from_rows([[0] * 4] * 3, left=3, top=4)],
        )
        stream.calculate_screen_size()
        assert (stream.screen_width, stream.screen_height) == (7, 7)

    def test_does_not_shrink_without_force(self):
        stream = Stream(screen_width=50, screen_height=40, frames=[Frame.from_rows([[0]])])
        stream.calculate_screen_size()
        assert (stream.screen_width, stream.screen_height) == (50, 40)

    def test_force_sets_exact_extent(self):
        stream = Stream(screen_width=50, screen_height=40, frames=[Frame.from_rows([[0, 0]], left=1)])
        stream.calculate_screen_size(force=True)
        assert (stream.screen_width, stream.screen_height) == (3, 1)

    def test_empty_stream_defaults(self):
        stream = Stream()
        stream.calculate_screen_size()
        assert (stream.screen_width, stream.screen_height) == (640, 480)

    def test_empty_stream_keeps_existing_screen(self):
        stream = Stream(screen_width=20, screen_height=10)
        stream.calculate_screen_size()
        assert (stream.screen_width, stream.screen_height) == (20, 10)


class TestStreamColormaps:
    """Test colormap ordering."""

    def test_global_first_then_frames(self):
        global_cmap = Colormap.from_rgb([(0, 0, 0)])
        local_a = Colormap.from_rgb([(1, 1, 1)])
        local_b = Colormap.from_rgb([(2, 2, 2)])
        stream = Stream(
            frames=[Frame(local_colormap=local_a), Frame(), Frame(local_colormap=local_b)],
            global_colormap=global_cmap,
        )
        assert stream.colormaps() == [global_cmap, local_a, local_b]


class TestCodec:
    """Test the codec helpers."""

    def test_compress_then_uncompress(self):
        codec = ZlibFrameCodec()
        frame = Frame.from_rows([[1, 2], [3, 4], [5, 6]])
        compress_frame(frame, codec)
        release_uncompressed(frame)
        assert frame.is_compressed_only
        assert (frame.width, frame.height) == (2, 3)

        uncompress_frame(frame, codec)
        assert frame.rows() == [[1, 2], [3, 4], [5, 6]]
        assert frame.pixels.flags.writeable

    def test_uncompress_keeps_existing_pixels(self):
        frame = Frame.from_rows([[1]])
        uncompress_frame(frame, None)
        assert frame.rows() == [[1]]

    def test_uncompress_without_codec_raises(self):
        frame = Frame(width=1, height=1, compressed=b"x")
        with pytest.raises(TransformError, match="no codec"):
            uncompress_frame(frame, None)

    def test_uncompress_without_any_data_raises(self):
        with pytest.raises(TransformError, match="neither raw nor compressed"):
            uncompress_frame(Frame(width=1, height=1), ZlibFrameCodec())

    def test_size_mismatch_raises(self):
        codec = ZlibFrameCodec()
        frame = Frame.from_rows([[1, 2]])
        compress_frame(frame, codec)
        release_uncompressed(frame)
        frame.width = 5
        with pytest.raises(TransformError, match="expected 5"):
            uncompress_frame(frame, codec)

    def test_corrupt_data_raises(self):
        frame = Frame(width=1, height=1, compressed=b"not zlib")
        with pytest.raises(TransformError, match="Corrupt"):
            uncompress_frame(frame, ZlibFrameCodec())

    def test_compress_without_codec_raises(self):
        with pytest.raises(TransformError, match="No codec"):
            compress_frame(Frame.from_rows([[1]]), None)

    def test_release_compressed(self):
        frame = Frame.from_rows([[1]], compressed=b"x")
        release_compressed(frame)
        assert frame.compressed is None
        assert frame.has_pixels
