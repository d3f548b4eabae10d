import math

import numpy as np
import numpy.testing as npt
import pytest

from maptransform.geo import matrix as mat4


def test_builders_post_multiply():
    m = mat4.translate(mat4.identity(), (10, 0, 0))
    m = mat4.scale(m, (2, 2, 2))

    # Scale is applied to the vertex first, then the translation.
    npt.assert_allclose(mat4.transform_vec4(m, (1, 1, 1, 1)), [12, 2, 2, 1])


def test_rotations():
    rz = mat4.rotate_z(mat4.identity(), math.pi / 2)
    rx = mat4.rotate_x(mat4.identity(), math.pi / 2)

    npt.assert_allclose(mat4.transform_vec4(rz, (1, 0, 0, 1)), [0, 1, 0, 1], atol=1e-12)
    npt.assert_allclose(mat4.transform_vec4(rx, (0, 1, 0, 1)), [0, 0, 1, 1], atol=1e-12)


def test_perspective_maps_near_and_far_planes():
    m = mat4.perspective(math.pi / 2, 1.0, 1.0, 100.0)

    near = mat4.transform_vec4(m, (0, 0, -1, 1))
    far = mat4.transform_vec4(m, (0, 0, -100, 1))

    assert near[2] / near[3] == pytest.approx(-1.0)
    assert far[2] / far[3] == pytest.approx(1.0)


def test_invert():
    m = mat4.rotate_x(mat4.translate(mat4.identity(), (1, 2, 3)), 0.3)

    npt.assert_allclose(mat4.invert(m) @ m, np.identity(4), atol=1e-12)


def test_invert_singular_returns_none():
    assert mat4.invert(np.zeros((4, 4))) is None
    assert mat4.invert(np.full((4, 4), np.nan)) is None


def test_to_gl_is_column_major():
    m = mat4.translate(mat4.identity(), (1, 2, 3))

    flat = mat4.to_gl(m)

    assert flat.dtype == np.float32
    assert flat[12:15].tolist() == [1, 2, 3]
