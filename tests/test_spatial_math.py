import numpy as np
import pytest

from featherstone import (
    Matrix33,
    SingularMatrixError,
    Twist3,
    UnitSystem,
    UnitType,
    Vector33,
    Wrench3,
)

np.random.seed(42)


def random_vector33() -> Vector33:
    return Vector33.from_array(np.random.rand(6) - 0.5)


def random_matrix33() -> Matrix33:
    return Matrix33.from_array(np.random.rand(6, 6) - 0.5)


def test_vector_algebra():
    a = random_vector33()
    b = random_vector33()
    assert a.dot(b) == pytest.approx(a.to_array() @ b.to_array())
    np.testing.assert_allclose(
        a.outer(b).to_array(), np.outer(a.to_array(), b.to_array())
    )
    np.testing.assert_allclose((a + b).to_array(), a.to_array() + b.to_array())
    np.testing.assert_allclose((a - b).to_array(), a.to_array() - b.to_array())
    np.testing.assert_allclose((-a).to_array(), -a.to_array())
    np.testing.assert_allclose((a / 4).to_array(), a.to_array() / 4)
    assert (a - a).is_zero()
    assert not a.is_zero()


def test_numpy_scalars_scale_vectors():
    a = random_vector33()
    factor = np.float64(2.5)
    np.testing.assert_allclose((factor * a).to_array(), 2.5 * a.to_array())
    np.testing.assert_allclose((a * factor).to_array(), 2.5 * a.to_array())
    np.testing.assert_allclose((np.int64(3) * a).to_array(), 3 * a.to_array())


def test_matrix_products():
    A = random_matrix33()
    B = random_matrix33()
    x = random_vector33()
    np.testing.assert_allclose((A * x).to_array(), A.to_array() @ x.to_array())
    np.testing.assert_allclose((A * B).to_array(), A.to_array() @ B.to_array())
    np.testing.assert_allclose(A.T.to_array(), A.to_array().T)
    np.testing.assert_allclose((2 * A).to_array(), 2 * A.to_array())
    np.testing.assert_allclose((A / 2).to_array(), A.to_array() / 2)

    R = np.random.rand(3, 3)
    np.testing.assert_allclose(
        A.block_mul(R).to_array(),
        np.kron(np.eye(2), R) @ A.to_array(),
    )


def test_scalars_act_as_multiples_of_identity():
    A = random_matrix33()
    np.testing.assert_allclose((1 - A).to_array(), np.eye(6) - A.to_array())
    np.testing.assert_allclose((1 + A).to_array(), np.eye(6) + A.to_array())
    np.testing.assert_allclose((A - 2).to_array(), A.to_array() - 2 * np.eye(6))
    assert Matrix33.identity().allclose(Matrix33.scalar(1.0))
    np.testing.assert_allclose(
        Matrix33.diagonal(2 * np.eye(3), 3 * np.eye(3)).to_array(),
        np.diag([2, 2, 2, 3, 3, 3]),
    )


def test_inverse():
    A = Matrix33.from_array(np.random.rand(6, 6) + 6 * np.eye(6))
    np.testing.assert_allclose(A.inverse().to_array(), np.linalg.inv(A.to_array()))
    assert (A * A.inverse()).allclose(Matrix33.identity(), atol=1e-10)

    x = random_vector33()
    np.testing.assert_allclose(
        A.solve(x).to_array(), np.linalg.solve(A.to_array(), x.to_array())
    )


def test_inverse_with_singular_upper_left_block():
    I3 = np.eye(3)
    A = Matrix33(np.zeros((3, 3)), I3, I3, I3)
    expected = Matrix33(-I3, I3, I3, np.zeros((3, 3)))
    assert A.inverse().allclose(expected)


def test_inverse_with_singular_diagonal_blocks():
    I3 = np.eye(3)
    Z = np.zeros((3, 3))
    swap = Matrix33(Z, I3, I3, Z)
    assert swap.inverse().allclose(swap)

    # pivots on a21
    A = Matrix33(Z, np.random.rand(3, 3) + 3 * I3, np.random.rand(3, 3) + 3 * I3, Z)
    np.testing.assert_allclose(A.inverse().to_array(), np.linalg.inv(A.to_array()))

    # pivots on a12
    e = np.diag([1.0, 0.0, 0.0])
    B = Matrix33(e, I3, I3 - e, e)
    np.testing.assert_allclose(B.inverse().to_array(), np.linalg.inv(B.to_array()))


def test_inverse_without_block_pivot():
    # swaps the first linear and the first angular components: every block is singular
    P = np.eye(6)[[3, 1, 2, 0, 4, 5]]
    A = Matrix33.from_array(P)
    assert A.inverse().allclose(A)


def test_singular_inverse_raises():
    with pytest.raises(SingularMatrixError):
        Matrix33.zero().inverse()
    with pytest.raises(np.linalg.LinAlgError):
        Matrix33.from_array(np.ones((6, 6))).inverse()


def test_malformed_blocks():
    with pytest.raises(ValueError):
        Matrix33(np.eye(3), np.eye(3), np.eye(3), np.eye(2))
    with pytest.raises(ValueError):
        Vector33.from_array(np.zeros(5))
    with pytest.raises(ValueError):
        Matrix33.from_array(np.zeros((6, 5)))


def test_twist_at():
    twist = Twist3.at([0, 0, 1], [1, 0, 0], 0.5)
    np.testing.assert_allclose(twist.linear, [0, -1, 0.5])
    np.testing.assert_allclose(twist.angular, [0, 0, 1])
    assert Twist3.pitch(twist) == pytest.approx(0.5)
    np.testing.assert_allclose(Twist3.position(twist), [1, 0, 0], atol=1e-15)
    assert Twist3.magnitude(twist) == pytest.approx(1.0)
    np.testing.assert_allclose(Twist3.direction(twist), [0, 0, 1])
    assert not Twist3.is_pure(twist)
    assert Twist3.is_pure(Twist3.pure([1, 2, 3]))


def test_wrench_at():
    wrench = Wrench3.at([0, 2, 0], [1, 0, 0])
    np.testing.assert_allclose(Wrench3.line_vector(wrench), [0, 2, 0])
    np.testing.assert_allclose(Wrench3.moment_vector(wrench), [0, 0, 2])
    np.testing.assert_allclose(Wrench3.position(wrench), [1, 0, 0])
    assert Wrench3.pitch(wrench) == pytest.approx(0.0)
    assert Wrench3.magnitude(wrench) == pytest.approx(2.0)
    assert Wrench3.is_pure(Wrench3.pure([0, 0, 1]))
    assert not Wrench3.is_pure(wrench)


def test_cross_products():
    a = random_vector33()
    b = random_vector33()
    assert Twist3.cross(a, b).allclose(Twist3.cross_op(a) * b)
    assert Wrench3.cross(a, b).allclose(Wrench3.cross_op(a) * b)
    assert Wrench3.cross_op(a).allclose(-Twist3.cross_op(a).T)
    # a twist is parallel to itself
    assert Twist3.cross(a, a).is_zero(tol=1e-15)


def test_unit_conversion():
    twist = Twist3.at([0, 0, 1], [1, 0, 0])
    converted = Twist3.convert(twist, UnitSystem.MKS, UnitSystem.MMKS)
    np.testing.assert_allclose(converted.linear, 1000 * twist.linear)
    np.testing.assert_allclose(converted.angular, twist.angular)

    wrench = Wrench3.at([0, 1, 0], [1, 0, 0])
    converted = Wrench3.convert(wrench, UnitSystem.MKS, UnitSystem.MMKS)
    np.testing.assert_allclose(converted.linear, wrench.linear)
    np.testing.assert_allclose(converted.angular, 1000 * wrench.angular)

    force = Wrench3.convert(wrench, UnitSystem.MKS, UnitSystem.CGS, UnitType.FORCE)
    np.testing.assert_allclose(force.linear, 1e5 * wrench.linear)
    np.testing.assert_allclose(force.angular, 1e7 * wrench.angular)
