from tapead import Tape
from tapead.operator import operator
from tapead.testing import BaseScalarTest, check_grad
from numpy.testing import assert_array_equal, assert_allclose
import numpy
import pytest

def test_sum_adjoint():
    tape = Tape('numpy')
    a = tape.named_var(numpy.arange(6).reshape(2, 3), 'a')
    s = tape.sum(a, 's')
    assert s.name == 's'
    assert s.shape == ()
    assert_array_equal(s.value, 15)

    tape.grad(s, [a])
    _a = a.gradient()
    assert _a.shape == (2, 3)
    assert_array_equal(_a.value, numpy.ones((2, 3)))

def test_expand_adjoint():
    tape = Tape('numpy')
    a = tape.var(2.0)
    e = tape.expand(a, (4, 2))
    assert_array_equal(e.value, numpy.full((4, 2), 2.0))

    s = tape.sum(tape.mul(e, e))
    assert_allclose(s.value, 32)

    _a, = tape.grad(s, [a])
    assert _a.shape == ()
    assert_allclose(_a.value, 8 * 2 * 2.0)

def test_sum_to_shape():
    tape = Tape('numpy')
    a = tape.var(numpy.arange(6.).reshape(2, 3))
    b = tape.sum(a, shape=(3,))
    assert_array_equal(b.value, [3, 5, 7])

    w = tape.var([1., 2., 3.])
    l = tape.sum(tape.mul(b, w))
    tape.grad(l, [a, w])
    assert_array_equal(a.gradient().value, [[1, 2, 3], [1, 2, 3]])
    assert_array_equal(w.gradient().value, [3, 5, 7])

def test_expand_row():
    tape = Tape('numpy')
    a = tape.var([1., 2., 3.])
    e = tape.expand(a, (2, 3))
    l = tape.sum(tape.mul(e, e))
    tape.grad(l, [a])
    # each element appears twice
    assert_allclose(a.gradient().value, 4 * numpy.array([1., 2., 3.]))

def test_tensor_second_order():
    tape = Tape('numpy')
    x = tape.var([1., 2., 3.])
    y = tape.sum(tape.mul(tape.mul(x, x), x))
    _x, = tape.grad(y, [x])
    assert_allclose(_x.value, 3 * x.value ** 2)

    # d/dx sum(3 x ** 2) = 6 x
    __x, = tape.grad(tape.sum(_x), [x])
    assert_allclose(__x.value, 6 * x.value)

def test_shape_mismatch():
    from tapead.error import ShapeMismatch
    tape = Tape('numpy')
    a = tape.var(numpy.ones(3))
    b = tape.var(numpy.ones(4))
    with pytest.raises(ShapeMismatch):
        tape.mul(a, b)
    with pytest.raises(ShapeMismatch):
        tape.expand(a, (2, 2))
    assert len(tape) == 0

def test_scalar_unsupported():
    from tapead.error import Unsupported
    tape = Tape()
    a = tape.var(1.0)
    with pytest.raises(Unsupported):
        tape.sum(a)
    with pytest.raises(Unsupported):
        tape.expand(a, (3,))

def test_trace_expand(caplog):
    import logging
    tape = Tape('numpy')
    with caplog.at_level(logging.INFO, logger='TapeAD'):
        a = tape.named_var(1.0, 'a')
        e = tape.expand(a, (2,), name='e')
        s = tape.sum(e, 's')
    messages = [r.getMessage() for r in caplog.records]
    assert 'e = expand(a, (2,))' in messages
    assert 's = sum(e)' in messages

def test_custom_operator():
    @operator
    class square:
        ain = ['x']
        trace = '%(y)s = %(x)s ** 2'

        def apl(self, backend, x):
            return backend.multiply(x, x)

        def vjp(self, tape, _y, x):
            two_x = tape.add(x, x)
            return tape.mul(_y, two_x),

    tape = Tape()
    x = tape.var(3.0)
    y = tape.apply(square(), (x,))
    assert y.value == 9.0
    assert repr(tape.records[0]) == "square / ('v0',) -> v1"

    _x, = tape.grad(y, [x])
    assert _x.value == 6.0

    with pytest.raises(TypeError):
        tape.apply(square(), (x, x))

def test_broken_operator():
    from tapead.error import BrokenOperator
    with pytest.raises(BrokenOperator):
        @operator
        class noop:
            ain = ['x']
            def apl(self, backend, x):
                return x

def test_operator_repr():
    from tapead import operator as operators
    assert repr(operators.add()) == 'add'
    assert repr(operators.expand(shape=(2,))) == 'expand(shape=(2,))'

class TestSquareSum(BaseScalarTest):
    pass

class TestExpand(BaseScalarTest):
    x = numpy.float64(1.5)
    y = 4 * 1.5 ** 2
    _x = 8 * 1.5

    def model(self, tape, x):
        e = tape.expand(x, (2, 2))
        return tape.sum(tape.mul(e, e))

class TestCubic(BaseScalarTest):
    x = numpy.linspace(-1, 1, 5)
    y = sum(x ** 3 + x)
    _x = 3 * x ** 2 + 1

    def model(self, tape, x):
        x3 = tape.mul(tape.mul(x, x), x)
        return tape.sum(tape.add(x3, x))

def test_check_grad():
    def model(tape, x):
        w = tape.var([0.5, -2.0, 1.0])
        return tape.sum(tape.mul(tape.mul(x, w), x))

    _x = check_grad(model, [1.0, 2.0, 3.0])
    assert_allclose(_x, [1.0, -8.0, 6.0])
