import numpy
from numpy.testing import assert_allclose

from .tape import Tape

def numerical_gradient(function, x, eps=1e-6):
    """ central finite difference gradient of a scalar function at x """
    x = numpy.array(x, dtype='f8')
    grad = numpy.zeros_like(x)
    for i in numpy.ndindex(*x.shape):
        x1 = x.copy()
        x1[i] += eps
        y2 = function(x1)
        x1[i] -= 2 * eps
        y1 = function(x1)
        grad[i] = (y2 - y1) / (2 * eps)
    return grad

def check_grad(model, x, eps=1e-6, rtol=1e-5, atol=1e-6):
    """ compare the reverse pass gradient of model at x with finite differences.

        model : function(tape, x) returning a scalar node; x is a node on
                a numpy tape.

        Returns the gradient from the reverse pass.
    """
    def function(x):
        tape = Tape('numpy')
        return float(model(tape, tape.var(x)).value)

    tape = Tape('numpy')
    x1 = tape.var(x)
    y = model(tape, x1)
    _x = tape.grad(y, [x1])[0]
    if _x is None:
        _x = numpy.zeros_like(x1.value)
    else:
        _x = _x.value

    assert_allclose(_x, numerical_gradient(function, x, eps), rtol=rtol, atol=atol)
    return _x

class BaseScalarTest:
    """ Basic correctness test of a model reduced to a scalar

        Subclasses override `model`, `x`, and the expected `y` and `_x`.
    """

    x = numpy.arange(10)  # free variable x
    y = sum(x ** 2)       # expected output variable y, scalar
    _x = 2 * x            # expected gradient

    def model(self, tape, x):
        return tape.sum(tape.mul(x, x))

    def setup_method(self):
        self.tape = Tape('numpy')

    def test_apl(self):
        x = self.tape.var(self.x)
        y = self.model(self.tape, x)
        assert_allclose(y.value, self.y)

    def test_vjp(self):
        x = self.tape.var(self.x)
        y = self.model(self.tape, x)
        self.tape.grad(y, [x])
        assert_allclose(x.gradient().value, self._x)

    def test_numerical(self):
        check_grad(self.model, self.x)
