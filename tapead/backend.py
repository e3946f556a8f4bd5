"""
    Numeric backends of the tape.

    A backend is the collaborator that owns the arithmetic of the values
    carried by nodes. The tape never touches a value directly; it asks the
    backend to add, multiply, reduce or broadcast.

    Two backends are provided:

    - :class:`ScalarBackend` : plain python numbers.
    - :class:`NumpyBackend` : numpy arrays, with the `sum_to` and `expand`
      primitives and strict shape checking.

"""
import numpy

from .error import ShapeMismatch, Unsupported

class Backend(object):
    """ The capability set a tape consumes from a numeric backend. """

    name = None

    def add(self, x1, x2):
        raise NotImplementedError

    def multiply(self, x1, x2):
        raise NotImplementedError

    def ones_like(self, x):
        raise NotImplementedError

    def prepare(self, x):
        """ convert a user supplied value to the payload type of the backend """
        return x

    def dims(self, x):
        return ()

    def sum_to(self, x, shape):
        raise Unsupported("sum is not supported by the %s backend" % self.name)

    def expand(self, x, shape):
        raise Unsupported("expand is not supported by the %s backend" % self.name)

    def display(self, x):
        return str(x)

    def __repr__(self):
        return "%s()" % type(self).__name__

class ScalarBackend(Backend):
    name = 'scalar'

    def add(self, x1, x2):
        return x1 + x2

    def multiply(self, x1, x2):
        return x1 * x2

    def ones_like(self, x):
        # keep ints as ints, such that integer graphs stay exact
        return type(x)(1)

class NumpyBackend(Backend):
    name = 'numpy'

    def __init__(self, dtype='f8'):
        self.dtype = numpy.dtype(dtype)

    def prepare(self, x):
        return numpy.asarray(x, dtype=self.dtype)

    def _check_shapes(self, op, x1, x2):
        if numpy.shape(x1) != numpy.shape(x2):
            raise ShapeMismatch("%s of operands with shapes %s and %s; use expand to broadcast"
                    % (op, numpy.shape(x1), numpy.shape(x2)))

    def add(self, x1, x2):
        self._check_shapes('add', x1, x2)
        return numpy.add(x1, x2)

    def multiply(self, x1, x2):
        self._check_shapes('multiply', x1, x2)
        return numpy.multiply(x1, x2)

    def ones_like(self, x):
        return numpy.ones_like(x)

    def dims(self, x):
        return numpy.shape(x)

    def sum_to(self, x, shape):
        """ Reduce x to shape by summing the broadcasted axes.

            This is the adjoint of :meth:`expand`; `shape=()` sums all elements.
        """
        shape = tuple(shape)
        xshape = numpy.shape(x)
        if len(shape) > len(xshape):
            raise ShapeMismatch("cannot sum shape %s to shape %s" % (xshape, shape))

        lead = len(xshape) - len(shape)
        axes = list(range(lead))
        for i, n in enumerate(shape):
            if n == xshape[lead + i]:
                continue
            if n != 1:
                raise ShapeMismatch("cannot sum shape %s to shape %s" % (xshape, shape))
            axes.append(lead + i)

        r = numpy.sum(x, axis=tuple(axes), keepdims=True)
        return r.reshape(shape)

    def expand(self, x, shape):
        try:
            r = numpy.broadcast_to(x, tuple(shape))
        except ValueError as e:
            raise ShapeMismatch("cannot expand shape %s to shape %s"
                    % (numpy.shape(x), tuple(shape))) from e
        # broadcast_to returns a readonly view; values on the tape own their data.
        return r.copy()

    def display(self, x):
        return numpy.array2string(numpy.asarray(x), separator=', ')

_backends = {
    'scalar' : ScalarBackend,
    'numpy' : NumpyBackend,
}

def get_backend(backend):
    """ Resolve a backend instance from a name or an instance.

        None resolves to a new :class:`ScalarBackend`.
    """
    if backend is None:
        return ScalarBackend()

    if isinstance(backend, Backend):
        return backend

    if backend not in _backends:
        raise ValueError("unknown backend `%s`, expecting one of %s"
                % (backend, sorted(_backends.keys())))

    return _backends[backend]()
