"""
    Routines to define an operator

    use @operator decorator on a class to define an operator.

    Example: see the source code of :class:`add`

"""
from .error import BrokenOperator

class Operator(object):
    """ Base class of all operators.

        An operator object is created for every application; the hyper
        arguments (those that do not take part in differentiation, e.g.
        shape) are stored as attributes of the object.
    """
    def __init__(self, **hyper_args):
        self.hyper_args = hyper_args
        for k, v in hyper_args.items():
            setattr(self, k, v)

    def format(self, y, inputs):
        """ the trace line of an application, `y = ...` """
        d = {}
        d.update(self.hyper_args)
        d.update(zip(self.ain, [x.name for x in inputs]))
        d['y'] = y.name
        return self.trace % d

    def __repr__(self):
        if len(self.hyper_args) == 0:
            return type(self).__name__
        return "%s(%s)" % (type(self).__name__,
            ', '.join('%s=%s' % (k, v) for k, v in sorted(self.hyper_args.items())))

def operator(kls):
    """ Decorator to declare an operator.

        The decorator produces a new class with Operator as a baseclass.

        An operator must define `ain`, `trace`, apl and vjp.

        ain : list of the names of the input arguments; all inputs are nodes.

        trace : format string of the trace line of an application;
              formatted with the input names, the hyper arguments and
              `y`, the name of the output.

        apl : function(self, backend, ...) the application of the operator;
              all input arguments are resolved to values; it shall return
              the value of the output. all arithmetic goes through the backend.

        vjp : function(self, tape, _y, ...) the vector jacobian product.
              `_y` is the gradient node of the output and the remaining
              arguments are the input nodes. It shall return a tuple of
              gradient nodes, one per input, in the order of `ain`.
              vjp must be written with the operations of the tape,
              such that the gradients are recorded and can be differentiated
              again.

    """
    for attr in ['ain', 'trace', 'apl', 'vjp']:
        if not hasattr(kls, attr):
            raise BrokenOperator("operator class attribute '%s' is not defined" % attr)

    return type(kls.__name__, (Operator, kls), {})

@operator
class add:
    ain = ['x1', 'x2']
    trace = '%(y)s = %(x1)s + %(x2)s'

    def apl(self, backend, x1, x2):
        return backend.add(x1, x2)

    def vjp(self, tape, _y, x1, x2):
        # the same gradient flows to both sides; no copy is made.
        return _y, _y

@operator
class mul:
    ain = ['x1', 'x2']
    trace = '%(y)s = %(x1)s * %(x2)s'

    def apl(self, backend, x1, x2):
        return backend.multiply(x1, x2)

    def vjp(self, tape, _y, x1, x2):
        return tape.mul(_y, x2), tape.mul(_y, x1)

@operator
class sum:
    """ reduce x to `shape`; () reduces all elements to a scalar """
    ain = ['x']
    trace = '%(y)s = sum(%(x)s)'

    def apl(self, backend, x):
        return backend.sum_to(x, self.shape)

    def vjp(self, tape, _y, x):
        return tape.expand(_y, x.shape),

@operator
class expand:
    """ broadcast x to `shape` """
    ain = ['x']
    trace = '%(y)s = expand(%(x)s, %(shape)s)'

    def apl(self, backend, x):
        return backend.expand(x, self.shape)

    def vjp(self, tape, _y, x):
        return tape.sum(_y, shape=x.shape),
