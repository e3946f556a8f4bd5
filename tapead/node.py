import weakref

class Node(object):
    """ A value in the computation graph.

        A node is created by a :class:`~tapead.tape.Tape`, either as a leaf
        (`var`, `named_var`) or as the output of an operation. The value
        and the name never change after creation.

        The gradient slot is written by :meth:`Tape.grad` whenever the node
        is among the wanted nodes; it is None until then, and None after a
        reverse pass the node did not take part in.

        A node is bound to its tape; this is useful for the operations
        to reject nodes from a different tape. The backend is held directly,
        such that a node outliving its tape can still show itself.
    """
    def __init__(self, tape, value, name):
        if not isinstance(name, str):
            raise TypeError("node name must be a str, got %s" % repr(type(name)))

        self._tape = weakref.ref(tape)
        self.backend = tape.backend
        self.value = value
        self.name = name
        self._grad = None

    @property
    def tape(self):
        return self._tape()

    @property
    def shape(self):
        return self.backend.dims(self.value)

    def gradient(self):
        """ The gradient node deposited by the latest reverse pass, or None. """
        return self._grad

    def __str__(self):
        return self.backend.display(self.value)

    def __repr__(self):
        return "[%s:%s]" % (self.name, _short_repr(self.value))

def _short_repr(obj):
    s = '%s' % obj
    if len(s) > 30:
        s = '[%s]' % type(obj).__name__
    return s
