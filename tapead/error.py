class TapeError(Exception):
    """ Base class of errors raised by the tape engine. """
    pass

class DuplicatedName(TapeError, ValueError):
    """ A node name is allocated twice on the same tape.

        Gradients are accumulated by name; two nodes sharing a name would
        silently merge their gradients.
    """
    pass

class ForeignNode(TapeError, ValueError):
    """ A node created by another tape is used in an operation. """
    pass

class ShapeMismatch(TapeError, ValueError):
    """ The array backend received operands of incompatible shapes. """
    pass

class Unsupported(TapeError, NotImplementedError):
    """ The primitive is not available for the numeric backend of the tape. """
    pass

class BrokenOperator(TapeError):
    """ An operator class does not define the required attributes. """
    pass
